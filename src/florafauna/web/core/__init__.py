"""Web application core: configuration, container, factory and lifespan."""
