"""Web API models."""
