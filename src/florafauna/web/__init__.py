"""FastAPI web interface for browsing species and building the offline library."""
