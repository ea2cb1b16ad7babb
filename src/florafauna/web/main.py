"""Flora & Fauna web application."""

import logging

import uvicorn

from florafauna.web.core.factory import create_app

# Disable uvicorn access logger; errors and startup messages are kept
logging.getLogger("uvicorn.access").disabled = True

app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run("florafauna.web.main:app", host="0.0.0.0", port=8000)  # nosemgrep
