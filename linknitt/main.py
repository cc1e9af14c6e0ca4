"""
Main entry point for linknitt.

Creates the FastAPI application instance for uvicorn:

    uvicorn linknitt.main:app --port 5000

or run ``linknitt`` (installed console script), which honours PORT.
"""

import uvicorn

from linknitt.api.app import create_app
from linknitt.core.config import get_settings
from linknitt.core.logging import setup_structured_logging

settings = get_settings()
setup_structured_logging(log_file_path=settings.log_file_path)

app = create_app(settings)


def run() -> None:
    """Serve the application on the configured port."""
    uvicorn.run(app, host="0.0.0.0", port=settings.port)  # noqa: S104
