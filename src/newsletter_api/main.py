"""Main application entry point for the FastAPI application.

Run with ``uvicorn newsletter_api.main:app``.
"""

import uvicorn

from newsletter_api.core.application import create_application
from newsletter_api.core.initialization import initialize_application

# Initialize the application
settings = initialize_application()

# Create the FastAPI application
app = create_application(settings)


def run() -> None:
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
