"""Main entry point for the event relay."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from relay.api import create_fastapi_app
from relay.app import Application
from relay.config import RelaySettings
from relay.logging_config import setup_logging


def main():
    """Run the relay."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    setup_logging()
    settings = RelaySettings.from_env()

    app = create_fastapi_app(Application(settings=settings))

    # Run with uvicorn; logging is already configured above
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
