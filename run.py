"""Entry point for the PDF book catalogue service."""

import uvicorn

from bookshelf.config import load_config
from bookshelf.main import create_app


def main() -> None:
    """Load configuration and serve the API."""
    config = load_config()
    app = create_app(config)
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level=config.logging.level.lower())


if __name__ == "__main__":
    main()
