from __future__ import annotations
import logging
import uvicorn
from repo_portfolio.infrastructure.config import load_settings
from repo_portfolio.interface.app import create_app

def main() -> None:
    """Start the uvicorn ASGI server."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
