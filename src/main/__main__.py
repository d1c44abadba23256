"""
Main module entry point.

This allows running the API server as: python -m src.main
"""

import uvicorn

from src.main.config import get_settings


def main() -> None:
    """Serve the FastAPI application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "src.main.app:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
