"""
deckrender entrypoint - runs uvicorn server.
"""

import uvicorn

from deckrender.app import build_app
from deckrender.config import get_settings


def main() -> None:
    """Run the deckrender server."""
    settings = get_settings()
    app = build_app(settings)

    print(f"Starting deckrender on http://{settings.host}:{settings.port}")
    print(f"Docs: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
