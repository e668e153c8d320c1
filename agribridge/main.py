"""
AgriBridge localization service - main entry point.

    python -m agribridge.main
    # or
    uvicorn agribridge.api.app:app --reload
"""

from __future__ import annotations

import logging

import uvicorn

from agribridge.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "agribridge.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
    )


if __name__ == "__main__":
    main()
