"""Entry point that serves the Church Portal API with uvicorn.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``8000``).

Usage:
    python run.py
"""
import uvicorn

from church_portal_api.app.core.config import settings


def main() -> None:
    uvicorn.run(
        "church_portal_api.app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
