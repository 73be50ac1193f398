"""
shopdesk.api.__main__

Entrypoint for running the FastAPI application via `python -m shopdesk.api`.
"""

from __future__ import annotations

import uvicorn

from shopdesk.api.app import create_app
from shopdesk.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
        access_log=False,  # RequestContextMiddleware logs requests
    )


if __name__ == "__main__":
    main()
