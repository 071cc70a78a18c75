"""Supply-chain game API entrypoint."""

from __future__ import annotations

import uvicorn

from supplychain_backend.api import create_api
from supplychain_backend.settings import get_settings
from supplychain_backend.shared.logger import configure_logging

configure_logging(get_settings().log_level)

app = create_api()


def _run_uvicorn(*, reload: bool) -> None:
    """Start uvicorn with a consistent configuration."""
    config = get_settings()
    uvicorn.run(
        "supplychain_backend.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


def run_dev() -> None:
    """Run the development ASGI server with auto-reload."""
    _run_uvicorn(reload=True)


def run_prod() -> None:
    """Run the production ASGI server without auto-reload."""
    _run_uvicorn(reload=False)
