"""Run the Registrar API with uvicorn: python -m registrar.api"""

from __future__ import annotations

import uvicorn

from registrar.api.app import create_app
from registrar.config import Settings
from registrar.logging import setup_logging


def main() -> None:
    settings = Settings.from_env()
    setup_logging(
        log_dir=settings.log_dir,
        level=settings.log_level,
        console=settings.log_to_console,
    )
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    uvicorn.Server(config).run()


if __name__ == "__main__":
    main()
