"""Command-line entry point: load NOTEVAULT_* settings, configure logging, serve."""

import structlog

from notevault.app import App
from notevault.config import Config
from notevault.logging import setup_logging
from notevault.web.runner import run_server

logger = structlog.get_logger(__name__)


def main() -> None:
    config = Config()  # type: ignore[call-arg]  # database_url comes from the environment
    setup_logging(config.debug)
    logger.info(
        "server_starting",
        host=config.host,
        port=config.port,
        environment=config.environment,
        session_retention_days=config.session_retention_days,
    )
    run_server(App(config), config)


if __name__ == "__main__":
    main()
