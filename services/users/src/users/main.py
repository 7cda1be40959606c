"""Entry point: ``python -m users`` or the ``users-api`` script."""

import uvicorn
from libs.relay_shared.logging import configure_logging, get_logger

from .app import create_app
from .config import UsersConfig

logger = get_logger(__name__)


def main() -> None:
    config = UsersConfig()
    configure_logging(config.log_level)

    app = create_app(config)
    logger.info(f"Users service listening on http://localhost:{config.port}")
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
