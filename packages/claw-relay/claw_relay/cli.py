"""Command-line entry point: ``python -m claw_relay``."""
from __future__ import annotations

import argparse
import logging

import uvicorn

from claw_relay.app import create_app
from claw_relay.config import RelayConfig

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    config = RelayConfig.from_env()
    parser = argparse.ArgumentParser(description="Claw machine relay server")
    parser.add_argument(
        "--host", default=config.host,
        help=f"Interface to bind (default: {config.host})",
    )
    parser.add_argument(
        "--port", type=int, default=config.port,
        help=f"Port to listen on (default: {config.port}, or $PORT)",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "claw relay on %s:%d, webhook %s, max tries %d, claw strength %d",
        args.host, args.port, config.bot_webhook_url or "not configured",
        config.max_tries, config.claw_strength,
    )
    uvicorn.run(
        create_app(config), host=args.host, port=args.port, log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
