"""Entry point: ``python -m chat [--mcp]`` or the ``chat-relay`` script."""

import argparse
import asyncio
import sys
from typing import List, Optional

import uvicorn
from libs.relay_shared.logging import configure_logging, get_logger

from .app import create_app
from .config import ChatConfig
from .exceptions import ProviderError
from .mcp_server import create_mcp_server

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat relay server")
    parser.add_argument(
        "--mcp",
        action="store_true",
        help="Also expose the tools as an MCP server on stdio",
    )
    return parser.parse_args(argv)


async def serve(config: ChatConfig, with_mcp: bool) -> None:
    app = create_app(config)
    orchestrator = app.state.orchestrator

    # Fail fast when the model backend is unusable
    try:
        await orchestrator.provider.health()
    except ProviderError as e:
        logger.error(f"Cannot reach model backend: {e}")
        sys.exit(1)

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host="0.0.0.0",
            port=config.port,
            log_level=config.log_level.lower(),
            # uvicorn access logs go to stdout
            access_log=not with_mcp,
        )
    )
    logger.info(f"Chat relay running on http://localhost:{config.port}")

    if not with_mcp:
        await server.serve()
        return

    mcp = create_mcp_server(orchestrator.registry)
    logger.info("MCP Server via stdio started")
    await asyncio.gather(server.serve(), mcp.run_stdio_async())


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    config = ChatConfig()
    # stdout belongs to the MCP transport in --mcp mode
    configure_logging(config.log_level, sys.stderr if args.mcp else None)

    try:
        asyncio.run(serve(config, args.mcp))
    except ProviderError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Gracefully shutting down...")


if __name__ == "__main__":
    main()
