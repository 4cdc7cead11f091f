"""
Schema-Form MCP server launcher.

    python run_mcp_server.py                          # stdio
    python run_mcp_server.py --transport sse --port 9000

Defaults come from MCP_TRANSPORT, MCP_PORT and SCHEMA_FORM_LOG_LEVEL
(a .env file is honoured).
"""

import argparse
import asyncio
import logging
import sys

from schema_form.config import get_config
from schema_form.mcp_server import run_mcp_server

logger = logging.getLogger("schema-form-mcp")


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="run_mcp_server.py",
        description="Serve schema-form validation tools over MCP.",
    )
    parser.add_argument(
        "--transport",
        choices=("stdio", "sse"),
        default=config.mcp_transport,
        help="stdio for local clients, sse for remote ones (default: %(default)s)",
    )
    parser.add_argument("--host", default="0.0.0.0", help="SSE bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=config.mcp_port, help="SSE port (default: %(default)s)")
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        help="(default: %(default)s)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # stdout carries the protocol in stdio mode
    logging.basicConfig(level=args.log_level, stream=sys.stderr)

    try:
        asyncio.run(run_mcp_server(transport=args.transport, host=args.host, port=args.port))
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        logger.error(f"Server failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
