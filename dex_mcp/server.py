"""
MCP server exposing Dex contacts, notes and reminders as tools.

Runs over stdio by default, or streamable HTTP when --host and --port are
given.
"""

from __future__ import annotations

import argparse
import json
import logging

from mcp.server.fastmcp import FastMCP

from .config.logging_setup import configure_logging
from .config.settings import get_settings
from .tools import discovery as discovery_tools
from .tools import enrichment as enrichment_tools
from .tools import history as history_tools

logger = logging.getLogger(__name__)


def _make_server() -> FastMCP:
    mcp = FastMCP(
        name="dex-mcp-server",
        instructions=(
            "Access the user's Dex personal CRM. Use find_contact or "
            "search_contacts_full_text to locate people, the history tools to "
            "review past interactions, and the enrichment tools to record new "
            "information, notes and reminders."
        ),
    )
    discovery_tools.bind(mcp)
    history_tools.bind(mcp)
    enrichment_tools.bind(mcp)
    return mcp


def main() -> None:
    parser = argparse.ArgumentParser(description="dex-mcp: MCP server for the Dex personal CRM")
    parser.add_argument("--host", default=None, help="HTTP host (optional)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (optional)")
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print current configuration and exit",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings, level=args.log_level)

    if args.print_config:
        config = settings.model_dump(mode="json")
        config["dex_api_key"] = settings.masked_api_key()
        print(json.dumps(config, indent=2))
        return

    if not settings.dex_api_key:
        parser.error("DEX_API_KEY environment variable is required")

    logger.info(f"Starting dex-mcp-server v{settings.version}")
    mcp = _make_server()
    if args.host and args.port:
        mcp.settings.host = args.host
        mcp.settings.port = args.port
        mcp.run(transport="streamable-http")
    else:
        mcp.run()


if __name__ == "__main__":
    main()
