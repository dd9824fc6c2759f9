"""MCP Server - Main Entry Point.

This module provides the MCP server infrastructure that loads tool modules dynamically.
Tool modules are plugins in the tool_modules/ directory; each exposes
``register_tools(server, context)`` and receives the shared BillcomContext.

Usage:
    # Run the default persona (all Bill.com tools):
    python -m server

    # Run with a persona config:
    python -m server --agent accounts_payable

    # Run with specific tool modules:
    python -m server --tools billcom_basic,billcom_spend
"""

import argparse
import asyncio
import importlib
import logging
import os
import sys

from fastmcp import FastMCP

from tool_modules.aa_billcom.src.context import BillcomContext
from tool_modules.aa_billcom.src.config import load_settings
from tool_modules.aa_billcom.src.errors import ConfigurationError

from .config_manager import config as config_manager
from .persona_loader import get_available_modules, list_personas, load_persona_tools
from .tool_paths import get_tools_import_path

DEFAULT_PERSONA = "billcom"
DEFAULT_SERVER_NAME = "billcom"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure logging for MCP server.

    Format excludes timestamp; MCP clients timestamp captured stderr.
    Logs to stderr since stdout is reserved for JSON-RPC.
    """
    stream_handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(name)s - %(levelname)s - %(message)s",
        handlers=[stream_handler],
        force=True,
    )
    # httpx logs every request line at INFO, including query strings
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger(__name__)


def _load_single_tool_module(module_name: str, server: FastMCP, context: BillcomContext) -> int:
    """
    Import a tool module and register its tools.

    Args:
        module_name: Tool module name (e.g., "billcom_basic")
        server: FastMCP server instance
        context: Shared Bill.com context passed to register_tools

    Returns:
        Number of tools registered, 0 if the module has no register_tools
    """
    logger = logging.getLogger(__name__)

    module = importlib.import_module(get_tools_import_path(module_name))

    if not hasattr(module, "register_tools"):
        logger.warning(f"Module {module_name} has no register_tools function")
        return 0

    count = int(module.register_tools(server, context) or 0)
    logger.info(f"Loaded {module_name}: {count} tools")
    return count


def create_mcp_server(
    context: BillcomContext,
    name: str = DEFAULT_SERVER_NAME,
    tools: list[str] | None = None,
) -> FastMCP:
    """
    Create and configure an MCP server with the specified tool modules.

    Args:
        context: Shared Bill.com context handed to every module
        name: Server name for identification
        tools: Tool module names to load (e.g., ["billcom_basic"]).
               If None, loads all available modules.

    Returns:
        Configured FastMCP server instance
    """
    logger = logging.getLogger(__name__)
    server = FastMCP(name)

    available_modules = get_available_modules()

    if tools is None:
        # Base names duplicate their _basic variant; load suffixed variants only where they exist
        tools = sorted(
            m
            for m in available_modules
            if m.endswith(("_basic", "_extra", "_core")) or f"{m}_basic" not in available_modules
        )

    loaded_modules = []
    total = 0

    for module_name in tools:
        if module_name not in available_modules:
            logger.warning(f"Unknown tool module: {module_name}. Available: {sorted(available_modules)}")
            continue

        try:
            count = _load_single_tool_module(module_name, server, context)
        except (ImportError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Error loading {module_name}: {e}")
            continue

        if count:
            loaded_modules.append(module_name)
            total += count

    # Attach to server for access outside tool closures
    server.billcom = context

    logger.info(f"Server ready with {total} tools from {len(loaded_modules)} modules: {loaded_modules}")
    return server


async def run_mcp_server(server: FastMCP, context: BillcomContext):
    """Run the MCP server in stdio mode, closing the Bill.com context on exit.

    Args:
        server: FastMCP server instance
        context: Context to close (logout + HTTP client) on shutdown
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting MCP server (stdio mode)...")

    try:
        await server.run_stdio_async()
    finally:
        await context.aclose()


def resolve_tools(args: argparse.Namespace, logger: logging.Logger) -> tuple[list[str] | None, str]:
    """Work out which modules to load and the server name from CLI args."""
    if args.agent:
        tools = load_persona_tools(args.agent)
        if tools is None:
            logger.error(f"Persona config not found: {args.agent}")
            logger.info(f"Available personas: {', '.join(list_personas())}")
            sys.exit(1)
        logger.info(f"Loading persona '{args.agent}' with {len(tools)} modules: {tools}")
        return tools, args.name or f"billcom-{args.agent}"

    if args.all:
        return None, args.name or DEFAULT_SERVER_NAME

    if args.tools:
        return [t.strip() for t in args.tools.split(",") if t.strip()], args.name or DEFAULT_SERVER_NAME

    default_persona = config_manager.get_with_default("agent", "default_persona") or DEFAULT_PERSONA
    tools = load_persona_tools(default_persona)
    if tools is None:
        logger.info(f"Default persona '{default_persona}' not found, loading all modules")
        return None, args.name or DEFAULT_SERVER_NAME
    logger.info(f"Loading default persona '{default_persona}' with {len(tools)} modules: {tools}")
    return tools, args.name or DEFAULT_SERVER_NAME


def main():
    """Main entry point with tool selection."""
    available = sorted(get_available_modules())

    parser = argparse.ArgumentParser(
        description="Bill.com MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available tool modules (dynamically discovered):
  {', '.join(available)}

Available personas:
  {', '.join(list_personas())}

Examples:
  python -m server                                  # Default persona
  python -m server --agent spend                    # Spend & Expense tools only
  python -m server --tools billcom_basic,billcom_extra
        """,
    )
    parser.add_argument(
        "--agent",
        type=str,
        default="",
        help="Load tools for a persona from personas/<name>.yaml",
    )
    parser.add_argument(
        "--tools",
        type=str,
        default="",
        help="Comma-separated list of tool modules to load",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Load all available tool modules",
    )
    parser.add_argument(
        "--name",
        default="",
        help="Server name (default: based on persona or 'billcom')",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("BILLCOM_LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO, or BILLCOM_LOG_LEVEL)",
    )

    args = parser.parse_args()
    logger = setup_logging(args.log_level)

    for problem in config_manager.validate():
        logger.warning(f"config.json: {problem}")

    tools, server_name = resolve_tools(args, logger)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    context = BillcomContext.from_settings(settings)
    if not context.spend.is_configured():
        logger.info("BILLCOM_SPEND_API_TOKEN not set; Spend & Expense tools will report not configured")

    try:
        server = create_mcp_server(context, name=server_name, tools=tools)
        asyncio.run(run_mcp_server(server, context))
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")


if __name__ == "__main__":
    main()
