"""Entry point for running the MCP server.

Usage:
    python -m server                                # Default persona (all Bill.com tools)
    python -m server --agent accounts_payable       # Load a persona
    python -m server --tools billcom_basic          # Load specific tool modules
    python -m server --all                          # Load all tool modules
"""

from .main import main

if __name__ == "__main__":
    main()
