"""
Main entry point for the Catering Logistics command-line tool.

This module runs the shopping list CLI and releases database connections
on exit.
"""

import sys
from typing import List, Optional

from src.services.database import close_connections
from src.utils import shopping_list_cli


def main(argv: Optional[List[str]] = None):
    """
    Main application entry point.

    Runs the requested CLI command and exits with its status code.
    """
    try:
        exit_code = shopping_list_cli.main(argv)
    finally:
        close_connections()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
