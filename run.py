"""
Runnable script for the Totems registry.
"""

import argparse

from totems.main import main

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Totems registry")
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create the database schema and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    main(init_only=args.init_db, debug=args.debug)
