"""CLI entry point for running as `python -m api.cli`.

Usage:
    python -m api.cli init-schema           # Create table and index
    python -m api.cli health                # Round-trip check
    python -m api.cli get cart-1            # Print one cart as JSON
    python -m api.cli by-customer cust-42   # Print a customer's carts
    python -m api.cli put cart.json         # Upsert from a file (- for stdin)
    python -m api.cli delete cart-1         # Remove a cart
"""

import sys

from .commands import main


if __name__ == "__main__":
    sys.exit(main())
