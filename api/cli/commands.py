"""Operator commands over the cart repository."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from domain import Cart
from shared.config import load_config
from shared.exceptions import ConfigurationError, SharedError
from storage import CartRepository, open_cart_repository

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cart document store tool")
    parser.add_argument(
        "--table",
        help="Override the carts table name (POSTGRES_CARTS_TABLE)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-schema", help="Create the carts table and customer index")
    sub.add_parser("health", help="Check that the store answers")

    get = sub.add_parser("get", help="Print a cart as JSON")
    get.add_argument("cart_id")

    by_customer = sub.add_parser("by-customer", help="Print all carts of a customer")
    by_customer.add_argument("customer_id")

    put = sub.add_parser("put", help="Insert or replace a cart from JSON")
    put.add_argument("source", help="Path to a JSON file, or - for stdin")
    put.add_argument(
        "--expected-version",
        help="Only replace the cart if its stored version matches",
    )

    delete = sub.add_parser("delete", help="Remove a cart")
    delete.add_argument("cart_id")
    return parser


def _read_cart(source: str, stdin: TextIO) -> Cart:
    text = stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    return Cart.from_dict(json.loads(text))


def run_command(
    args: argparse.Namespace,
    repository: CartRepository,
    out: TextIO = sys.stdout,
    stdin: TextIO = sys.stdin,
) -> int:
    """Execute one parsed command against ``repository``; return an exit code."""
    command = args.command
    try:
        if command == "init-schema":
            repository.ensure_schema()
            print(f"[ok] schema ready for table {repository.table}", file=out)
            return EXIT_OK

        if command == "health":
            healthy = repository.health_check()
            print("[ok] healthy" if healthy else "[error] unhealthy", file=out)
            return EXIT_OK if healthy else EXIT_NOT_FOUND

        if command == "get":
            cart = repository.get_by_id(args.cart_id)
            if cart is None:
                print(f"[error] cart {args.cart_id} not found", file=out)
                return EXIT_NOT_FOUND
            print(json.dumps(cart.to_dict(), indent=2), file=out)
            return EXIT_OK

        if command == "by-customer":
            carts = repository.get_by_customer_id(args.customer_id)
            print(json.dumps([c.to_dict() for c in carts], indent=2), file=out)
            return EXIT_OK

        if command == "put":
            try:
                cart = _read_cart(args.source, stdin)
            except (OSError, ValueError, TypeError, KeyError) as exc:
                print(f"[error] invalid cart input: {exc}", file=out)
                return EXIT_ERROR
            version = repository.upsert(cart, expected_version=args.expected_version)
            print(f"[ok] stored {cart.id} version={version}", file=out)
            return EXIT_OK

        if command == "delete":
            if repository.delete(args.cart_id):
                print(f"[ok] deleted {args.cart_id}", file=out)
                return EXIT_OK
            print(f"[error] cart {args.cart_id} not found", file=out)
            return EXIT_NOT_FOUND
    except SharedError as exc:
        print(f"[error] {exc}", file=out)
        return EXIT_ERROR

    print(f"[error] unknown command: {command}", file=out)
    return EXIT_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for `python -m api.cli`."""
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config()
    if args.table:
        config.table_name = args.table

    try:
        repository = open_cart_repository(config, bootstrap=False)
    except ConfigurationError as exc:
        print(f"[error] {exc}")
        return EXIT_ERROR
    try:
        return run_command(args, repository)
    finally:
        repository.pool.close()


__all__ = ["create_parser", "run_command", "main"]
