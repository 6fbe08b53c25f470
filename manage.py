#!/usr/bin/env python3
"""
Operator commands for the Laundry Order API database.

The customer API never changes the catalog and never moves an order
past ``Pending`` except to cancel it.  These commands cover the
back-office side:

    python manage.py add-service --name "Dry cleaning" --material Wool --price 12.50
    python manage.py set-status --order <uuid> --status InProgress
    python manage.py issue-token --customer <uuid>

The database is taken from ``DATABASE_URL`` unless ``--db`` is given.
Migrations are applied before every command that touches the database.
"""

import argparse
import asyncio
import os
import sys
import uuid
from decimal import Decimal, InvalidOperation

from laundry_api.app.core.config import settings
from laundry_api.app.core.db import init_db
from laundry_api.app.core.exceptions import InvalidStateError, NotFoundError
from laundry_api.app.core.security import create_identity_token
from laundry_api.app.schemas.order import OrderStatus
from laundry_api.app.services.catalog_service import CatalogService
from laundry_api.app.services.order_service import OrderService


def _uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a UUID: {value}")


def _price(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a decimal: {value}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Laundry Order API operator commands.")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL)")
    sub = ap.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add-service", help="Add a service to the catalog")
    add.add_argument("--name", required=True)
    add.add_argument("--material", required=True)
    add.add_argument("--price", required=True, type=_price)
    add.add_argument("--id", type=_uuid, help="Use this id instead of a random one")

    status = sub.add_parser("set-status", help="Move an order to a new status")
    status.add_argument("--order", required=True, type=_uuid)
    status.add_argument("--status", required=True, choices=[s.value for s in OrderStatus])

    token = sub.add_parser("issue-token", help="Print a signed CustomerId header value")
    token.add_argument("--customer", required=True, type=_uuid)
    token.add_argument("--secret", help="Signing secret (defaults to IDENTITY_SECRET)")
    return ap


async def run(args: argparse.Namespace) -> int:
    if args.command == "issue-token":
        try:
            print(create_identity_token(args.customer, args.secret))
        except ValueError as e:
            print(f"[!] {e}", file=sys.stderr)
            return 1
        return 0

    init_db()
    if args.command == "add-service":
        try:
            service = await CatalogService.add_service(args.name, args.material, args.price, args.id)
        except ValueError as e:
            print(f"[!] {e}", file=sys.stderr)
            return 1
        print(f"[+] Added service {service.id}: {service.service_name} ({service.material_type}) {service.price}")
        return 0

    try:
        order = await OrderService.advance_status(args.order, OrderStatus(args.status))
    except NotFoundError as e:
        print(f"[!] {e.message}", file=sys.stderr)
        return 2
    except InvalidStateError as e:
        print(f"[!] {e.message}", file=sys.stderr)
        return 1
    print(f"[+] Order {order.id} is now {order.status.value}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.db:
        settings.database_url = os.path.abspath(args.db)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
