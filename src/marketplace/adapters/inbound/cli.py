from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from returns.result import Success

from marketplace.adapters.outbound.bcrypt_credentials import hash_secret
from marketplace.adapters.outbound.json_file_documents import JsonFileDocumentStore
from marketplace.adapters.outbound.logging_events import LoggingEventPublisher
from marketplace.bootstrap import configure_logging, initialize_documents
from marketplace.config import StorageSettings
from marketplace.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from marketplace.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderLine,
    PlaceOrderUseCase,
)


def run_place_order(usecase: PlaceOrderUseCase, raw: str) -> int:
    """
    raw: JSON string in the same shape as the HTTP checkout body.
    Example:
      {"customerName":"Ada","customerEmail":"ada@example.com",
       "customerPhone":"555","customerAddress":"1 Main St",
       "items":[{"productId":"<id>","qty":2}]}
    """
    try:
        payload = json.loads(raw)
        cmd = _parse_command(payload)
    except (ValueError, TypeError, AttributeError) as e:
        print(f"invalid_input: {e}")
        return 2

    result = usecase.place_order(cmd)

    if isinstance(result, Success):
        receipt = result.unwrap()
        print(
            "[ok]",
            json.dumps({"orderId": receipt.order_id.value, "total": receipt.total.to_json()}),
        )
        return 0

    print("[ng]", str(result.failure()))
    return 1


def _parse_command(payload: dict[str, Any]) -> PlaceOrderCommand:
    lines = [
        PlaceOrderLine(product_id=str(x.get("productId") or ""), qty=x.get("qty"))
        for x in payload.get("items") or []
    ]
    return PlaceOrderCommand(
        customer_name=payload.get("customerName"),
        customer_email=payload.get("customerEmail"),
        customer_phone=payload.get("customerPhone"),
        customer_address=payload.get("customerAddress"),
        lines=lines,
    )


def _parser() -> argparse.ArgumentParser:
    storage = argparse.ArgumentParser(add_help=False)
    storage.add_argument(
        "--data-dir",
        type=Path,
        default=argparse.SUPPRESS,
        help="defaults to MARKETPLACE_DATA_DIR, then ./data",
    )

    parser = argparse.ArgumentParser(prog="marketplace-admin", parents=[storage])
    sub = parser.add_subparsers(dest="command", required=True)

    hash_cmd = sub.add_parser("hash-secret", help="print a bcrypt hash for settings")
    hash_cmd.add_argument("value")
    hash_cmd.add_argument("--rounds", type=int, default=12)

    seed_cmd = sub.add_parser(
        "seed", parents=[storage], help="create the data documents if missing"
    )
    seed_cmd.add_argument("--no-demo", action="store_true")

    order_cmd = sub.add_parser(
        "place-order", parents=[storage], help="place an order from a JSON body"
    )
    order_cmd.add_argument("payload")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging("WARNING")

    if args.command == "hash-secret":
        print(hash_secret(args.value, rounds=args.rounds))
        return 0

    data_dir = getattr(args, "data_dir", None) or StorageSettings().data_dir
    documents = JsonFileDocumentStore(data_dir)

    if args.command == "seed":
        initialize_documents(documents, seed_demo=not args.no_demo)
        print(f"documents ready in {data_dir}")
        return 0

    svc = PlaceOrderService(
        PlaceOrderDeps(documents=documents, events=LoggingEventPublisher())
    )
    return run_place_order(svc, args.payload)


if __name__ == "__main__":
    raise SystemExit(main())
