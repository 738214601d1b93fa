"""CLI to exercise the marketplace API routes against a running server.

Usage:
  poetry run check-routes health
  poetry run check-routes owners get 0xabc...
  poetry run check-routes collections top
  poetry run check-routes collections history 0x8113... --filters '{"limit": 5}'
"""
import argparse
import json
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _params(args: argparse.Namespace) -> dict[str, str]:
    filters = getattr(args, "filters", None)
    return {"filters": filters} if filters else {}


def _get(client: httpx.Client, path: str, args: argparse.Namespace) -> int:
    r = client.get(path, params=_params(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_health(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, "/", args)


def cmd_owners_list(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, "/owners", args)


def cmd_owners_get(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, f"/owners/{args.wallet}", args)


def cmd_owners_listing(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, f"/owners/{args.wallet}/{args.owners_cmd}", args)


def cmd_collections_list(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, "/collections", args)


def cmd_collections_top(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, "/collections/top", args)


def cmd_collections_detail(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, f"/collections/{args.contract}", args)


def cmd_collections_listing(client: httpx.Client, args: argparse.Namespace) -> int:
    return _get(client, f"/collections/{args.contract}/{args.collections_cmd}", args)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Exercise nft_marketplace API routes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET / health check")

    owners = subparsers.add_parser("owners", help="Owner routes (/owners)")
    owners_sub = owners.add_subparsers(dest="owners_cmd", required=True)
    p = owners_sub.add_parser("list", help="GET /owners")
    p.add_argument("--filters", default=None, help="JSON filter specification")
    p = owners_sub.add_parser("get", help="GET /owners/{wallet}")
    p.add_argument("wallet", help="Wallet address")
    for name in ("nfts", "history", "collections", "offers"):
        p = owners_sub.add_parser(name, help=f"GET /owners/{{wallet}}/{name}")
        p.add_argument("wallet", help="Wallet address")
        p.add_argument("--filters", default=None, help="JSON filter specification")

    collections = subparsers.add_parser("collections", help="Collection routes (/collections)")
    coll_sub = collections.add_subparsers(dest="collections_cmd", required=True)
    for name, help_text in [("list", "GET /collections"), ("top", "GET /collections/top")]:
        p = coll_sub.add_parser(name, help=help_text)
        p.add_argument("--filters", default=None, help="JSON filter specification")
    p = coll_sub.add_parser("detail", help="GET /collections/{contract}")
    p.add_argument("contract", help="Collection contract address")
    for name in ("owners", "items", "activity", "history"):
        p = coll_sub.add_parser(name, help=f"GET /collections/{{contract}}/{name}")
        p.add_argument("contract", help="Collection contract address")
        p.add_argument("--filters", default=None, help="JSON filter specification")

    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    handlers = {
        "owners": {
            "list": cmd_owners_list,
            "get": cmd_owners_get,
            "nfts": cmd_owners_listing,
            "history": cmd_owners_listing,
            "collections": cmd_owners_listing,
            "offers": cmd_owners_listing,
        },
        "collections": {
            "list": cmd_collections_list,
            "top": cmd_collections_top,
            "detail": cmd_collections_detail,
            "owners": cmd_collections_listing,
            "items": cmd_collections_listing,
            "activity": cmd_collections_listing,
            "history": cmd_collections_listing,
        },
    }

    if args.command == "health":
        handler = cmd_health
    else:
        handler = handlers[args.command][getattr(args, f"{args.command}_cmd")]

    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print_json(e.response.json())
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
