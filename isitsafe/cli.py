"""Command-line front end for the ingredient checker.

Usage:
    isitsafe scan 3017620422003
    isitsafe check "Sugar, palm oil, hazelnuts, skimmed milk powder"
    isitsafe blacklist add "Milk"
    isitsafe blacklist list
    isitsafe blacklist remove <id>
    isitsafe blacklist clear

Exit status is 0 when the product is safe (or the command succeeded),
1 when a blacklisted ingredient was found and 2 on a lookup or
blacklist error.
"""

from __future__ import annotations

import argparse
import sys

from isitsafe.config import settings
from isitsafe.engine.analyzer import is_safe_quick
from isitsafe.logger import configure_logging
from isitsafe.models import AnalysisResult
from isitsafe.services.blacklist_store import (
    BlacklistError,
    BlacklistStore,
    JsonFileBlacklistStore,
)
from isitsafe.services.product_lookup import OpenFoodFactsClient, ProductLookupError
from isitsafe.services.scanner import scan_barcode

EXIT_OK = 0
EXIT_UNSAFE = 1
EXIT_ERROR = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="isitsafe",
        description="Is It Safe? - check products against your ingredient blacklist",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  isitsafe blacklist add "Red 40"
  isitsafe scan 737628064502
  isitsafe check "Water, sugar, FD&C Red 40"
        """,
    )
    parser.add_argument("--blacklist-file", default=None, metavar="PATH",
                        help=f"Blacklist JSON file (default: {settings.blacklist_path})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    scan = commands.add_parser("scan", help="Look up a barcode and check it")
    scan.add_argument("barcode", help="Product barcode (EAN, UPC, ...)")

    check = commands.add_parser("check", help="Quick check of raw ingredient text")
    check.add_argument("ingredients", help="Ingredient list text")

    blacklist = commands.add_parser("blacklist", help="Manage the blacklist")
    actions = blacklist.add_subparsers(dest="action", required=True)
    actions.add_parser("list", help="Show blacklisted ingredients")
    add = actions.add_parser("add", help="Add an ingredient")
    add.add_argument("name")
    remove = actions.add_parser("remove", help="Remove an ingredient by id")
    remove.add_argument("item_id")
    actions.add_parser("clear", help="Remove every ingredient")

    return parser.parse_args(argv)


# ── Rendering ───────────────────────────────────────────────────────────────

def render_result(result: AnalysisResult) -> str:
    """Format a verdict for the terminal."""
    lines = [
        "=" * 50,
        f"   {result.product_name}",
    ]
    if result.barcode:
        lines.append(f"   Barcode: {result.barcode}")
    lines.append("=" * 50)

    if result.is_safe:
        lines.append("[+] SAFE - no blacklisted ingredients found")
    else:
        lines.append("[!] NOT SAFE - contains blacklisted ingredients:")
        lines.extend(f"    - {name}" for name in result.matched_ingredients)

    lines.append("")
    lines.append("Ingredients:")
    lines.append(f"  {result.full_ingredients_list}")
    return "\n".join(lines)


def _print_blacklist(store: BlacklistStore) -> None:
    items = store.load()
    if not items:
        print("Your blacklist is empty.")
        return
    print(f"{len(items)} blacklisted ingredient(s):")
    for item in items:
        print(f"  {item.id}  {item.name}")


# ── Commands ────────────────────────────────────────────────────────────────

def _announce_blacklist(store: BlacklistStore) -> None:
    count = len(store.load())
    if count == 0:
        print(
            "[!] No ingredients blacklisted yet - add some with "
            "'isitsafe blacklist add NAME'",
            file=sys.stderr,
        )
    else:
        print(f"[*] Checking against {count} blacklisted ingredient(s)...", file=sys.stderr)


def _run_scan(barcode: str, store: BlacklistStore) -> int:
    _announce_blacklist(store)
    with OpenFoodFactsClient() as lookup:
        result = scan_barcode(barcode, lookup, store)
    print(render_result(result))
    return EXIT_OK if result.is_safe else EXIT_UNSAFE


def _run_check(ingredients: str, store: BlacklistStore) -> int:
    _announce_blacklist(store)
    if is_safe_quick(ingredients, store.load()):
        print("[+] SAFE")
        return EXIT_OK
    print("[!] NOT SAFE")
    return EXIT_UNSAFE


def _run_blacklist(args: argparse.Namespace, store: BlacklistStore) -> int:
    if args.action == "add":
        items = store.add(args.name)
        print(f"[+] Added '{items[-1].name}' ({len(items)} item(s))")
    elif args.action == "remove":
        before = len(store.load())
        items = store.remove(args.item_id)
        if len(items) == before:
            print(f"[-] No item with id {args.item_id}")
        else:
            print(f"[+] Removed {args.item_id} ({len(items)} item(s) left)")
    elif args.action == "clear":
        store.clear()
        print("[+] Blacklist cleared")
    else:
        _print_blacklist(store)
    return EXIT_OK


def main(argv: list[str] | None = None, store: BlacklistStore | None = None) -> int:
    args = parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    if store is None:
        store = JsonFileBlacklistStore(
            args.blacklist_file or settings.blacklist_path,
            settings.blacklist_storage_key,
        )

    try:
        if args.command == "scan":
            return _run_scan(args.barcode, store)
        if args.command == "check":
            return _run_check(args.ingredients, store)
        return _run_blacklist(args, store)
    except ProductLookupError as exc:
        print(f"[-] {exc.message}", file=sys.stderr)
        return EXIT_ERROR
    except BlacklistError as exc:
        print(f"[-] {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
