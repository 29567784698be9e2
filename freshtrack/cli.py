"""CLI entry point for FreshTrack."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import load_config
from .engine import FreshTrackEngine
from .errors import ParseError
from .expiry import classify
from .scan import ScannedItem, ScanResult, validate

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="freshtrack",
        description="FreshTrack: track scanned groceries and get expiry reminders",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML config file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # validate
    validate_parser = sub.add_parser("validate", help="Validate a scanned payload")
    validate_parser.add_argument("payload", help="Payload file ('-' for stdin)")
    validate_parser.add_argument("--json", action="store_true", help="Output JSON")

    # list
    list_parser = sub.add_parser(
        "list", help="Add scanned payloads and list the inventory"
    )
    list_parser.add_argument("payloads", nargs="+", help="Payload files")
    list_parser.add_argument(
        "--category", type=str, default=None, help="Only show one category"
    )
    list_parser.add_argument("--json", action="store_true", help="Output JSON")
    list_parser.add_argument(
        "--yes", "-y", action="store_true", help="Add valid items without asking"
    )

    # watch
    watch_parser = sub.add_parser(
        "watch", help="Add scanned payloads and send expiry reminders until stopped"
    )
    watch_parser.add_argument("payloads", nargs="+", help="Payload files")
    watch_parser.add_argument(
        "--yes", "-y", action="store_true", help="Add valid items without asking"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.logging.level,
        format=_LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    match args.command:
        case "validate":
            _cmd_validate(args)
        case "list":
            _cmd_list(config, args)
        case "watch":
            _cmd_watch(config, args)


def _read_payload(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Could not read payload: {e}", file=sys.stderr)
        sys.exit(1)


def _scan(path: str) -> ScanResult:
    try:
        return validate(_read_payload(path))
    except ParseError as e:
        print(f"QR code parsing error ({path}): {e}", file=sys.stderr)
        sys.exit(1)


def _cmd_validate(args) -> None:
    result = _scan(args.payload)

    if args.json:
        data = {
            "valid": [i.to_dict() for i in result.valid],
            "errors": [
                {
                    "item_label": e.item_label,
                    "missing_fields": e.missing_fields,
                    "invalid_fields": e.invalid_fields,
                }
                for e in result.errors
            ],
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    _print_scan(result)


def _print_scan(result: ScanResult) -> None:
    if result.has_errors:
        print("Some items could not be read:")
        print(result.summary())
    if result.valid:
        print(f"Valid items ({len(result.valid)}):")
        for item in result.valid:
            print(
                f"  {item.item_name:<20} [{item.category.value}] "
                f"expires {item.expiry_date.isoformat()}"
            )
    elif result.has_errors:
        print("None of the items had the correct format.")


def _confirm(items: list[ScannedItem], assume_yes: bool) -> list[ScannedItem]:
    if not items or assume_yes:
        return items
    try:
        answer = input(f"Add {len(items)} item(s)? [y/N] ").strip().lower()
    except EOFError:
        answer = ""
    return items if answer in ("y", "yes") else []


def _load_payloads(engine: FreshTrackEngine, args) -> None:
    for path in args.payloads:
        result = _scan(path)
        _print_scan(result)
        approved = _confirm(result.valid, args.yes)
        ids = engine.confirm(approved)
        if ids:
            print(f"Added {len(ids)} item(s).")


def _cmd_list(config, args) -> None:
    engine = FreshTrackEngine(config)
    _load_payloads(engine, args)

    try:
        items = engine.items(args.category)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    today = engine.notifier.today
    if args.json:
        data = []
        for item in items:
            info = classify(item.expiry_date, today)
            data.append({
                **item.to_dict(),
                "status": info.status.value,
                "days_remaining": info.days_remaining,
            })
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not items:
        print("Your grocery list is empty.")
        return
    print(f"\nInventory ({len(items)} item(s)):")
    for item in items:
        info = classify(item.expiry_date, today)
        print(
            f"  {item.item_name:<20} {item.category.value:<8} "
            f"{item.expiry_date.isoformat()}  {info.label}"
        )


def _cmd_watch(config, args) -> None:
    # Prompts run before the event loop starts
    engine = FreshTrackEngine(config)
    _load_payloads(engine, args)

    print(
        f"Watching {len(engine.store)} item(s); "
        f"checking every {config.scheduler.poll_interval}s. Ctrl-C to stop."
    )
    try:
        asyncio.run(_watch(engine))
    except KeyboardInterrupt:
        print("Stopped.")


async def _watch(engine: FreshTrackEngine) -> None:
    async with engine:
        await asyncio.Event().wait()


if __name__ == "__main__":
    main()
