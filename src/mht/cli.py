"""CLI entry-point for the mht parser.

Usage examples
--------------
# Summary of a file:
python -m src.mht --input config/sample.mht

# Which items listen on a group address, as JSON:
python -m src.mht --input config/sample.mht --address 1.2.3 --format json

# Reparse whenever the file changes:
python -m src.mht --input config/sample.mht --watch
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from src.contracts.address import Address, AddressError
from src.contracts.enums import Role
from src.contracts.errors import ParseError
from src.mht.grammar import DEFAULT_CONFIG, ParserConfig, load_parser_config
from src.mht.lookup import datapoint_for, icon_for, item_for, label_for, listening_item_names
from src.mht.parser import parse_file
from src.mht.result import ParseResult
from src.provider.item_provider import MhtItemProvider
from src.provider.watcher import SourceWatcher
from src.provider.widgets import default_widget
from src.shared.logger import setup_logging

log = logging.getLogger(__name__)


def _address_arg(text: str) -> Address:
    try:
        return Address.parse(text)
    except AddressError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mht",
        description="mht parser — device-description file -> items, datapoints, address index",
    )
    p.add_argument(
        "--input",
        default="config/sample.mht",
        help="mht file to parse. Default: config/sample.mht",
    )
    p.add_argument(
        "--config",
        default=None,
        help="YAML config with a 'parser' section (delimiter, field limits). "
             "Default: built-in format",
    )
    p.add_argument(
        "--address",
        action="append",
        type=_address_arg,
        default=[],
        metavar="ADDR",
        help="Show items listening on a group address (repeatable), e.g. 1.2.3",
    )
    p.add_argument(
        "--item",
        action="append",
        default=[],
        metavar="NAME",
        help="Show label, icon, widget and datapoints of an item (repeatable)",
    )
    p.add_argument(
        "--format",
        default="text",
        choices=["text", "json"],
        help="Output format. Default: text",
    )
    # Watch mode flags
    p.add_argument(
        "--watch",
        action="store_true",
        default=False,
        help="Keep running and reparse the input whenever it changes.",
    )
    p.add_argument(
        "--poll-interval-ms",
        type=int,
        default=1000,
        help="Poll interval for watch mode, ms (default: 1000).",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO",
    )
    return p


# ── Report building ──────────────────────────────────────────────────────────


def _item_report(result: ParseResult, name: str) -> dict[str, Any] | None:
    item = item_for(result, name)
    if item is None:
        return None
    widget = default_widget(result, name)
    return {
        **item.to_dict(),
        "label": label_for(result, name),
        "icon": icon_for(result, name),
        "widget": widget.type.value if widget else None,
        "datapoints": [
            dp.to_dict() for (owner, _), dp in result.datapoints.items() if owner == name
        ],
    }


def _address_report(result: ParseResult, address: Address) -> dict[str, Any]:
    names = listening_item_names(result, address)
    tag = result.types.get(address)
    return {
        "address": str(address),
        "type": tag.value if tag else None,
        "items": names,
        "command_items": [
            n for n in names
            if (dp := datapoint_for(result, n, address)) is not None
            and dp.main_address == address
            and dp.role is Role.COMMAND
        ],
    }


def build_report(
    result: ParseResult,
    addresses: list[Address],
    item_names: list[str],
) -> dict[str, Any]:
    report: dict[str, Any] = {
        "summary": {
            "items": len(result.items),
            "datapoints": len(result.datapoints),
            "addresses": len(result.types),
        },
    }
    if addresses:
        report["addresses"] = [_address_report(result, a) for a in addresses]
    if item_names:
        report["items"] = {n: _item_report(result, n) for n in item_names}
    if not addresses and not item_names:
        report["model"] = result.to_dict()
    return report


def format_text(result: ParseResult, report: dict[str, Any]) -> str:
    s = report["summary"]
    lines = [f"{s['items']} items, {s['datapoints']} datapoints, {s['addresses']} addresses"]

    if "model" in report:
        for item in result.items:
            bindings = [
                f"{dp.type_tag.value}@{','.join(str(a) for a in dp.addresses)}"
                + ("(listen)" if dp.role is Role.LISTEN else "")
                for (owner, _), dp in result.datapoints.items()
                if owner == item.name
            ]
            lines.append(
                f"  {item.kind.value:<12} {item.name:<24} "
                f"{item.label or '-':<24} {item.icon or '-':<12} {' '.join(bindings)}"
            )

    for entry in report.get("addresses", []):
        names = ", ".join(entry["items"]) or "(none)"
        lines.append(f"  {entry['address']} [{entry['type'] or 'unbound'}] -> {names}")

    for name, info in report.get("items", {}).items():
        if info is None:
            lines.append(f"  {name}: not found")
            continue
        lines.append(
            f"  {name}: kind={info['kind']} label={info['label']!r} "
            f"icon={info['icon']!r} widget={info['widget']}"
        )
        for dp in info["datapoints"]:
            lines.append(f"    {dp['type']:<10} {dp['role']:<7} {', '.join(dp['addresses'])}")

    return "\n".join(lines)


def render(result: ParseResult, args: argparse.Namespace) -> str:
    report = build_report(result, args.address, args.item)
    if args.format == "json":
        return json.dumps(report, indent=2, ensure_ascii=False)
    return format_text(result, report)


# ── Entry point ──────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    parser_config: ParserConfig = (
        load_parser_config(args.config) if args.config else DEFAULT_CONFIG
    )

    if args.watch:
        provider = MhtItemProvider(parser_config)
        provider.add_listener(
            lambda prov: print(render(prov.result, args))
        )
        SourceWatcher(
            provider,
            args.input,
            poll_interval_sec=args.poll_interval_ms / 1000.0,
        ).run()
        return

    try:
        result = parse_file(args.input, parser_config)
    except ParseError as exc:
        log.error("Cannot parse %s: %s", args.input, exc)
        raise SystemExit(1) from exc
    print(render(result, args))


if __name__ == "__main__":
    main()
