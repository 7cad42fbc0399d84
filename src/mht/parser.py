"""mht parser: byte stream → ParseResult.

Single forward pass, one line at a time. Each declaration line becomes an
Item plus its Datapoints, which are handed to the ResultBuilder right away.
The first error aborts the whole parse; no partial result is returned.
"""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import BinaryIO

from src.contracts.address import Address, AddressError
from src.contracts.enums import (
    ALLOWED_TYPES,
    ItemKind,
    Role,
    TypeTag,
    default_type,
    kind_from_token,
    type_from_token,
)
from src.contracts.errors import ParseIoError, ParseSemanticError, ParseSyntaxError
from src.contracts.item import Datapoint, Item
from src.mht.grammar import (
    DEFAULT_CONFIG,
    F_BINDINGS,
    F_ICON,
    F_KIND,
    F_LABEL,
    F_NAME,
    BindingToken,
    ParserConfig,
    split_binding,
    split_line,
)
from src.mht.result import ParseResult, ResultBuilder

log = logging.getLogger(__name__)

NAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


# ── Input helpers ────────────────────────────────────────────────────────────


def _iter_lines(stream: Iterable[bytes]) -> Iterator[bytes]:
    """Yield raw lines; read failures surface as ParseIoError."""
    try:
        yield from stream
    except OSError as exc:
        raise ParseIoError(f"cannot read input: {exc}") from exc


def _decode(raw: bytes | str, line_no: int, config: ParserConfig) -> str:
    if isinstance(raw, str):
        text = raw
    else:
        try:
            text = raw.decode(config.encoding)
        except UnicodeDecodeError as exc:
            raise ParseSyntaxError(
                line_no, f"line is not valid {config.encoding}: {exc.reason}"
            ) from exc
    if line_no == 1:
        text = text.lstrip("\ufeff")
    return text


# ── Line → Item / Datapoints ─────────────────────────────────────────────────


def _build_item(fields: list[str], line_no: int) -> Item:
    kind = kind_from_token(fields[F_KIND])
    if kind is None:
        known = ", ".join(k.value for k in ItemKind)
        raise ParseSemanticError(
            line_no, f"unknown item kind '{fields[F_KIND]}' (expected one of: {known})"
        )

    name = fields[F_NAME]
    if not NAME_RE.match(name):
        raise ParseSemanticError(
            line_no, f"invalid item name '{name}' (letters, digits and '_' only)"
        )

    label = fields[F_LABEL] if len(fields) > F_LABEL else ""
    icon = fields[F_ICON] if len(fields) > F_ICON else ""
    return Item(
        name=name,
        kind=kind,
        label=label or None,
        icon=icon or None,
        line_no=line_no,
    )


def _resolve_type(item: Item, token: BindingToken, line_no: int) -> TypeTag | None:
    allowed = ALLOWED_TYPES[item.kind]
    if token.type_token is None:
        return default_type(item.kind)

    tag = type_from_token(token.type_token)
    if tag is None:
        raise ParseSemanticError(line_no, f"unknown type '{token.type_token}'")
    if tag not in allowed:
        names = ", ".join(t.value for t in allowed)
        raise ParseSemanticError(
            line_no,
            f"type '{tag.value}' is not supported by {item.kind.value} items (allowed: {names})",
        )
    return tag


def _build_datapoint(item: Item, raw: str, line_no: int) -> Datapoint:
    token = split_binding(raw, line_no)

    if not ALLOWED_TYPES[item.kind]:
        raise ParseSemanticError(
            line_no, f"{item.kind.value} item '{item.name}' cannot have bus bindings"
        )

    addresses: list[Address] = []
    for text in token.addresses:
        try:
            addr = Address.parse(text)
        except AddressError as exc:
            raise ParseSemanticError(line_no, str(exc)) from exc
        if addr in addresses:
            raise ParseSemanticError(line_no, f"address {addr} listed twice in '{raw}'")
        addresses.append(addr)

    return Datapoint(
        item_name=item.name,
        type_tag=_resolve_type(item, token, line_no),
        addresses=tuple(addresses),
        role=Role.LISTEN if token.listen_only else Role.COMMAND,
    )


def parse_line(
    raw: bytes | str,
    line_no: int,
    config: ParserConfig = DEFAULT_CONFIG,
) -> tuple[Item, list[Datapoint]] | None:
    """Parse a single line. Returns None for blank / comment lines."""
    fields = split_line(_decode(raw, line_no, config), line_no, config)
    if fields is None:
        return None
    item = _build_item(fields, line_no)
    datapoints = [_build_datapoint(item, f, line_no) for f in fields[F_BINDINGS:]]
    return item, datapoints


# ── Public API ───────────────────────────────────────────────────────────────


def parse(stream: BinaryIO, config: ParserConfig | None = None) -> ParseResult:
    """Parse an mht byte stream into a ParseResult.

    The caller owns *stream*; it is read to the end but not closed.

    Raises:
        ParseIoError: the stream could not be read.
        ParseSyntaxError: a line failed tokenization or field-count rules.
        ParseSemanticError: a line is well-formed but invalid.
    """
    cfg = config or DEFAULT_CONFIG
    builder = ResultBuilder()
    for line_no, raw in enumerate(_iter_lines(stream), 1):
        parsed = parse_line(raw, line_no, cfg)
        if parsed is None:
            continue
        item, datapoints = parsed
        builder.add(item, datapoints)
    return builder.build()


def parse_text(text: str, config: ParserConfig | None = None) -> ParseResult:
    cfg = config or DEFAULT_CONFIG
    return parse(io.BytesIO(text.encode(cfg.encoding)), cfg)


def parse_file(path: str | Path, config: ParserConfig | None = None) -> ParseResult:
    """Open *path*, parse it fully and close it on every exit path."""
    p = Path(path)
    try:
        fh = p.open("rb")
    except (OSError, ValueError) as exc:
        raise ParseIoError(f"cannot open {p}: {exc}") from exc
    with fh:
        result = parse(fh, config)
    log.info("Parsed %s: %d items, %d datapoints", p, len(result.items), len(result.datapoints))
    return result
