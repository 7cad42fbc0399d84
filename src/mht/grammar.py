"""Line grammar of the mht device-description format.

Every non-blank line that does not start with the comment prefix declares
one item::

    kind | name [ | label [ | icon { | binding } ] ]

    binding := [ "<" ] address { "," address } [ ":" type ]
    address := main "." middle "." sub       ("/" is accepted instead of ".")

Example::

    switch|Kitchen_Light|Kitchen Light|lightbulb|1.2.3:bool
    shade|Living_Blind|Blind|blinds|2.0.1:percent|2.0.2:updown|<2.0.3:stopmove

The delimiter, comment prefix and field-count limits come from
:class:`ParserConfig` so they can be changed in ``config/mht.yaml``.
Comments are whole-line only; a ``#`` inside a label is plain text.
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.contracts.errors import ConfigError, ParseSyntaxError
from src.shared.config_loader import load_yaml, section

log = logging.getLogger(__name__)

# Characters used inside fields; a delimiter must not be one of them.
_RESERVED = frozenset(".:/,<_")

LISTEN_PREFIX = "<"
TYPE_SEP = ":"
ADDRESS_SEP = ","

# Field positions
F_KIND, F_NAME, F_LABEL, F_ICON = 0, 1, 2, 3
F_BINDINGS = 4


# ── Configuration ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Format constants validated before any parsing starts."""

    delimiter: str = "|"
    comment_prefix: str = "#"
    min_fields: int = 2
    max_fields: int | None = 32
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        for name in ("delimiter", "comment_prefix", "encoding"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigError(f"{name} must be a string, got {type(value).__name__}")

        d = self.delimiter
        if len(d) != 1:
            raise ConfigError(f"delimiter must be a single character, got {d!r}")
        if d.isalnum() or d.isspace() or d in _RESERVED:
            raise ConfigError(f"delimiter {d!r} collides with field content")

        prefix = self.comment_prefix
        if not prefix or prefix.strip() != prefix:
            raise ConfigError(f"invalid comment prefix {prefix!r}")
        # a prefix starting like a kind token would turn declarations into comments
        if prefix[0].isalnum() or prefix[0] == "_":
            raise ConfigError(f"comment prefix {prefix!r} collides with item kinds")
        if prefix.startswith(d):
            raise ConfigError("comment prefix must not start with the delimiter")

        if self.min_fields < 2:
            raise ConfigError(f"min_fields must be >= 2 (kind, name), got {self.min_fields}")
        if self.max_fields is not None and self.max_fields < self.min_fields:
            raise ConfigError(
                f"max_fields ({self.max_fields}) is smaller than min_fields ({self.min_fields})"
            )

        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ConfigError(f"unknown encoding {self.encoding!r}") from exc
        # lines are split on the raw b"\n" byte before decoding
        try:
            newline_ok = b"\n".decode(self.encoding) == "\n"
        except (LookupError, UnicodeError):
            newline_ok = False
        if not newline_ok:
            raise ConfigError(
                f"encoding {self.encoding!r} is not ASCII-compatible "
                "(line breaks must be a single b'\\n' byte)"
            )


DEFAULT_CONFIG = ParserConfig()


def build_config(mapping: dict[str, Any]) -> ParserConfig:
    """Build a ParserConfig from the ``parser`` section of a config dict."""
    cfg = section(mapping, "parser")
    known = {"delimiter", "comment_prefix", "min_fields", "max_fields", "encoding"}
    unknown = set(cfg) - known
    if unknown:
        raise ConfigError(f"unknown parser option(s): {', '.join(sorted(unknown))}")
    try:
        result = ParserConfig(**cfg)
    except TypeError as exc:
        raise ConfigError(f"invalid parser option: {exc}") from exc
    log.debug("Parser config: delimiter=%r, fields=%s..%s", result.delimiter,
              result.min_fields, result.max_fields)
    return result


def load_parser_config(path: str | Path) -> ParserConfig:
    return build_config(load_yaml(path))


# ── Tokenizing ───────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class BindingToken:
    """A binding field split into its raw parts, not yet validated."""

    addresses: tuple[str, ...]
    type_token: str | None
    listen_only: bool


def split_line(text: str, line_no: int, config: ParserConfig) -> list[str] | None:
    """Split one decoded line into stripped fields.

    Returns None for blank and comment lines.

    Raises:
        ParseSyntaxError: field count outside the configured limits, or an
            empty kind / name field.
    """
    stripped = text.strip()
    if not stripped or stripped.startswith(config.comment_prefix):
        return None

    fields = [f.strip() for f in stripped.split(config.delimiter)]
    n = len(fields)
    if n < config.min_fields:
        raise ParseSyntaxError(
            line_no,
            f"expected at least {config.min_fields} fields separated by "
            f"{config.delimiter!r}, got {n}",
        )
    if config.max_fields is not None and n > config.max_fields:
        raise ParseSyntaxError(line_no, f"expected at most {config.max_fields} fields, got {n}")
    if not fields[F_KIND]:
        raise ParseSyntaxError(line_no, "missing item kind")
    if not fields[F_NAME]:
        raise ParseSyntaxError(line_no, "missing item name")
    return fields


def split_binding(token: str, line_no: int) -> BindingToken:
    """Split ``[<]addr[,addr...][:type]`` into its parts."""
    text = token.strip()
    if not text:
        raise ParseSyntaxError(line_no, "empty binding field")

    listen_only = text.startswith(LISTEN_PREFIX)
    if listen_only:
        text = text[len(LISTEN_PREFIX):].strip()

    if text.count(TYPE_SEP) > 1:
        raise ParseSyntaxError(line_no, f"binding '{token}' has more than one '{TYPE_SEP}'")
    addr_part, sep, type_part = text.partition(TYPE_SEP)
    type_token = type_part.strip() if sep else None
    if sep and not type_token:
        raise ParseSyntaxError(line_no, f"binding '{token}' has an empty type after '{TYPE_SEP}'")

    addresses = tuple(a.strip() for a in addr_part.split(ADDRESS_SEP))
    if not any(addresses) or not all(addresses):
        raise ParseSyntaxError(line_no, f"binding '{token}' has an empty address")

    return BindingToken(addresses=addresses, type_token=type_token, listen_only=listen_only)
