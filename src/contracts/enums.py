"""Canonical enumerations for the item model."""

from __future__ import annotations

from enum import Enum


class ItemKind(str, Enum):
    SWITCH = "switch"
    MEASUREMENT = "measurement"
    CONTACT = "contact"
    SHADE = "shade"
    STRING = "string"
    GROUP = "group"


class TypeTag(str, Enum):
    BOOL = "bool"
    PERCENT = "percent"
    DECIMAL = "decimal"
    OPEN_CLOSED = "openclosed"
    UP_DOWN = "updown"
    STOP_MOVE = "stopmove"
    DIMMER = "dimmer"
    STRING = "string"


class Role(str, Enum):
    COMMAND = "command"
    LISTEN = "listen"


# ── Kind tokens ─────────────────────────────────────────────────────────────

KIND_ALIASES: dict[str, ItemKind] = {
    "rollershutter": ItemKind.SHADE,
    "rollerblind": ItemKind.SHADE,
    "number": ItemKind.MEASUREMENT,
}


# ── Kind → type tables ──────────────────────────────────────────────────────
# First entry of each tuple is the default type for a binding without ":type".

ALLOWED_TYPES: dict[ItemKind, tuple[TypeTag, ...]] = {
    ItemKind.SWITCH: (TypeTag.BOOL, TypeTag.DIMMER),
    ItemKind.MEASUREMENT: (TypeTag.DECIMAL, TypeTag.PERCENT),
    ItemKind.CONTACT: (TypeTag.OPEN_CLOSED, TypeTag.BOOL),
    ItemKind.SHADE: (TypeTag.PERCENT, TypeTag.UP_DOWN, TypeTag.STOP_MOVE),
    ItemKind.STRING: (TypeTag.STRING,),
    ItemKind.GROUP: (),
}


def kind_from_token(token: str) -> ItemKind | None:
    """Resolve a kind token (case-insensitive, aliases allowed)."""
    key = token.strip().lower()
    try:
        return ItemKind(key)
    except ValueError:
        return KIND_ALIASES.get(key)


def type_from_token(token: str) -> TypeTag | None:
    try:
        return TypeTag(token.strip().lower())
    except ValueError:
        return None


def default_type(kind: ItemKind) -> TypeTag | None:
    """Type used for a binding that does not name one; None for groups."""
    allowed = ALLOWED_TYPES[kind]
    return allowed[0] if allowed else None
