"""Default widget per item kind, as consumed by the UI layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.contracts.enums import ItemKind
from src.mht.lookup import item_for
from src.mht.result import ParseResult


class WidgetType(str, Enum):
    TOGGLE = "toggle"
    TEXT = "text"
    SELECTION = "selection"
    CONTAINER = "container"


DEFAULT_WIDGETS: dict[ItemKind, WidgetType] = {
    ItemKind.SWITCH: WidgetType.TOGGLE,
    ItemKind.MEASUREMENT: WidgetType.TEXT,
    ItemKind.CONTACT: WidgetType.TEXT,
    ItemKind.SHADE: WidgetType.TOGGLE,
    ItemKind.STRING: WidgetType.SELECTION,
    ItemKind.GROUP: WidgetType.CONTAINER,
}


@dataclass(frozen=True, slots=True)
class Widget:
    type: WidgetType
    item: str  # bound item name


def default_widget(
    result: ParseResult | None,
    name: str,
    kind: ItemKind | None = None,
) -> Widget | None:
    """Widget for *name*; the kind is taken from *result* when not given."""
    if kind is None:
        item = item_for(result, name) if result is not None else None
        if item is None:
            return None
        kind = item.kind
    return Widget(type=DEFAULT_WIDGETS[kind], item=name)
