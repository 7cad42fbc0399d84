"""ParseResult — immutable items + lookup indexes, and its builder.

The builder validates an item together with its datapoints against
everything accepted so far and only then updates the indexes, so the
index invariants hold after every accepted line:

  - every key of icons / labels / addresses names an accepted item
  - every datapoint key names an accepted item
  - every address in ``types`` is in some ``addresses`` set
  - ``types`` maps each address to exactly one type
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from src.contracts.address import Address
from src.contracts.enums import TypeTag
from src.contracts.errors import ParseSemanticError
from src.contracts.item import Datapoint, Item

log = logging.getLogger(__name__)

DatapointKey = tuple[str, TypeTag]


def _frozen(d: dict) -> Mapping:
    return MappingProxyType(dict(d))


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Everything one successful parse produced. Never mutated.

    Results compare by value but are not hashable (the indexes are
    mapping proxies).
    """

    __hash__ = None  # type: ignore[assignment]

    items: tuple[Item, ...] = ()
    by_name: Mapping[str, Item] = field(default_factory=lambda: _frozen({}))
    icons: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    labels: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    datapoints: Mapping[DatapointKey, Datapoint] = field(default_factory=lambda: _frozen({}))
    addresses: Mapping[str, frozenset[Address]] = field(default_factory=lambda: _frozen({}))
    types: Mapping[Address, TypeTag] = field(default_factory=lambda: _frozen({}))

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view (items in file order, datapoints per item)."""
        return {
            "items": [item.to_dict() for item in self.items],
            "datapoints": [dp.to_dict() for dp in self.datapoints.values()],
            "types": {str(a): t.value for a, t in sorted(self.types.items())},
        }


class ResultBuilder:
    """Accumulates accepted items; ``build()`` freezes them into a ParseResult."""

    def __init__(self) -> None:
        self._items: list[Item] = []
        self._by_name: dict[str, Item] = {}
        self._icons: dict[str, str] = {}
        self._labels: dict[str, str] = {}
        self._datapoints: dict[DatapointKey, Datapoint] = {}
        self._addresses: dict[str, set[Address]] = {}
        self._types: dict[Address, TypeTag] = {}
        self._type_lines: dict[Address, int] = {}

    def first_line(self, name: str) -> int | None:
        item = self._by_name.get(name)
        return item.line_no if item is not None else None

    # ── Accept one item ──────────────────────────────────────────────────

    def add(self, item: Item, datapoints: list[Datapoint]) -> None:
        """Validate *item* with its *datapoints*, then index them.

        Raises:
            ParseSemanticError: duplicate name, duplicate (name, type)
                binding, or an address already bound under another type.
        """
        line = item.line_no
        first = self.first_line(item.name)
        if first is not None:
            raise ParseSemanticError(
                line,
                f"duplicate item name '{item.name}' (first defined on line {first})",
                first_line=first,
            )

        pending_types: dict[Address, TypeTag] = {}
        seen_types: set[TypeTag] = set()
        for dp in datapoints:
            if dp.type_tag in seen_types:
                raise ParseSemanticError(
                    line, f"item '{item.name}' binds type '{dp.type_tag.value}' more than once"
                )
            seen_types.add(dp.type_tag)
            for addr in dp.addresses:
                known = self._types.get(addr, pending_types.get(addr))
                if known is not None and known is not dp.type_tag:
                    first_line = self._type_lines.get(addr, line)
                    raise ParseSemanticError(
                        line,
                        f"address {addr} is bound as '{known.value}' on line {first_line}, "
                        f"cannot rebind it as '{dp.type_tag.value}'",
                        first_line=first_line,
                    )
                pending_types[addr] = dp.type_tag

        # validated, commit all indexes together
        self._items.append(item)
        self._by_name[item.name] = item
        if item.icon:
            self._icons[item.name] = item.icon
        if item.label:
            self._labels[item.name] = item.label
        for dp in datapoints:
            self._datapoints[(item.name, dp.type_tag)] = dp
            self._addresses.setdefault(item.name, set()).update(dp.addresses)
        for addr, tag in pending_types.items():
            if addr not in self._types:
                self._types[addr] = tag
                self._type_lines[addr] = line

    # ── Freeze ───────────────────────────────────────────────────────────

    def build(self) -> ParseResult:
        result = ParseResult(
            items=tuple(self._items),
            by_name=_frozen(self._by_name),
            icons=_frozen(self._icons),
            labels=_frozen(self._labels),
            datapoints=_frozen(self._datapoints),
            addresses=_frozen({n: frozenset(a) for n, a in self._addresses.items()}),
            types=_frozen(self._types),
        )
        log.debug(
            "Built result: %d items, %d datapoints, %d addresses",
            len(result.items), len(result.datapoints), len(result.types),
        )
        return result
