"""Read-only queries over a ParseResult.

All functions are total: an unknown name, type or address yields ``None``
(or an empty list), never an exception.
"""

from __future__ import annotations

from src.contracts.address import Address
from src.contracts.enums import ItemKind, TypeTag
from src.contracts.item import Datapoint, Item
from src.mht.result import ParseResult


def icon_for(result: ParseResult, name: str) -> str | None:
    return result.icons.get(name)


def label_for(result: ParseResult, name: str) -> str | None:
    return result.labels.get(name)


def item_for(result: ParseResult, name: str) -> Item | None:
    return result.by_name.get(name)


def items_of_kind(result: ParseResult, kind: ItemKind) -> list[Item]:
    """Items of one kind, in file order."""
    return [item for item in result.items if item.kind is kind]


def datapoint_for(
    result: ParseResult,
    name: str,
    key: TypeTag | Address,
) -> Datapoint | None:
    """Datapoint of *name* for a type, or for the type bound to an address.

    An address that is not bound anywhere means "no binding" and gives None.
    """
    if isinstance(key, Address):
        tag = result.types.get(key)
        if tag is None:
            return None
    else:
        tag = key
    return result.datapoints.get((name, tag))


def listening_item_names(result: ParseResult, address: Address) -> list[str]:
    """Names of all items listening on *address*, in file order."""
    return [name for name, addrs in result.addresses.items() if address in addrs]
