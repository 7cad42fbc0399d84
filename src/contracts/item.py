"""Item and Datapoint data-classes produced by the mht parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.contracts.address import Address
from src.contracts.enums import ItemKind, Role, TypeTag


@dataclass(frozen=True, slots=True)
class Item:
    """One automation entity declared by a line of the mht file."""

    name: str
    kind: ItemKind
    label: str | None = None
    icon: str | None = None
    line_no: int = 0  # 1-based source line, 0 when built by hand

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "label": self.label,
            "icon": self.icon,
            "line_no": self.line_no,
        }


@dataclass(frozen=True, slots=True)
class Datapoint:
    """Binding of (item name, type) to one or more bus addresses.

    For the command role the first address is the one written to; every
    address of the binding is listened on.
    """

    item_name: str
    type_tag: TypeTag
    addresses: tuple[Address, ...]
    role: Role = Role.COMMAND

    @property
    def main_address(self) -> Address:
        return self.addresses[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.item_name,
            "type": self.type_tag.value,
            "addresses": [str(a) for a in self.addresses],
            "role": self.role.value,
        }
