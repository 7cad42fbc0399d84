"""Item contract — canonical data structures shared by all modules."""

from src.contracts.address import Address, AddressError
from src.contracts.enums import ItemKind, Role, TypeTag
from src.contracts.errors import (
    ConfigError,
    ParseError,
    ParseIoError,
    ParseSemanticError,
    ParseSyntaxError,
)
from src.contracts.item import Datapoint, Item

__all__ = [
    "Address",
    "AddressError",
    "ConfigError",
    "Datapoint",
    "Item",
    "ItemKind",
    "ParseError",
    "ParseIoError",
    "ParseSemanticError",
    "ParseSyntaxError",
    "Role",
    "TypeTag",
]
