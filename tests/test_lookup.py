"""Tests for src.mht.lookup — icon, label, datapoint and listener queries."""

from __future__ import annotations

from src.contracts.address import Address
from src.contracts.enums import ItemKind, Role, TypeTag
from src.mht.lookup import (
    datapoint_for,
    icon_for,
    item_for,
    items_of_kind,
    label_for,
    listening_item_names,
)
from src.mht.parser import parse
from src.mht.result import ParseResult
from tests.conftest import KITCHEN_LINE, mht


class TestKitchenLightScenario:
    def setup_method(self):
        self.result = parse(mht(KITCHEN_LINE))

    def test_label_and_icon(self):
        assert label_for(self.result, "Kitchen_Light") == "Kitchen Light"
        assert icon_for(self.result, "Kitchen_Light") == "lightbulb"

    def test_datapoint_by_type(self):
        dp = datapoint_for(self.result, "Kitchen_Light", TypeTag.BOOL)
        assert dp is not None
        assert dp.addresses == (Address(1, 2, 3),)

    def test_datapoint_by_address(self):
        dp = datapoint_for(self.result, "Kitchen_Light", Address(1, 2, 3))
        assert dp is datapoint_for(self.result, "Kitchen_Light", TypeTag.BOOL)

    def test_listening_item_names(self):
        assert listening_item_names(self.result, Address(1, 2, 3)) == ["Kitchen_Light"]


class TestAbsentKeys:
    def test_unknown_name(self, sample_result):
        assert icon_for(sample_result, "Nope") is None
        assert label_for(sample_result, "Nope") is None
        assert item_for(sample_result, "Nope") is None
        assert datapoint_for(sample_result, "Nope", TypeTag.BOOL) is None

    def test_item_without_label_or_icon(self, sample_result):
        assert label_for(sample_result, "Status_Text") is None
        assert icon_for(sample_result, "Garage_Door") is None
        assert label_for(sample_result, "Garage_Door") == "Garage Door"

    def test_unbound_type(self, sample_result):
        assert datapoint_for(sample_result, "Kitchen_Light", TypeTag.DIMMER) is None

    def test_unknown_address(self, sample_result):
        assert datapoint_for(sample_result, "Kitchen_Light", Address(9, 1, 9)) is None
        assert listening_item_names(sample_result, Address(30, 0, 0)) == []

    def test_empty_result(self):
        empty = ParseResult()
        assert icon_for(empty, "x") is None
        assert listening_item_names(empty, Address(1, 2, 3)) == []


class TestSampleQueries:
    def test_shared_address_in_file_order(self, sample_result):
        assert listening_item_names(sample_result, Address(1, 2, 3)) == [
            "Kitchen_Light",
            "Hall_Light",
        ]

    def test_listening_matches_address_index(self, sample_result):
        for addr in sample_result.types:
            expected = [
                name for name in (i.name for i in sample_result.items)
                if addr in sample_result.addresses.get(name, frozenset())
            ]
            assert listening_item_names(sample_result, addr) == expected

    def test_datapoint_by_address_resolves_type(self, sample_result):
        dp = datapoint_for(sample_result, "Living_Blind", Address(2, 0, 2))
        assert dp is not None
        assert dp.type_tag is TypeTag.UP_DOWN

    def test_datapoint_by_address_of_other_item(self, sample_result):
        # 1.3.1 is a dimmer address; Kitchen_Light has no dimmer binding
        assert datapoint_for(sample_result, "Kitchen_Light", Address(1, 3, 1)) is None

    def test_listen_only_binding(self, sample_result):
        dp = datapoint_for(sample_result, "Bedroom_Blind", Address(2, 1, 4))
        assert dp is not None
        assert dp.role is Role.LISTEN
        assert listening_item_names(sample_result, Address(2, 1, 4)) == ["Bedroom_Blind"]

    def test_item_for(self, sample_result):
        item = item_for(sample_result, "Front_Door")
        assert item is not None
        assert item.kind is ItemKind.CONTACT

    def test_items_of_kind(self, sample_result):
        shades = items_of_kind(sample_result, ItemKind.SHADE)
        assert [i.name for i in shades] == ["Living_Blind", "Bedroom_Blind"]
        groups = items_of_kind(sample_result, ItemKind.GROUP)
        assert [i.name for i in groups] == ["Ground_Floor", "First_Floor"]
