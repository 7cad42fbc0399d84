"""Tests for src.mht.cli — argument parsing and report output."""

from __future__ import annotations

import json
import logging

import pytest

from src.contracts.address import Address
from src.mht.cli import build_parser, build_report, main
from src.mht.parser import parse
from tests.conftest import CONFIG_PATH, KITCHEN_LINE, SAMPLE_PATH, mht, write_mht


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """main() reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestArguments:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.input == "config/sample.mht"
        assert args.format == "text"
        assert args.address == []
        assert args.watch is False

    def test_address_is_parsed(self):
        args = build_parser().parse_args(["--address", "1.2.3", "--address", "2/0/1"])
        assert args.address == [Address(1, 2, 3), Address(2, 0, 1)]

    def test_bad_address_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--address", "99.0.0"])


class TestReport:
    def test_model_when_no_query(self):
        report = build_report(parse(mht(KITCHEN_LINE)), [], [])
        assert report["summary"] == {"items": 1, "datapoints": 1, "addresses": 1}
        assert report["model"]["items"][0]["name"] == "Kitchen_Light"

    def test_address_query(self, sample_result):
        report = build_report(sample_result, [Address(1, 2, 3)], [])
        entry = report["addresses"][0]
        assert entry["items"] == ["Kitchen_Light", "Hall_Light"]
        assert entry["type"] == "bool"
        # 1.2.3 is Kitchen_Light's main address but only a secondary one for Hall_Light
        assert entry["command_items"] == ["Kitchen_Light"]
        assert "model" not in report

    def test_item_query(self, sample_result):
        report = build_report(sample_result, [], ["Living_Blind", "Nope"])
        blind = report["items"]["Living_Blind"]
        assert blind["widget"] == "toggle"
        assert {dp["type"] for dp in blind["datapoints"]} == {"percent", "updown", "stopmove"}
        assert report["items"]["Nope"] is None


class TestMain:
    def test_text_summary(self, capsys):
        main(["--input", str(SAMPLE_PATH), "--config", str(CONFIG_PATH)])
        out = capsys.readouterr().out
        assert out.startswith("13 items, 14 datapoints, 14 addresses")
        assert "Kitchen_Light" in out

    def test_json_address_query(self, capsys):
        main(["--input", str(SAMPLE_PATH), "--address", "2.1.4", "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["addresses"][0]["items"] == ["Bedroom_Blind"]
        assert data["addresses"][0]["command_items"] == []

    def test_text_item_query(self, capsys):
        main(["--input", str(SAMPLE_PATH), "--item", "Front_Door"])
        out = capsys.readouterr().out
        assert "Front_Door: kind=contact" in out
        assert "openclosed" in out

    def test_parse_error_exits_1(self, tmp_path):
        path = write_mht(tmp_path / "bad.mht", "string|Foo", "string|Foo")
        with pytest.raises(SystemExit) as exc:
            main(["--input", str(path)])
        assert exc.value.code == 1
