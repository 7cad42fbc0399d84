"""Item provider — the host-facing side of the mht parser.

Holds the currently published ParseResult behind one attribute. A reparse
builds a complete new result and replaces the reference in a single
assignment, so readers that fetched the old handle keep a consistent view
and new readers see only the new one. A failed reparse is logged and the
previous result stays published.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from src.contracts.address import Address
from src.contracts.enums import ItemKind, TypeTag
from src.contracts.errors import ParseError
from src.contracts.item import Datapoint, Item
from src.mht import lookup
from src.mht.grammar import DEFAULT_CONFIG, ParserConfig, build_config
from src.mht.parser import parse_file
from src.mht.result import ParseResult
from src.provider.widgets import Widget, default_widget
from src.shared.config_loader import load_yaml, section

log = logging.getLogger(__name__)

CONFIG_KEY = "mht_file"

Listener = Callable[["MhtItemProvider"], None]


class MhtItemProvider:
    """Publishes items parsed from an mht file to the host."""

    def __init__(self, parser_config: ParserConfig | None = None) -> None:
        self.parser_config = parser_config or DEFAULT_CONFIG
        self._result: ParseResult | None = None
        self._location: Path | None = None
        self._listeners: list[Listener] = []
        self._swap_lock = threading.Lock()

    @classmethod
    def from_config_file(cls, path: str | Path) -> MhtItemProvider:
        """Build a provider from ``config/mht.yaml`` and load its mht file.

        A relative ``provider.mht_file`` is resolved against the directory
        that contains the config file's parent (the repo root for
        ``config/mht.yaml``).
        """
        p = Path(path)
        cfg = load_yaml(p)
        provider = cls(build_config(cfg))
        location = section(cfg, "provider").get(CONFIG_KEY)
        if location:
            mht = Path(location)
            if not mht.is_absolute():
                mht = p.resolve().parent.parent / mht
            provider.on_source_changed(mht)
        return provider

    # ── Published state ──────────────────────────────────────────────────

    @property
    def result(self) -> ParseResult | None:
        return self._result

    @property
    def location(self) -> Path | None:
        return self._location

    def get_items(self) -> tuple[Item, ...]:
        """Items of the published result; empty until a parse succeeds."""
        result = self._result
        if result is None:
            log.debug("No mht file has been parsed yet")
            return ()
        return result.items

    # ── Source changes ───────────────────────────────────────────────────

    def updated(self, config: Mapping[str, Any] | None) -> bool:
        """Host configuration callback: reads ``mht_file`` and reparses."""
        if not config or not config.get(CONFIG_KEY):
            log.debug("Configuration without '%s' ignored", CONFIG_KEY)
            return False
        return self.on_source_changed(Path(str(config[CONFIG_KEY])))

    def on_source_changed(self, location: str | Path) -> bool:
        """Parse *location*; publish and notify on success.

        Returns True when a new result was published. On failure the error
        is logged and the previously published result (if any) is kept.
        """
        path = Path(location)
        with self._swap_lock:
            try:
                result = parse_file(path, self.parser_config)
            except ParseError as exc:
                kept = "keeping previous items" if self._result is not None else "no items available"
                log.error("Cannot load mht file %s: %s (%s)", path, exc, kept)
                return False
            self._result = result
            self._location = path
        log.info("Published %d items from %s", len(result.items), path)
        self._notify()
        return True

    def reload(self) -> bool:
        """Reparse the current location (no-op without one)."""
        if self._location is None:
            log.debug("Reload requested but no mht file is configured")
            return False
        return self.on_source_changed(self._location)

    # ── Listeners ────────────────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        """Tell every listener that the complete item set changed."""
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                log.exception("Item change listener %r failed", listener)

    # ── Lookups over the published result ────────────────────────────────

    def icon_for(self, name: str) -> str | None:
        result = self._result
        return lookup.icon_for(result, name) if result is not None else None

    def label_for(self, name: str) -> str | None:
        result = self._result
        return lookup.label_for(result, name) if result is not None else None

    def datapoint_for(self, name: str, key: TypeTag | Address) -> Datapoint | None:
        result = self._result
        return lookup.datapoint_for(result, name, key) if result is not None else None

    def listening_item_names(self, address: Address) -> list[str]:
        result = self._result
        return lookup.listening_item_names(result, address) if result is not None else []

    def default_widget(self, name: str, kind: ItemKind | None = None) -> Widget | None:
        return default_widget(self._result, name, kind)
