"""Poll an mht file and reparse it when it changes."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from src.provider.item_provider import MhtItemProvider

log = logging.getLogger(__name__)

Signature = tuple[int, int]  # (mtime_ns, size)


def _signature(path: Path) -> Signature | None:
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return None
    return st.st_mtime_ns, st.st_size


class SourceWatcher:
    """Triggers ``provider.on_source_changed`` whenever *path* changes.

    A change is detected by (mtime, size). A failed reparse is not retried
    until the file changes again.
    """

    def __init__(
        self,
        provider: MhtItemProvider,
        path: str | Path,
        poll_interval_sec: float = 1.0,
    ) -> None:
        self.provider = provider
        self.path = Path(path)
        self.poll_interval_sec = poll_interval_sec
        self._last: Signature | None = None
        if provider.result is not None and provider.location == self.path:
            self._last = _signature(self.path)
        self.reloads = 0

    def poll_once(self) -> bool:
        """Check the file once. Returns True if a new result was published."""
        sig = _signature(self.path)
        if sig is None:
            if self._last is not None:
                log.warning("mht file %s disappeared, keeping current items", self.path)
                self._last = None
            return False
        if sig == self._last:
            return False
        self._last = sig
        published = self.provider.on_source_changed(self.path)
        if published:
            self.reloads += 1
        return published

    def run(self) -> None:
        """Poll until Ctrl+C."""
        print(f"Watching {self.path} (poll interval {self.poll_interval_sec:.1f}s)")
        print("  Press Ctrl+C to stop.")
        try:
            while True:
                self.poll_once()
                time.sleep(self.poll_interval_sec)
        except KeyboardInterrupt:
            print(f"\nWatch stopped. reloads={self.reloads}")
