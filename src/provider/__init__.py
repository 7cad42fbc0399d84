"""Host-facing side: published item model, default widgets, file watching."""

from src.provider.item_provider import MhtItemProvider
from src.provider.watcher import SourceWatcher
from src.provider.widgets import DEFAULT_WIDGETS, Widget, WidgetType, default_widget

__all__ = [
    "DEFAULT_WIDGETS",
    "MhtItemProvider",
    "SourceWatcher",
    "Widget",
    "WidgetType",
    "default_widget",
]
