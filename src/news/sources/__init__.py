from .base import NewsSourceAdapter, SourceConfig
from .registry import SourceAdapterRegistry, ADAPTERS

__all__ = ["NewsSourceAdapter", "SourceConfig", "SourceAdapterRegistry", "ADAPTERS"]
