"""
Adapter registry: maps a news source row to its provider adapter.
Adding a provider means adding one adapter class and one entry here.
"""

from typing import Dict, Optional, Type

from .base import NewsSourceAdapter, SourceConfig, CredentialLookup
from .newsapi_adapter import NewsAPIAdapter
from .guardian_adapter import GuardianAdapter
from .alpha_vantage_adapter import AlphaVantageAdapter
from ...models.news_source import NewsSource

ADAPTERS: Dict[str, Type[NewsSourceAdapter]] = {
    "newsapi": NewsAPIAdapter,
    "guardian": GuardianAdapter,
    "alpha vantage": AlphaVantageAdapter,
}


class SourceAdapterRegistry:

    def __init__(
        self,
        credential_lookup: CredentialLookup,
        timeout_seconds: float = 15.0,
        adapters: Optional[Dict[str, Type[NewsSourceAdapter]]] = None,
    ):
        self.credential_lookup = credential_lookup
        self.timeout_seconds = timeout_seconds
        self.adapters = dict(adapters if adapters is not None else ADAPTERS)

    @staticmethod
    def source_key(name: str) -> str:
        return (name or "").strip().lower()

    def supports(self, name: str) -> bool:
        return self.source_key(name) in self.adapters

    def get_adapter(self, source: NewsSource) -> Optional[NewsSourceAdapter]:
        """Build the adapter for a source row, or None if the provider is unsupported"""
        adapter_cls = self.adapters.get(self.source_key(source.name))
        if adapter_cls is None:
            return None

        config = SourceConfig(
            name=source.name,
            base_url=source.base_url,
            api_key_name=source.api_key_name,
            timeout_seconds=self.timeout_seconds,
        )
        return adapter_cls(config, self.credential_lookup)

    def available_sources(self):
        return sorted(self.adapters.keys())
