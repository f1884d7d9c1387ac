"""
Base class for news source adapters
Clean, simple interface that all provider adapters must implement
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PayloadValidationError

from ..mappers.base_mapper import BaseMapper, NormalizedArticle
from ...exceptions import ConfigurationError, SourceError
from ...models.enums import NewsType

logger = logging.getLogger(__name__)

CredentialLookup = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class SourceConfig:
    """Per-provider configuration, built from the news source row"""
    name: str
    base_url: str
    api_key_name: str
    timeout_seconds: float = 15.0


class NewsSourceAdapter(ABC):
    """Base adapter for news providers"""

    USER_AGENT = "NewsHub/0.1"

    def __init__(self, config: SourceConfig, credential_lookup: CredentialLookup, mapper: BaseMapper):
        self.config = config
        self.credential_lookup = credential_lookup
        self.mapper = mapper

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    @abstractmethod
    async def fetch(self, keyword: str, news_type: NewsType, count: int) -> List[BaseModel]:
        """
        Fetch raw items for a keyword.

        Returns an empty list when the provider has nothing; raises SourceError
        for every failure (missing credential, transport, error payload, bad body).
        """
        pass

    def normalize(self, raw: BaseModel, source_id: int, keyword: str, news_type: NewsType) -> NormalizedArticle:
        return self.mapper.map_article(raw, source_id, keyword, news_type)

    def get_api_key(self) -> str:
        api_key = self.credential_lookup(self.config.api_key_name)
        if not api_key:
            raise ConfigurationError(self.name, f"API key {self.config.api_key_name} not configured")
        return api_key

    def error(self, message: str) -> SourceError:
        return SourceError(self.name, message)

    async def get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """GET a JSON document, converting every transport failure into SourceError"""
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                headers={"User-Agent": self.USER_AGENT},
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException:
            raise self.error("Request timed out")
        except httpx.HTTPStatusError as e:
            raise self.error(self._describe_status_error(e.response))
        except httpx.RequestError as e:
            raise self.error(f"Request failed: {e.__class__.__name__}")
        except ValueError:
            raise self.error("Response is not valid JSON")

    def parse_payload(self, model: type, data: Any) -> BaseModel:
        if not isinstance(data, dict):
            raise self.error("Malformed response: expected a JSON object")
        try:
            return model.model_validate(data)
        except PayloadValidationError as e:
            logger.warning(f"Malformed {self.name} response: {e}")
            raise self.error("Malformed response")

    @staticmethod
    def _describe_status_error(response: Optional[httpx.Response]) -> str:
        if response is None:
            return "HTTP error"

        detail = None
        try:
            body = response.json()
            if isinstance(body, dict):
                detail = body.get("message") or (body.get("response") or {}).get("message")
        except Exception:
            detail = None

        if detail:
            return f"HTTP {response.status_code}: {detail}"
        return f"HTTP {response.status_code}"
