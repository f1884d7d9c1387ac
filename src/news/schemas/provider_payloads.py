"""
Typed provider payloads.

Each adapter validates its own response body into these models, so raw items
reach their mapper already tagged with the provider shape.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ============================================================================
# NewsAPI.org
# ============================================================================

class NewsAPISourceRef(ProviderPayload):
    id: Optional[str] = None
    name: Optional[str] = None


class NewsAPIArticle(ProviderPayload):
    source: Optional[NewsAPISourceRef] = None
    author: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    url_to_image: Optional[str] = Field(None, alias="urlToImage")
    published_at: Optional[str] = Field(None, alias="publishedAt")
    content: Optional[str] = None


class NewsAPIResponse(ProviderPayload):
    status: Optional[str] = None
    code: Optional[str] = None
    message: Optional[str] = None
    total_results: Optional[int] = Field(None, alias="totalResults")
    articles: Optional[List[NewsAPIArticle]] = None


# ============================================================================
# The Guardian Open Platform
# ============================================================================

class GuardianFields(ProviderPayload):
    headline: Optional[str] = None
    body_text: Optional[str] = Field(None, alias="bodyText")
    thumbnail: Optional[str] = None
    byline: Optional[str] = None


class GuardianArticle(ProviderPayload):
    id: Optional[str] = None
    section_id: Optional[str] = Field(None, alias="sectionId")
    section_name: Optional[str] = Field(None, alias="sectionName")
    web_title: Optional[str] = Field(None, alias="webTitle")
    web_url: Optional[str] = Field(None, alias="webUrl")
    api_url: Optional[str] = Field(None, alias="apiUrl")
    web_publication_date: Optional[str] = Field(None, alias="webPublicationDate")
    fields: Optional[GuardianFields] = None


class GuardianSearchResult(ProviderPayload):
    status: Optional[str] = None
    message: Optional[str] = None
    total: Optional[int] = None
    results: Optional[List[GuardianArticle]] = None


class GuardianResponse(ProviderPayload):
    response: Optional[GuardianSearchResult] = None
    # Auth failures come back without the "response" wrapper
    message: Optional[str] = None


# ============================================================================
# Alpha Vantage NEWS_SENTIMENT
# ============================================================================

class AlphaVantageTopic(ProviderPayload):
    topic: Optional[str] = None
    relevance_score: Optional[str] = None


class AlphaVantageArticle(ProviderPayload):
    title: Optional[str] = None
    url: Optional[str] = None
    time_published: Optional[str] = None
    authors: Optional[List[str]] = None
    summary: Optional[str] = None
    banner_image: Optional[str] = None
    source: Optional[str] = None
    category_within_source: Optional[str] = None
    source_domain: Optional[str] = None
    topics: Optional[List[AlphaVantageTopic]] = None


class AlphaVantageResponse(ProviderPayload):
    items: Optional[str] = None
    feed: Optional[List[AlphaVantageArticle]] = None
    information: Optional[str] = Field(None, alias="Information")
    note: Optional[str] = Field(None, alias="Note")
    error_message: Optional[str] = Field(None, alias="Error Message")

    @property
    def provider_error(self) -> Optional[str]:
        return self.information or self.error_message or self.note
