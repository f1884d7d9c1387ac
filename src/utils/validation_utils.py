from typing import Any, Iterable, List

from ..core.exceptions import ValidationError
from ..models.enums import FetchStatus, NewsType

MAX_KEYWORD_LENGTH = 255


def validate_keyword(keyword: Any) -> str:
    if not isinstance(keyword, str) or not keyword.strip():
        raise ValidationError("Keyword is required", error_code="INVALID_KEYWORD")
    keyword = keyword.strip()
    if len(keyword) > MAX_KEYWORD_LENGTH:
        raise ValidationError(
            f"Keyword must be at most {MAX_KEYWORD_LENGTH} characters",
            error_code="INVALID_KEYWORD",
        )
    return keyword


def validate_news_type(news_type: Any) -> NewsType:
    try:
        return NewsType(news_type)
    except ValueError:
        allowed = ", ".join(t.value for t in NewsType)
        raise ValidationError(
            f"Invalid news type '{news_type}'. Expected one of: {allowed}",
            error_code="INVALID_NEWS_TYPE",
        )


def validate_articles_per_source(count: Any, maximum: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= maximum:
        raise ValidationError(
            f"articles_per_source must be between 1 and {maximum}",
            error_code="INVALID_ARTICLES_PER_SOURCE",
        )
    return count


def validate_source_ids(source_ids: Iterable[Any]) -> List[int]:
    ids = list(source_ids or [])
    if not ids:
        raise ValidationError("At least one source ID is required", error_code="INVALID_SOURCE_IDS")
    if any(isinstance(i, bool) or not isinstance(i, int) for i in ids):
        raise ValidationError("Source IDs must be integers", error_code="INVALID_SOURCE_IDS")
    return ids


def validate_status_filter(status: Any) -> FetchStatus:
    try:
        return FetchStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid job status '{status}'", error_code="INVALID_STATUS")
