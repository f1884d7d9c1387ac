from .base_mapper import BaseMapper, NormalizedArticle
from .newsapi_mapper import NewsAPIMapper
from .guardian_mapper import GuardianMapper
from .alpha_vantage_mapper import AlphaVantageMapper

__all__ = ["BaseMapper", "NormalizedArticle", "NewsAPIMapper", "GuardianMapper", "AlphaVantageMapper"]
