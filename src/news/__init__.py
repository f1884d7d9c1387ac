"""
News Module
===========

Provider access for the fetch pipeline:
- Source adapters for NewsAPI, The Guardian and Alpha Vantage
- Typed provider payloads
- Mappers from provider items to the canonical article
- Article identity and date helpers
"""
