"""
News Module
===========

Everything behind the news API:
- Provider adapters (NewsAPI, GNews) and the registry that orders them
- Concurrent aggregation and the ingestion pipeline
- Read-only query service with a TTL cache
- Retention sweep and scheduled background jobs
"""
