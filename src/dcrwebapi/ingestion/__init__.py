"""
Ingestion layer: remote fetcher, provider adapters, attempt strategies, the
refresh orchestrator and the lazily cached aggregates.
"""
