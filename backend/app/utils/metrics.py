"""Prometheus metrics for knowledge base operations."""

from prometheus_client import Counter, Histogram

kb_ingest_latency_ms = Histogram(
    "kb_ingest_latency_ms",
    "Document ingestion latency in milliseconds",
    ["media_type", "outcome"],
    buckets=[10, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000],
)

kb_ingest_errors_total = Counter(
    "kb_ingest_errors_total",
    "Total document ingestion failures",
    ["kind"],
)

kb_search_latency_ms = Histogram(
    "kb_search_latency_ms",
    "Search latency in milliseconds",
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

kb_search_results = Histogram(
    "kb_search_results",
    "Number of results returned per search",
    buckets=[0, 1, 2, 5, 10, 20, 50],
)

kb_documents_deleted_total = Counter(
    "kb_documents_deleted_total",
    "Total documents deleted",
)


class KnowledgeMetrics:
    """Interface for knowledge base metrics (no-op default)."""

    def record_ingest(self, media_type: str, outcome: str, latency_ms: float) -> None:
        """Record ingestion latency."""
        pass

    def inc_ingest_error(self, kind: str) -> None:
        """Increment ingestion failure counter."""
        pass

    def record_search(self, latency_ms: float, result_count: int) -> None:
        """Record search latency and result count."""
        pass

    def inc_deleted(self) -> None:
        """Increment deletion counter."""
        pass


class PrometheusKnowledgeMetrics(KnowledgeMetrics):
    """Prometheus-based knowledge base metrics implementation."""

    def record_ingest(self, media_type: str, outcome: str, latency_ms: float) -> None:
        kb_ingest_latency_ms.labels(media_type=media_type, outcome=outcome).observe(latency_ms)

    def inc_ingest_error(self, kind: str) -> None:
        kb_ingest_errors_total.labels(kind=kind).inc()

    def record_search(self, latency_ms: float, result_count: int) -> None:
        kb_search_latency_ms.observe(latency_ms)
        kb_search_results.observe(result_count)

    def inc_deleted(self) -> None:
        kb_documents_deleted_total.inc()
