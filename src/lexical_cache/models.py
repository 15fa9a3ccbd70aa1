from dataclasses import dataclass


@dataclass
class PerformanceMetrics:
    """Track performance metrics for cache operations."""

    total_queries: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    total_lookup_time_ms: float = 0.0
    total_provider_time_ms: float = 0.0
    provider_calls: int = 0
    provider_errors: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_queries == 0:
            return 0.0
        return self.cache_hits / self.total_queries

    @property
    def avg_lookup_time_ms(self) -> float:
        """Calculate average lookup time."""
        if self.total_queries == 0:
            return 0.0
        return self.total_lookup_time_ms / self.total_queries

    def record_hit(self, lookup_time_ms: float) -> None:
        """Record a cache hit."""
        self.total_queries += 1
        self.cache_hits += 1
        self.total_lookup_time_ms += lookup_time_ms

    def record_miss(self, lookup_time_ms: float) -> None:
        """Record a cache miss."""
        self.total_queries += 1
        self.cache_misses += 1
        self.total_lookup_time_ms += lookup_time_ms

    def record_provider_call(self, duration_ms: float) -> None:
        """Record a successful completion API call."""
        self.provider_calls += 1
        self.total_provider_time_ms += duration_ms

    def record_provider_error(self) -> None:
        self.provider_errors += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_queries": self.total_queries,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "avg_lookup_time_ms": self.avg_lookup_time_ms,
            "total_provider_time_ms": self.total_provider_time_ms,
            "provider_calls": self.provider_calls,
            "provider_errors": self.provider_errors,
        }
