"""
AI Metrics - per-model call statistics.

Every gateway call (chat, image, video submission, device command) is
recorded once, successful or not. The /stats endpoint reports:
- Volume and failure rate per model
- Token usage (video jobs report zero tokens)
- Average latency

Everything lives in memory; restarting the process resets the numbers.
"""

import copy
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Deque, Dict, List
from threading import Lock

if TYPE_CHECKING:
    from app.ai.providers.base import TokenUsage


@dataclass
class RequestMetrics:
    """One recorded gateway call."""
    request_id: str
    model: str
    tokens: "TokenUsage"
    latency_ms: float
    success: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ModelStats:
    """Running totals for a single model."""
    requests: int = 0
    failures: int = 0
    tokens: int = 0
    latency_ms: float = 0.0

    def add(self, metrics: RequestMetrics) -> None:
        self.requests += 1
        if not metrics.success:
            self.failures += 1
        self.tokens += metrics.tokens.total_tokens
        self.latency_ms += metrics.latency_ms

    def to_dict(self) -> Dict:
        return {
            "requests": self.requests,
            "failures": self.failures,
            "tokens": self.tokens,
            "avg_latency_ms": round(self.latency_ms / self.requests, 2) if self.requests else 0.0,
        }


@dataclass
class AggregatedMetrics:
    """Totals since startup (or the last reset)."""
    total_requests: int = 0
    failed_requests: int = 0
    total_prompt_tokens: int = 0
    total_completion_tokens: int = 0
    total_latency_ms: float = 0.0
    models: Dict[str, ModelStats] = field(default_factory=dict)

    @property
    def successful_requests(self) -> int:
        return self.total_requests - self.failed_requests

    @property
    def total_tokens(self) -> int:
        return self.total_prompt_tokens + self.total_completion_tokens

    @property
    def avg_latency_ms(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.total_latency_ms / self.total_requests

    @property
    def success_rate(self) -> float:
        """Percentage of successful calls."""
        if self.total_requests == 0:
            return 0.0
        return (self.successful_requests / self.total_requests) * 100

    @property
    def requests_by_model(self) -> Dict[str, int]:
        return {name: s.requests for name, s in self.models.items()}

    @property
    def failures_by_model(self) -> Dict[str, int]:
        return {name: s.failures for name, s in self.models.items() if s.failures}

    def add(self, metrics: RequestMetrics) -> None:
        self.total_requests += 1
        if not metrics.success:
            self.failed_requests += 1
        self.total_prompt_tokens += metrics.tokens.prompt_tokens
        self.total_completion_tokens += metrics.tokens.completion_tokens
        self.total_latency_ms += metrics.latency_ms
        self.models.setdefault(metrics.model, ModelStats()).add(metrics)

    def to_dict(self) -> Dict:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "success_rate": f"{self.success_rate:.1f}%",
            "total_tokens": self.total_tokens,
            "prompt_tokens": self.total_prompt_tokens,
            "completion_tokens": self.total_completion_tokens,
            "avg_latency_ms": round(self.avg_latency_ms, 2),
            "requests_by_model": self.requests_by_model,
            "failures_by_model": self.failures_by_model,
            "models": {name: s.to_dict() for name, s in self.models.items()},
        }


class AIMetrics:
    """
    Thread-safe collector for gateway call metrics.

    Usage:
        ai_metrics.record_request("abc123", "gemini-2.5-flash", TokenUsage(100, 50), 250.5, True)
        ai_metrics.get_stats().to_dict()
    """

    def __init__(self, max_history: int = 1000):
        # Recent calls only; the aggregate keeps counting past this bound
        self._history: Deque[RequestMetrics] = deque(maxlen=max_history)
        self._lock = Lock()
        self._aggregated = AggregatedMetrics()

    def record_request(
        self,
        request_id: str,
        model: str,
        tokens: "TokenUsage",
        latency_ms: float,
        success: bool,
    ) -> RequestMetrics:
        metrics = RequestMetrics(
            request_id=request_id,
            model=model,
            tokens=tokens,
            latency_ms=latency_ms,
            success=success,
        )
        with self._lock:
            self._history.append(metrics)
            self._aggregated.add(metrics)
        return metrics

    def get_stats(self) -> AggregatedMetrics:
        """Snapshot of the totals; later calls do not change it."""
        with self._lock:
            return copy.deepcopy(self._aggregated)

    def get_recent_requests(self, limit: int = 10) -> List[RequestMetrics]:
        """Most recent calls, newest first."""
        with self._lock:
            return list(self._history)[-limit:][::-1]

    def reset(self) -> None:
        with self._lock:
            self._history.clear()
            self._aggregated = AggregatedMetrics()


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
ai_metrics = AIMetrics()
