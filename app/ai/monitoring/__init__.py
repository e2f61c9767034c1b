"""
Monitoring Module - Logging and metrics for model calls.

Usage:
======
    from app.ai.monitoring import ai_logger, ai_metrics

    ai_logger.log_request(request_id, prompt, model)
    ai_metrics.record_request(request_id, model, tokens, latency_ms, success)

    stats = ai_metrics.get_stats()
"""

from app.ai.monitoring.logger import AILogger, ai_logger
from app.ai.monitoring.metrics import AIMetrics, ai_metrics

__all__ = [
    "AILogger",
    "ai_logger",
    "AIMetrics",
    "ai_metrics",
]
