"""Structured logging for chatrelay."""
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional


class StructuredLogger:
    """Structured JSON logger for relay requests."""

    def __init__(self, name: str = "chatrelay"):
        self.logger = logging.getLogger(name)

    def log_relay(
        self,
        request_id: str,
        provider: str,
        model: Optional[str],
        final_state: str,
        outcome: str = "success",  # "success" or "error"
        error_code: Optional[str] = None,
        upstream_status: Optional[int] = None,
        chunks: int = 0,
        latency_ms: int = 0,
        user_id: Optional[str] = None,
        level: str = "INFO",
    ):
        """Log a relay summary as structured JSON.

        Args:
            request_id: Unique request identifier
            provider: Provider name (anthropic, groq, ...)
            model: Model identifier from the chat settings
            final_state: Terminal relay state (Closed, Aborted, Rejected)
            outcome: "success" or "error"
            error_code: Error code if outcome is "error"
            upstream_status: Status the provider answered with
            chunks: Number of events relayed to the client
            latency_ms: Time from request to terminal state
            user_id: Profile owner, when resolved
            level: Log level (INFO, WARNING, ERROR)
        """
        log_entry: Dict[str, Any] = {
            "ts": datetime.utcnow().isoformat() + "Z",
            "level": level,
            "request_id": request_id,
            "provider": provider,
            "model": model,
            "final_state": final_state,
            "outcome": outcome,
            "chunks": chunks,
            "latency_ms": latency_ms,
        }

        if user_id:
            log_entry["user_id"] = user_id

        if outcome == "error":
            if error_code:
                log_entry["error_code"] = error_code
            if upstream_status:
                log_entry["upstream_status"] = upstream_status

        log_message = json.dumps(log_entry, ensure_ascii=False)

        if level == "ERROR":
            self.logger.error(log_message)
        elif level == "WARNING":
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)


# Global structured logger instance
structured_logger = StructuredLogger()
