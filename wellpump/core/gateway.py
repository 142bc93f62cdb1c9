"""LLM Gateway: a thin proxy adding call logging and usage metrics.

Wraps a LlamaIndex LLM. Every chat call flows through the gateway, which
records latency, rough token counts, an estimated cost and per-purpose
call counts. Errors are counted and re-raised unchanged; there is no retry.
"""

import logging
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Sequence

from llama_index.core.base.llms.types import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)

# ── Cost table (USD per 1M tokens) ────────────────────────────────────
_COST_PER_1M_TOKENS = {
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4.1": {"input": 2.00, "output": 8.00},
    "gpt-4.1-mini": {"input": 0.40, "output": 1.60},
    "_default": {"input": 0.0, "output": 0.0},
}


# ── Metrics ────────────────────────────────────────────────────────────

@dataclass
class LLMMetrics:
    """Thread-safe in-memory LLM usage metrics."""

    total_calls: int = 0
    total_tokens_in: int = 0
    total_tokens_out: int = 0
    total_latency_ms: float = 0.0
    errors: int = 0
    calls_by_purpose: dict = field(default_factory=lambda: defaultdict(int))
    estimated_cost_usd: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_calls": self.total_calls,
            "total_tokens_in": self.total_tokens_in,
            "total_tokens_out": self.total_tokens_out,
            "total_latency_ms": round(self.total_latency_ms, 1),
            "avg_latency_ms": round(self.total_latency_ms / max(self.total_calls, 1), 1),
            "errors": self.errors,
            "calls_by_purpose": dict(self.calls_by_purpose),
            "estimated_cost_usd": round(self.estimated_cost_usd, 4),
        }


# ── Gateway ────────────────────────────────────────────────────────────

class LLMGateway:
    """LLM proxy with observability.

    Usage:
        from wellpump.core.gateway import LLMGateway
        gateway = LLMGateway(OpenAI(model="gpt-4o"))
        response = gateway.chat(messages, gateway_purpose="pump_selection")
    """

    def __init__(self, llm: Any):
        self._llm = llm
        self._metrics = LLMMetrics()
        self._lock = threading.Lock()
        logger.info(
            f"LLMGateway initialized, wrapping {type(llm).__name__}"
            f" (model={getattr(llm, 'model', 'unknown')})"
        )

    @property
    def model(self) -> str:
        return getattr(self._llm, "model", "unknown")

    def chat(self, messages: Sequence[ChatMessage], **kwargs: Any) -> ChatResponse:
        """Forward a chat call, recording latency and usage."""
        purpose = kwargs.pop("gateway_purpose", "general")
        t0 = time.time()

        try:
            response = self._llm.chat(messages, **kwargs)
        except Exception:
            self._record_error(purpose)
            raise

        latency_ms = (time.time() - t0) * 1000
        self._record_chat_success(messages, response, latency_ms, purpose)
        return response

    # ── Metrics recording ─────────────────────────────────────────────

    def _record_chat_success(
        self,
        messages: Sequence[ChatMessage],
        response: ChatResponse,
        latency_ms: float,
        purpose: str,
    ):
        msg_text = " ".join(m.content or "" for m in messages)
        tokens_in = len(msg_text.split()) * 1.3  # rough estimate
        resp_text = (response.message.content or "") if response.message else ""
        tokens_out = len(resp_text.split()) * 1.3

        # Prefer real token counts when the provider reports them
        raw = getattr(response, "raw", None) or {}
        usage = raw.get("usage") if isinstance(raw, dict) else getattr(raw, "usage", None)
        if usage:
            tokens_in = getattr(usage, "prompt_tokens", None) or tokens_in
            tokens_out = getattr(usage, "completion_tokens", None) or tokens_out

        cost = self._estimate_cost(int(tokens_in), int(tokens_out))

        with self._lock:
            m = self._metrics
            m.total_calls += 1
            m.total_tokens_in += int(tokens_in)
            m.total_tokens_out += int(tokens_out)
            m.total_latency_ms += latency_ms
            m.estimated_cost_usd += cost
            m.calls_by_purpose[purpose] += 1

        logger.debug(
            f"LLM chat: purpose={purpose} messages={len(messages)} "
            f"tokens_in={int(tokens_in)} tokens_out={int(tokens_out)} "
            f"latency={latency_ms:.0f}ms model={self.model}"
        )

    def _record_error(self, purpose: str):
        with self._lock:
            self._metrics.errors += 1
            self._metrics.calls_by_purpose[f"{purpose}_error"] += 1
        logger.error(f"LLM call failed: purpose={purpose} model={self.model}")

    def _estimate_cost(self, tokens_in: int, tokens_out: int) -> float:
        costs = _COST_PER_1M_TOKENS.get(self.model, _COST_PER_1M_TOKENS["_default"])
        return (tokens_in * costs["input"] + tokens_out * costs["output"]) / 1_000_000

    # ── Public metrics API ────────────────────────────────────────────

    def get_metrics(self) -> dict:
        """Return a thread-safe snapshot of current metrics."""
        with self._lock:
            result = self._metrics.to_dict()
            result["model"] = self.model
            return result

    def reset_metrics(self):
        with self._lock:
            self._metrics = LLMMetrics()
        logger.info("LLMGateway metrics reset")
