"""Pump Advisor: asks an LLM to choose between two bracketing pumps.

The LLM sees both pumps' curve-chart images plus the target head and flow
and answers with a pump name. Every failure mode (no credential, no chart
image, remote error, empty answer) comes back as an error AdvisorResult;
``recommend`` never raises.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urljoin

from llama_index.core.base.llms.types import (
    ChatMessage,
    ImageBlock,
    MessageRole,
    TextBlock,
)

from ..exceptions import RemoteUnavailableError
from ..gateway import LLMGateway
from .prompts import PUMP_SELECTION_PROMPT

logger = logging.getLogger(__name__)

_ABSOLUTE_PREFIXES = ("http://", "https://", "data:")


@dataclass(frozen=True)
class Recommendation:
    """The LLM's choice.

    Attributes:
        pump_name: candidate name found in the answer, else the stripped answer
        raw_text: unmodified answer text
        matched: True when pump_name is one of the two candidates
    """
    pump_name: str
    raw_text: str
    matched: bool

    def to_dict(self) -> dict:
        return {"pump_name": self.pump_name, "raw_text": self.raw_text, "matched": self.matched}


@dataclass(frozen=True)
class AdvisorResult:
    """Either a recommendation or the reason there is none."""
    recommendation: Optional[Recommendation] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.recommendation is not None

    @classmethod
    def success(cls, recommendation: Recommendation) -> "AdvisorResult":
        return cls(recommendation=recommendation)

    @classmethod
    def failure(cls, reason: str) -> "AdvisorResult":
        return cls(error=reason)


class PumpAdvisor:
    """Chooses between two candidate pumps using chart images."""

    def __init__(self, llm: Optional[LLMGateway] = None, image_base_url: Optional[str] = None):
        self._llm = llm
        self._image_base_url = image_base_url

    @property
    def available(self) -> bool:
        return self._llm is not None

    def get_metrics(self) -> Optional[dict]:
        return self._llm.get_metrics() if self._llm is not None else None

    def recommend(
        self,
        pump_a: Dict,
        pump_b: Dict,
        total_head: float,
        target_gpm: float,
    ) -> AdvisorResult:
        try:
            text = self._ask(pump_a, pump_b, total_head, target_gpm)
        except RemoteUnavailableError as e:
            logger.warning(f"No pump recommendation: {e.message}")
            return AdvisorResult.failure(e.message)

        recommendation = self._match_candidate(text, pump_a, pump_b)
        logger.info(
            f"LLM recommended '{recommendation.pump_name}' "
            f"from ({pump_a['name']}, {pump_b['name']}) head={total_head:.1f} gpm={target_gpm:g}"
        )
        return AdvisorResult.success(recommendation)

    # ── Internals ─────────────────────────────────────────────────────

    def _ask(self, pump_a: Dict, pump_b: Dict, total_head: float, target_gpm: float) -> str:
        if self._llm is None:
            raise RemoteUnavailableError("LLM credential not configured")

        image_a = self._resolve_image(pump_a)
        image_b = self._resolve_image(pump_b)

        prompt = PUMP_SELECTION_PROMPT.format(
            pump_a=pump_a["name"],
            pump_b=pump_b["name"],
            head=total_head,
            gpm=target_gpm,
        )
        message = ChatMessage(
            role=MessageRole.USER,
            blocks=[
                TextBlock(text=prompt),
                ImageBlock(url=image_a),
                ImageBlock(url=image_b),
            ],
        )

        try:
            response = self._llm.chat([message], gateway_purpose="pump_selection")
        except Exception as e:
            raise RemoteUnavailableError(f"LLM call failed: {e}") from e

        content = response.message.content if response.message else None
        if not content or not content.strip():
            raise RemoteUnavailableError("LLM returned an empty answer")
        return content

    def _resolve_image(self, pump: Dict) -> str:
        path = (pump.get("image_path") or "").strip()
        if not path:
            raise RemoteUnavailableError(f"Pump '{pump['name']}' has no chart image")
        if path.startswith(_ABSOLUTE_PREFIXES):
            return path
        if not self._image_base_url:
            raise RemoteUnavailableError(
                f"Chart image '{path}' is relative and IMAGE_BASE_URL is not set"
            )
        return urljoin(self._image_base_url.rstrip("/") + "/", path.lstrip("/"))

    @staticmethod
    def _match_candidate(text: str, pump_a: Dict, pump_b: Dict) -> Recommendation:
        answer = text.strip()
        lowered = answer.lower()
        # Longer name first so "18gpm-hp" wins over "18gpm"
        for pump in sorted((pump_a, pump_b), key=lambda p: len(p["name"]), reverse=True):
            if pump["name"].lower() in lowered:
                return Recommendation(pump_name=pump["name"], raw_text=text, matched=True)
        return Recommendation(pump_name=answer, raw_text=text, matched=False)
