import logging
from typing import Optional

from llama_index.llms.openai import OpenAI

from ...setting import LLMSettings
from ..gateway import LLMGateway

logger = logging.getLogger(__name__)


def build_chat_llm(settings: LLMSettings) -> Optional[LLMGateway]:
    """Create the gateway-wrapped OpenAI chat model.

    Returns None when no API key is configured.
    """
    if not settings.api_key:
        logger.warning("OPENAI_API_KEY not set; pump recommendations disabled")
        return None

    llm = OpenAI(
        model=settings.model,
        api_key=settings.api_key,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )
    logger.info(f"Chat LLM ready: {settings.model}")
    return LLMGateway(llm)
