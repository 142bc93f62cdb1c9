from .model import build_chat_llm

__all__ = ["build_chat_llm"]
