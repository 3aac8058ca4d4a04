from __future__ import annotations

import logging
from typing import Any, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import Settings, get_settings
from phillygpt.core.normalizer import Conversation


logger = logging.getLogger("phillygpt.model")


class UpstreamError(RuntimeError):
    """The model provider failed or returned something unusable."""


def build_model(settings: Optional[Settings] = None) -> ChatGoogleGenerativeAI:
    settings = settings or get_settings()
    if not settings.google_api_key:
        raise RuntimeError(
            "GOOGLE_API_KEY not set. Please configure it in environment or .env"
        )

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.google_api_key,
        temperature=settings.temperature,
        top_p=settings.top_p,
        max_output_tokens=settings.max_output_tokens,
        timeout=settings.model_timeout,
    )


def to_lc_messages(conversation: Conversation) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for turn in conversation:
        if turn.role == "system":
            messages.append(SystemMessage(content=turn.content))
        elif turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
        else:
            messages.append(HumanMessage(content=turn.content))
    return messages


def extract_reply_text(message: Any) -> str:
    """Pull the reply text out of a chat model result.

    Providers return either a plain string or a list of content parts
    (strings or ``{"type": "text", "text": ...}`` blocks).
    """
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                if part.get("type", "text") in ("text", "output_text"):
                    parts.append(part["text"])
        return "".join(parts)
    raise UpstreamError(f"Unexpected model reply type: {type(content).__name__}")


def call_model(conversation: Conversation, llm: Any = None) -> str:
    """Send ``conversation`` upstream and return the raw reply text.

    Any provider or transport failure is raised as ``UpstreamError``.
    """
    llm = llm if llm is not None else build_model()
    messages = to_lc_messages(conversation)
    logger.info(
        "Calling model: turns=%s chars=%s",
        len(messages),
        sum(len(turn.content) for turn in conversation),
    )

    try:
        result = llm.invoke(messages)
    except Exception as exc:
        raise UpstreamError(f"Model call failed: {exc}") from exc

    text = extract_reply_text(result)
    logger.info("Model replied: %s chars", len(text))
    return text
