"""Conversation normalization.

Turns whatever the widget sent (a bare string, a list of turn-like objects,
or junk) into a bounded conversation with one trusted system turn in front.
Nothing here raises: unusable input collapses to a conversation holding only
the system turn and the caller decides what to answer.
"""

from __future__ import annotations

from typing import Any, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from phillygpt.core.prompt import SYSTEM_PROMPT


ACCEPTED_ROLES = {"user", "assistant"}

RawInput = Union[str, List[Any]]


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant", "system"]
    content: str


Conversation = List[Turn]


class NormalizeOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_turns: int = Field(20, gt=0, description="Most recent user/assistant turns kept")
    max_chars_per_turn: int = Field(2000, gt=0, description="Per-turn content cap, in characters")
    system_instructions: str = Field(SYSTEM_PROMPT, description="Server-side behavior instructions")


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _coerce_content(value: Any) -> Optional[str]:
    # bool is an int subclass; "True" is not a message.
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value
    elif isinstance(value, (int, float)):
        text = str(value)
    else:
        return None
    text = text.strip()
    return text or None


def _coerce_turn(item: Any, max_chars: int) -> Optional[Turn]:
    if item is None or isinstance(item, (str, bytes, int, float, list, tuple)):
        return None

    role = _field(item, "role")
    if not isinstance(role, str):
        return None
    role = role.strip().lower()
    if role not in ACCEPTED_ROLES:
        return None

    raw_content = _field(item, "content")
    if raw_content is None:
        # One widget variant stores {role, text} instead of {role, content}
        raw_content = _field(item, "text")
    content = _coerce_content(raw_content)
    if content is None:
        return None

    return Turn(role=role, content=content[:max_chars])


def normalize(raw_input: Any, options: Optional[NormalizeOptions] = None) -> Conversation:
    """Build the conversation sent upstream.

    A string becomes a single user turn; a list is filtered down to
    user/assistant turns with non-empty content. Every turn is cut to
    ``max_chars_per_turn`` characters and only the last ``max_turns``
    survive. The system turn is always first and is not counted against
    the cap.
    """
    options = options or NormalizeOptions()
    system_turn = Turn(role="system", content=options.system_instructions)

    turns: List[Turn] = []
    if isinstance(raw_input, str):
        text = raw_input.strip()
        if text:
            turns.append(Turn(role="user", content=text[: options.max_chars_per_turn]))
    elif isinstance(raw_input, (list, tuple)):
        for item in raw_input:
            turn = _coerce_turn(item, options.max_chars_per_turn)
            if turn is not None:
                turns.append(turn)

    return [system_turn] + turns[-options.max_turns:]


def extract_raw_input(body: Any) -> RawInput:
    """Collapse the accepted request shapes into one normalizer input.

    ``{"messages": [...]}`` wins when it holds at least one entry, then
    ``{"message": "..."}``. Anything else is treated as no input.
    """
    messages = _field(body, "messages") if body is not None else None
    if isinstance(messages, (list, tuple)) and messages:
        return list(messages)

    message = _field(body, "message") if body is not None else None
    if isinstance(message, str):
        return message
    return ""


def has_user_turn(conversation: Conversation) -> bool:
    return any(turn.role == "user" for turn in conversation)
