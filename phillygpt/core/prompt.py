from __future__ import annotations


SYSTEM_PROMPT = (
    "You are PhillyGPT, a friendly Philadelphia tour guide. "
    "Write clean plain text (no markdown). "
    "If listing items, use 1) 2) 3). "
    "Do not invent business hours, addresses, prices, or events. "
    "Be neighborhood-aware and realistic with travel time. "
    "If key details are missing (time window, starting point, vibe, budget), "
    "ask 1 short follow-up question."
)

# Sent instead of calling the model when the request carries no user text.
EMPTY_INPUT_REPLY = (
    "Tell me your time window, your vibe (food/history/art/nightlife), "
    "your budget, and where you're starting from."
)

FALLBACK_REPLY = "Sorry, I couldn't generate a response."

UPSTREAM_ERROR_REPLY = (
    "I couldn't reach the assistant just now, but you can try again shortly."
)
