from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pydantic import BaseModel, ConfigDict, Field

from config.settings import get_settings
from phillygpt.core.normalizer import extract_raw_input, has_user_turn, normalize
from phillygpt.core.prompt import EMPTY_INPUT_REPLY, FALLBACK_REPLY, UPSTREAM_ERROR_REPLY
from phillygpt.core.sanitizer import sanitize
from phillygpt.model import UpstreamError, call_model
from phillygpt.services.weather import WeatherError, fetch_current_weather


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("phillygpt")

app = FastAPI(title="Philly GPT", version="1.0.0")

# CORS: allow local frontend during development
settings = get_settings()
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Loosely typed on purpose: malformed turns are filtered by normalize(),
    # not rejected with a 422.
    message: Optional[Any] = Field(None, description="Single free-text user message")
    messages: Optional[Any] = Field(
        None,
        description="Conversation history as [{role, content}, ...], oldest first",
    )


def json_response(body: Dict[str, Any], status_code: int = 200, cache_seconds: int = 0) -> JSONResponse:
    cache_control = f"public, max-age={cache_seconds}" if cache_seconds > 0 else "no-store"
    return JSONResponse(body, status_code=status_code, headers={"Cache-Control": cache_control})


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request body on %s: %s error(s)", request.url.path, len(exc.errors()))
    return json_response({"error": "Invalid JSON body"}, 400)


@app.post("/api/chat")
def chat(req: Optional[ChatRequest] = None) -> JSONResponse:
    settings = get_settings()
    if not settings.google_api_key:
        logger.error("GOOGLE_API_KEY is not configured")
        return json_response({"error": "Missing GOOGLE_API_KEY"}, 500)

    conversation = normalize(extract_raw_input(req), settings.normalize_options())
    logger.info(
        "Incoming chat: turns=%s chars=%s",
        len(conversation) - 1,
        sum(len(turn.content) for turn in conversation[1:]),
    )

    if not has_user_turn(conversation):
        return json_response({"reply": EMPTY_INPUT_REPLY})

    try:
        raw_reply = call_model(conversation)
    except UpstreamError as exc:
        logger.warning("Upstream model failed: %s", exc)
        return json_response({"error": UPSTREAM_ERROR_REPLY}, 502)
    except Exception as e:
        logger.exception("Chat processing failed: %s", e)
        return json_response({"error": "Server error"}, 500)

    reply = sanitize(raw_reply)
    if not reply:
        logger.warning("Model reply was empty after cleanup (%s raw chars)", len(raw_reply))
        reply = FALLBACK_REPLY
    return json_response({"reply": reply})


@app.get("/api/weather")
def weather() -> JSONResponse:
    try:
        current = fetch_current_weather(get_settings())
    except WeatherError as exc:
        logger.warning("Weather lookup failed: %s", exc)
        return json_response({"error": "Weather unavailable"}, 502)
    return json_response(current, cache_seconds=300)


@app.get("/health")
def health():
    return {"status": "ok"}
