# tests/test_model.py

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from config.settings import Settings
from phillygpt.core.normalizer import Turn
from phillygpt.model import UpstreamError, build_model, call_model, extract_reply_text, to_lc_messages


CONVERSATION = [
    Turn(role="system", content="S"),
    Turn(role="user", content="Best cheesesteak?"),
    Turn(role="assistant", content="Depends on the neighborhood."),
    Turn(role="user", content="South Philly"),
]


class ExplodingModel:
    def invoke(self, messages):
        raise ConnectionError("socket closed")


class StaticModel:
    def __init__(self, message):
        self.message = message
        self.received = None

    def invoke(self, messages):
        self.received = messages
        return self.message


def test_to_lc_messages_maps_roles_in_order():
    messages = to_lc_messages(CONVERSATION)
    assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
    assert [m.content for m in messages] == [t.content for t in CONVERSATION]


def test_call_model_returns_raw_text():
    llm = FakeListChatModel(responses=["**Try** John's Roast Pork"])
    assert call_model(CONVERSATION, llm=llm) == "**Try** John's Roast Pork"


def test_call_model_sends_whole_conversation():
    llm = StaticModel(AIMessage(content="ok"))
    call_model(CONVERSATION, llm=llm)
    assert len(llm.received) == len(CONVERSATION)
    assert isinstance(llm.received[0], SystemMessage)


def test_call_model_wraps_provider_errors():
    with pytest.raises(UpstreamError) as excinfo:
        call_model(CONVERSATION, llm=ExplodingModel())
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_call_model_rejects_unparsable_reply():
    with pytest.raises(UpstreamError):
        call_model(CONVERSATION, llm=StaticModel(object()))


def test_extract_reply_text_from_content_parts():
    message = AIMessage(content=[{"type": "text", "text": "Hello "}, "there", {"type": "image_url", "image_url": "x"}])
    assert extract_reply_text(message) == "Hello there"


def test_extract_reply_text_plain_string():
    assert extract_reply_text(AIMessage(content="")) == ""
    assert extract_reply_text("raw") == "raw"


def test_build_model_requires_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        build_model(Settings())
