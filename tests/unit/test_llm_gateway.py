import pytest

from config.app_config import LlmRoute
from interview.state import CandidateInfo
from llm_gateway import LlmGatewayError, generate, oracle_for, parse_structured


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("not json")
        return self._payload


class FakeClient:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, *, json, headers, timeout):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return self.responses.pop(0)


def _reply(text):
    return FakeResponse(payload={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def _route(**overrides):
    data = dict(name="test", base_url="http://llm.local/models", model="m1", timeout_s=5, api_key="k", max_retries=1)
    data.update(overrides)
    return LlmRoute(**data)


def test_generate_posts_to_generate_content():
    client = FakeClient(_reply("hello"))
    assert generate("prompt", cfg=_route(), client=client, options={"temperature": 0.2}) == "hello"
    call = client.calls[0]
    assert call["url"] == "http://llm.local/models/m1:generateContent"
    assert call["headers"]["x-goog-api-key"] == "k"
    assert call["json"]["contents"][0]["parts"][0]["text"] == "prompt"
    assert call["json"]["generationConfig"]["temperature"] == 0.2


def test_generate_retries_empty_reply():
    client = FakeClient(_reply(""), _reply("second"))
    assert generate("p", cfg=_route(), client=client) == "second"
    assert len(client.calls) == 2


def test_generate_raises_on_status_and_bad_payload():
    with pytest.raises(LlmGatewayError):
        generate("p", cfg=_route(), client=FakeClient(FakeResponse(status_code=500, text="boom")))
    with pytest.raises(LlmGatewayError):
        generate("p", cfg=_route(), client=FakeClient(FakeResponse(payload=None)))
    with pytest.raises(LlmGatewayError):
        generate("p", cfg=_route(max_retries=0), client=FakeClient(_reply("  ")))


def test_generate_requires_api_key(monkeypatch):
    monkeypatch.delenv("MISSING_KEY", raising=False)
    with pytest.raises(LlmGatewayError):
        generate("p", cfg=_route(api_key=None, api_key_env="MISSING_KEY"), client=FakeClient())


def test_oracle_for_maps_keyword_options():
    client = FakeClient(_reply("ok"))
    oracle = oracle_for(_route(), client=client)
    assert oracle("p", temperature=0.1, max_tokens=50) == "ok"
    generation = client.calls[0]["json"]["generationConfig"]
    assert generation["temperature"] == 0.1
    assert generation["maxOutputTokens"] == 50


def test_parse_structured_handles_fences_and_chatter():
    fenced = '```json\n{"name": "Ana"}\n```'
    assert parse_structured(CandidateInfo, fenced).name == "Ana"
    chatty = 'Here you go: {"email": "a@b.co"} thanks'
    assert parse_structured(CandidateInfo, chatty).email == "a@b.co"
    with pytest.raises(ValueError):
        parse_structured(CandidateInfo, "no json at all")
