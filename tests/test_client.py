import pytest
import requests

from wa_organizer import client as client_module
from wa_organizer.client import (
    GeminiClient,
    build_request_body,
    build_request_url,
    extract_text,
    model_name_from_endpoint,
)
from wa_organizer.errors import ProcessingError

ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash-exp:generateContent"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, json_error=None):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self._json_error:
            raise self._json_error
        return self._payload


def ok_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def captured(monkeypatch):
    calls = []
    responses = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        result = responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(client_module.requests, "post", fake_post)
    return calls, responses


def test_request_url_appends_key():
    assert build_request_url(f" {ENDPOINT} ", " k+y/ ") == f"{ENDPOINT}?key=k%2By%2F"
    assert build_request_url("https://proxy.test/gen?alt=json", "abc") == "https://proxy.test/gen?alt=json&key=abc"


def test_request_body_shape():
    assert build_request_body("hi", 10) == {
        "contents": [{"parts": [{"text": "hi"}]}],
        "generationConfig": {"temperature": 0.1, "topK": 1, "topP": 1, "maxOutputTokens": 10},
    }
    assert build_request_body("hi")["generationConfig"]["maxOutputTokens"] == 8192


def test_extract_text_trims():
    assert extract_text(ok_payload("  result \n")) == "result"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"candidates": []},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{}]}}]},
        ok_payload("   "),
        None,
    ],
)
def test_extract_text_rejects_bad_shapes(payload):
    with pytest.raises(ProcessingError):
        extract_text(payload)


def test_model_name_from_endpoint():
    assert model_name_from_endpoint(ENDPOINT) == "gemini-2.0-flash-exp"
    with pytest.raises(ProcessingError):
        model_name_from_endpoint("https://proxy.test/generate")


def test_generate_posts_prompt(captured):
    calls, responses = captured
    responses.append(FakeResponse(payload=ok_payload("organized\n")))

    result = GeminiClient(ENDPOINT, "secret").generate("prompt text")

    assert result == "organized"
    assert calls[0]["url"] == f"{ENDPOINT}?key=secret"
    assert calls[0]["json"] == build_request_body("prompt text", 8192)
    assert calls[0]["headers"] == {"Content-Type": "application/json"}
    assert calls[0]["timeout"] is None


def test_generate_http_error(captured):
    _, responses = captured
    responses.append(FakeResponse(status_code=403))
    with pytest.raises(ProcessingError, match="403"):
        GeminiClient(ENDPOINT, "secret").generate("prompt")


def test_generate_transport_error(captured):
    _, responses = captured
    responses.append(requests.ConnectionError("down"))
    with pytest.raises(ProcessingError):
        GeminiClient(ENDPOINT, "secret").generate("prompt")


def test_generate_invalid_json(captured):
    _, responses = captured
    responses.append(FakeResponse(json_error=ValueError("no json")))
    with pytest.raises(ProcessingError):
        GeminiClient(ENDPOINT, "secret").generate("prompt")


def test_generate_empty_text(captured):
    _, responses = captured
    responses.append(FakeResponse(payload=ok_payload("")))
    with pytest.raises(ProcessingError, match="Empty"):
        GeminiClient(ENDPOINT, "secret").generate("prompt")


def test_check_connection_sends_small_request(captured):
    calls, responses = captured
    responses.append(FakeResponse(payload={"candidates": [{"finishReason": "MAX_TOKENS"}]}))

    GeminiClient(ENDPOINT, "secret").check_connection()

    assert calls[0]["json"]["contents"][0]["parts"][0]["text"] == "مرحبا"
    assert calls[0]["json"]["generationConfig"]["maxOutputTokens"] == 10


def test_check_connection_without_candidates(captured):
    _, responses = captured
    responses.append(FakeResponse(payload={"promptFeedback": {}}))
    with pytest.raises(ProcessingError):
        GeminiClient(ENDPOINT, "secret").check_connection()


def test_unknown_transport():
    with pytest.raises(ValueError):
        GeminiClient(ENDPOINT, "secret", transport="grpc")


class FakeSdkResponse:
    def __init__(self, text, candidates=("candidate",)):
        self.text = text
        self.candidates = list(candidates)


class FakeModel:
    instances = []

    def __init__(self, name):
        self.name = name
        self.calls = []
        FakeModel.instances.append(self)

    def generate_content(self, text, generation_config=None):
        self.calls.append((text, generation_config))
        return FakeSdkResponse(" sdk result ")


def test_sdk_transport(monkeypatch):
    configured = {}
    FakeModel.instances.clear()
    monkeypatch.setattr(client_module.genai, "configure", lambda **kwargs: configured.update(kwargs))
    monkeypatch.setattr(client_module.genai, "GenerativeModel", FakeModel)

    result = GeminiClient(ENDPOINT, "secret", transport="sdk").generate("prompt")

    assert result == "sdk result"
    assert configured["api_key"] == "secret"
    assert configured["client_options"] == {"api_endpoint": "generativelanguage.googleapis.com"}
    model = FakeModel.instances[0]
    assert model.name == "gemini-2.0-flash-exp"
    assert model.calls[0][1]["max_output_tokens"] == 8192


def test_sdk_errors_become_processing_errors(monkeypatch):
    class BrokenModel(FakeModel):
        def generate_content(self, text, generation_config=None):
            raise RuntimeError("quota")

    monkeypatch.setattr(client_module.genai, "configure", lambda **kwargs: None)
    monkeypatch.setattr(client_module.genai, "GenerativeModel", BrokenModel)
    with pytest.raises(ProcessingError, match="RuntimeError"):
        GeminiClient(ENDPOINT, "secret", transport="sdk").generate("prompt")


def test_sdk_configure_errors_become_processing_errors(monkeypatch):
    def broken_configure(**kwargs):
        raise ValueError("bad client options")

    monkeypatch.setattr(client_module.genai, "configure", broken_configure)
    with pytest.raises(ProcessingError, match="ValueError"):
        GeminiClient(ENDPOINT, "secret", transport="sdk").generate("prompt")
