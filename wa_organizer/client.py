"""Gemini generateContent calls.

The default ``rest`` transport posts the JSON body straight to the configured
endpoint with ``requests``. The ``sdk`` transport sends the same request
through ``google-generativeai``, taking the model name and host from the
endpoint URL.
"""

import logging
import re
import time
from urllib.parse import quote, urlparse

import google.generativeai as genai
import requests

from .errors import ProcessingError

LOGGER = logging.getLogger(__name__)

GENERATE_MAX_TOKENS = 8192
CONNECTION_CHECK_MAX_TOKENS = 10
# "Hello"
CONNECTION_CHECK_TEXT = "مرحبا"

# .../v1beta/models/<model>:generateContent
MODEL_PATH_PATTERN = re.compile(r"/models/(?P<model>[^/:?]+):generateContent")


def build_request_url(endpoint, api_key):
    endpoint = endpoint.strip()
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}key={quote(api_key.strip(), safe='')}"


def generation_config(max_output_tokens):
    return {
        "temperature": 0.1,
        "topK": 1,
        "topP": 1,
        "maxOutputTokens": max_output_tokens,
    }


def build_request_body(text, max_output_tokens=GENERATE_MAX_TOKENS):
    return {
        "contents": [{"parts": [{"text": text}]}],
        "generationConfig": generation_config(max_output_tokens),
    }


def extract_text(data):
    """Return the first text part of the first candidate, trimmed."""
    try:
        text = data["candidates"][0]["content"]["parts"][0].get("text")
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise ProcessingError("Invalid response format") from exc
    if not isinstance(text, str) or not text.strip():
        raise ProcessingError("Empty response text")
    return text.strip()


def model_name_from_endpoint(endpoint):
    match = MODEL_PATH_PATTERN.search(endpoint)
    if not match:
        raise ProcessingError(f"Endpoint does not name a model: {endpoint}")
    return match.group("model")


class GeminiClient:
    def __init__(self, endpoint, api_key, transport="rest", timeout=None):
        if transport not in ("rest", "sdk"):
            raise ValueError(f"unknown transport: {transport!r}")
        self.endpoint = endpoint.strip()
        self.api_key = api_key.strip()
        self.transport = transport
        self.timeout = timeout

    def generate(self, text):
        start = time.perf_counter()
        LOGGER.info(
            "event=generate status=starting transport=%s text_len=%d",
            self.transport,
            len(text),
        )
        if self.transport == "sdk":
            result = self._generate_sdk(text, GENERATE_MAX_TOKENS)
        else:
            result = extract_text(self._post(text, GENERATE_MAX_TOKENS))
        LOGGER.info(
            "event=generate status=finished result_len=%d latency_ms=%.2f",
            len(result),
            (time.perf_counter() - start) * 1000.0,
        )
        return result

    def check_connection(self):
        """Send a tiny greeting; raise ``ProcessingError`` unless a candidate comes back."""
        LOGGER.info("event=check_connection status=starting transport=%s", self.transport)
        if self.transport == "sdk":
            self._generate_sdk(CONNECTION_CHECK_TEXT, CONNECTION_CHECK_MAX_TOKENS, require_text=False)
        else:
            data = self._post(CONNECTION_CHECK_TEXT, CONNECTION_CHECK_MAX_TOKENS)
            candidates = data.get("candidates") if isinstance(data, dict) else None
            if not candidates:
                raise ProcessingError("Invalid response format")
        LOGGER.info("event=check_connection status=finished")

    def _post(self, text, max_output_tokens):
        # The URL carries the key, so it is never logged
        url = build_request_url(self.endpoint, self.api_key)
        body = build_request_body(text, max_output_tokens)
        try:
            resp = requests.post(
                url,
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "unknown"
            LOGGER.error("event=post status=error http_status=%s", status)
            raise ProcessingError(f"HTTP error! status: {status}") from exc
        except requests.exceptions.RequestException as exc:
            LOGGER.error("event=post status=error error=%s", exc.__class__.__name__)
            raise ProcessingError(f"Request failed: {exc.__class__.__name__}") from exc
        except ValueError as exc:
            LOGGER.error("event=post status=error error=invalid_json")
            raise ProcessingError("Response is not valid JSON") from exc

    def _generate_sdk(self, text, max_output_tokens, require_text=True):
        model_name = model_name_from_endpoint(self.endpoint)
        host = urlparse(self.endpoint).netloc
        config = generation_config(max_output_tokens)
        try:
            genai.configure(
                api_key=self.api_key,
                transport="rest",
                client_options={"api_endpoint": host},
            )
            model = genai.GenerativeModel(model_name)
            response = model.generate_content(
                text,
                generation_config={
                    "temperature": config["temperature"],
                    "top_k": config["topK"],
                    "top_p": config["topP"],
                    "max_output_tokens": config["maxOutputTokens"],
                },
            )
            if not response.candidates:
                raise ProcessingError("Invalid response format")
            if not require_text:
                return ""
            result = response.text
        except ProcessingError:
            raise
        except Exception as exc:  # noqa: BLE001
            LOGGER.error(
                "event=generate_sdk status=error model=%s error=%s",
                model_name,
                exc.__class__.__name__,
            )
            raise ProcessingError(f"Gemini SDK call failed: {exc.__class__.__name__}") from exc
        if not result or not result.strip():
            raise ProcessingError("Empty response text")
        return result.strip()
