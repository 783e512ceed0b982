import base64
from unittest import mock

import pytest
import requests

from scripture.exceptions import NotConfigured, UpstreamError, UpstreamHTTPError
from scripture.genai import GenerativeClient
from scripture.speech import SpeechSynthesizer


def _response(status=200, json_data=None, text=""):
    r = mock.Mock(status_code=status, text=text)
    if isinstance(json_data, Exception):
        r.json.side_effect = json_data
    else:
        r.json.return_value = json_data
    return r


# -----------------------------
# Gemini
# -----------------------------

def test_generate_text_posts_prompt_and_joins_parts():
    session = mock.Mock()
    session.post.return_value = _response(json_data={
        "candidates": [{"content": {"parts": [{"text": '{"reference": '}, {"text": '"John 3:16"} '}]}}],
    })
    client = GenerativeClient("secret", "gemini-2.5-flash", session=session)

    assert client.generate_text("Hello", temperature=0.7) == '{"reference": "John 3:16"}'

    args, kwargs = session.post.call_args
    assert args[0].endswith("/models/gemini-2.5-flash:generateContent")
    assert kwargs["headers"]["x-goog-api-key"] == "secret"
    assert "params" not in kwargs
    assert "secret" not in args[0]
    assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "Hello"
    assert kwargs["json"]["generationConfig"]["temperature"] == 0.7


def test_generate_text_without_candidates_is_empty():
    session = mock.Mock()
    session.post.return_value = _response(json_data={"candidates": []})
    assert GenerativeClient("secret", session=session).generate_text("Hello") == ""


def test_generate_text_requires_api_key():
    session = mock.Mock()
    with pytest.raises(NotConfigured):
        GenerativeClient("", session=session).generate_text("Hello")
    session.post.assert_not_called()


def test_generate_text_http_error():
    session = mock.Mock()
    session.post.return_value = _response(status=429, text="quota exceeded")
    with pytest.raises(UpstreamHTTPError) as excinfo:
        GenerativeClient("secret", session=session).generate_text("Hello")
    assert excinfo.value.status == 429


def test_generate_text_network_error():
    def unreachable(url, **kwargs):
        raise requests.ConnectionError(f"Max retries exceeded with url: {url}")

    session = mock.Mock()
    session.post.side_effect = unreachable
    with pytest.raises(UpstreamError) as excinfo:
        GenerativeClient("secret", session=session).generate_text("Hello")
    assert "secret" not in str(excinfo.value)


def test_generate_text_non_json_body():
    session = mock.Mock()
    session.post.return_value = _response(json_data=ValueError("no json"))
    with pytest.raises(UpstreamError):
        GenerativeClient("secret", session=session).generate_text("Hello")


# -----------------------------
# Text-to-Speech
# -----------------------------

def _synth(session, **kwargs):
    return SpeechSynthesizer(project_id="tea-time", token_provider=lambda: "tok", session=session, **kwargs)


def test_synthesize_returns_decoded_audio():
    session = mock.Mock()
    session.post.return_value = _response(json_data={"audioContent": base64.b64encode(b"mp3-bytes").decode()})

    assert _synth(session).synthesize("Grace and peace") == b"mp3-bytes"

    args, kwargs = session.post.call_args
    assert args[0].endswith("/text:synthesize")
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["json"]["voice"]["name"] == "en-US-Neural2-F"
    assert kwargs["json"]["audioConfig"]["speakingRate"] == 0.92
    assert kwargs["json"]["audioConfig"]["audioEncoding"] == "MP3"


def test_synthesize_skips_empty_text():
    session = mock.Mock()
    assert _synth(session).synthesize("  ") is None
    session.post.assert_not_called()


@pytest.mark.parametrize("outcome", [
    _response(status=403, text="permission denied"),
    _response(json_data={}),
    requests.Timeout("slow"),
])
def test_synthesize_failures_yield_no_audio(outcome):
    session = mock.Mock()
    if isinstance(outcome, Exception):
        session.post.side_effect = outcome
    else:
        session.post.return_value = outcome
    assert _synth(session).synthesize("Grace and peace") is None


def test_synthesize_credential_failure_yields_no_audio():
    def no_credentials():
        raise RuntimeError("no ADC")

    session = mock.Mock()
    synth = SpeechSynthesizer(token_provider=no_credentials, session=session)
    assert synth.synthesize("Grace and peace") is None
    session.post.assert_not_called()
