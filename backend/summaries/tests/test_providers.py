from unittest import mock

import pytest
import requests

from core.exceptions import ExternalServiceError
from summaries.providers import SummaryRequest, build_prompt, load
from summaries.providers.anthropic_api import AnthropicProvider
from summaries.providers.static import StaticProvider

REQUEST = SummaryRequest(
    customer_name="Acme",
    pol="SGSIN",
    pod="NLRTM",
    equipment="40GP",
    volume="2x40GP",
    type="Export",
)


def _response(body, status_code=200):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.json.return_value = body
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    else:
        resp.raise_for_status.return_value = None
    return resp


def test_prompt_carries_every_field():
    prompt = build_prompt(REQUEST)
    for value in ("Acme", "SGSIN", "NLRTM", "40GP", "2x40GP", "Export"):
        assert value in prompt


def test_anthropic_success():
    provider = AnthropicProvider(url="https://example.test/v1/messages", api_key="k", model="m", timeout=3)
    body = {"content": [{"type": "text", "text": " Export of 2x40GP for Acme. "}], "stop_reason": "end_turn"}

    with mock.patch("summaries.providers.anthropic_api.requests.post", return_value=_response(body)) as post:
        assert provider.summarize(REQUEST) == "Export of 2x40GP for Acme."

    kwargs = post.call_args.kwargs
    assert post.call_args.args == ("https://example.test/v1/messages",)
    assert kwargs["headers"]["x-api-key"] == "k"
    assert kwargs["headers"]["anthropic-version"] == "2023-06-01"
    assert kwargs["json"]["model"] == "m"
    assert kwargs["json"]["messages"][0]["role"] == "user"
    assert kwargs["timeout"] == 3


def test_anthropic_http_error():
    provider = AnthropicProvider(api_key="k")
    with mock.patch("summaries.providers.anthropic_api.requests.post", return_value=_response({}, 529)):
        with pytest.raises(ExternalServiceError):
            provider.summarize(REQUEST)


def test_anthropic_connection_error():
    provider = AnthropicProvider(api_key="k")
    with mock.patch(
        "summaries.providers.anthropic_api.requests.post",
        side_effect=requests.ConnectionError("no route"),
    ):
        with pytest.raises(ExternalServiceError):
            provider.summarize(REQUEST)


def test_anthropic_empty_content():
    provider = AnthropicProvider(api_key="k")
    with mock.patch.object(AnthropicProvider, "_post", return_value={"content": [], "stop_reason": "max_tokens"}):
        with pytest.raises(ExternalServiceError):
            provider.summarize(REQUEST)


def test_anthropic_without_key_does_not_call_out():
    provider = AnthropicProvider(api_key="")
    with mock.patch("summaries.providers.anthropic_api.requests.post") as post:
        with pytest.raises(ExternalServiceError):
            provider.summarize(REQUEST)
    post.assert_not_called()


def test_load(settings):
    settings.SUMMARY_API_KEY = "from-settings"
    provider = load("claude")
    assert isinstance(provider, AnthropicProvider)
    assert provider.api_key == "from-settings"

    assert isinstance(load("offline"), StaticProvider)
    assert isinstance(load("nonsense"), StaticProvider)


def test_static_provider():
    text = StaticProvider().summarize(REQUEST)
    assert text.startswith("Export quotation for Acme")
