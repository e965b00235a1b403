"""Unit tests for the chat-completion client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from mcp_agent.services.llm_client import (
    ChatCompletionClient,
    LlmError,
    LlmResponse,
    get_llm_client,
)


def _ok_response(content="olá", tool_calls=None, usage=None):
    resp = MagicMock()
    resp.status_code = 200
    message = {"role": "assistant", "content": content}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    resp.json.return_value = {
        "model": "llama3-70b-8192",
        "choices": [{"message": message}],
        "usage": usage or {"prompt_tokens": 100, "completion_tokens": 20},
    }
    resp.raise_for_status = MagicMock()
    return resp


class TestComplete:
    def test_sends_messages_with_model_and_sampling(self):
        client = ChatCompletionClient(api_key="gsk_test", temperature=0.2, max_tokens=512)
        messages = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]

        with patch("mcp_agent.services.llm_client.requests.post", return_value=_ok_response()) as mock_post:
            client.complete(messages)

        url = mock_post.call_args[0][0]
        kwargs = mock_post.call_args[1]
        assert url == "https://api.groq.com/openai/v1/chat/completions"
        assert kwargs["json"] == {
            "model": "llama3-70b-8192",
            "messages": messages,
            "temperature": 0.2,
            "max_tokens": 512,
        }
        assert kwargs["headers"]["Authorization"] == "Bearer gsk_test"
        assert kwargs["timeout"] == 30

    def test_returns_content_and_usage(self):
        client = ChatCompletionClient(api_key="gsk_test")
        with patch("mcp_agent.services.llm_client.requests.post", return_value=_ok_response("oi")):
            result = client.complete([{"role": "user", "content": "u"}])

        assert isinstance(result, LlmResponse)
        assert result.content == "oi"
        assert result.has_tool_calls is False
        assert result.input_tokens == 100
        assert result.output_tokens == 20
        assert result.cost_usd > 0

    def test_null_usage_counts_are_zero(self):
        client = ChatCompletionClient(api_key="gsk_test")
        resp = _ok_response("oi", usage={"prompt_tokens": None, "completion_tokens": None})
        with patch("mcp_agent.services.llm_client.requests.post", return_value=resp):
            result = client.complete([{"role": "user", "content": "u"}])

        assert result.content == "oi"
        assert result.input_tokens == 0
        assert result.output_tokens == 0
        assert result.cost_usd == 0

    def test_null_content_becomes_empty_string(self):
        client = ChatCompletionClient(api_key="gsk_test")
        resp = _ok_response(content=None, tool_calls=[{"id": "call_1"}])
        with patch("mcp_agent.services.llm_client.requests.post", return_value=resp):
            result = client.complete([{"role": "user", "content": "u"}])
        assert result.content == ""
        assert result.has_tool_calls is True

    def test_base_url_trailing_slash(self):
        client = ChatCompletionClient(api_key="k", base_url="http://llm.test/v1/")
        with patch("mcp_agent.services.llm_client.requests.post", return_value=_ok_response()) as mock_post:
            client.complete([])
        assert mock_post.call_args[0][0] == "http://llm.test/v1/chat/completions"


class TestFailures:
    def test_missing_api_key_fails_before_network(self):
        client = ChatCompletionClient(api_key="")
        with patch("mcp_agent.services.llm_client.requests.post") as mock_post:
            with pytest.raises(LlmError):
                client.complete([{"role": "user", "content": "u"}])
        mock_post.assert_not_called()

    def test_http_error_is_not_retried(self):
        client = ChatCompletionClient(api_key="gsk_test")
        fail_resp = MagicMock()
        fail_resp.status_code = 503
        fail_resp.raise_for_status.side_effect = requests.HTTPError("Unavailable")

        with patch("mcp_agent.services.llm_client.requests.post", return_value=fail_resp) as mock_post:
            with pytest.raises(requests.HTTPError):
                client.complete([{"role": "user", "content": "u"}])
        assert mock_post.call_count == 1

    def test_connection_error_propagates(self):
        client = ChatCompletionClient(api_key="gsk_test")
        with patch("mcp_agent.services.llm_client.requests.post",
                   side_effect=requests.ConnectionError("refused")):
            with pytest.raises(requests.ConnectionError):
                client.complete([{"role": "user", "content": "u"}])

    def test_malformed_body_raises_llm_error(self):
        client = ChatCompletionClient(api_key="gsk_test")
        resp = MagicMock()
        resp.raise_for_status = MagicMock()
        resp.json.side_effect = ValueError("not json")
        with patch("mcp_agent.services.llm_client.requests.post", return_value=resp):
            with pytest.raises(LlmError):
                client.complete([])

    def test_no_choices_gives_empty_content(self):
        client = ChatCompletionClient(api_key="gsk_test")
        resp = MagicMock()
        resp.raise_for_status = MagicMock()
        resp.json.return_value = {"choices": []}
        with patch("mcp_agent.services.llm_client.requests.post", return_value=resp):
            result = client.complete([])
        assert result.content == ""
        assert result.has_tool_calls is False


class TestCostEstimate:
    def test_known_model(self):
        cost = ChatCompletionClient._estimate_cost("llama3-70b-8192", 1_000_000, 1_000_000)
        assert cost == pytest.approx(0.59 + 0.79)

    def test_unknown_model_uses_default_pricing(self):
        assert ChatCompletionClient._estimate_cost("mystery", 1_000_000, 0) == pytest.approx(0.59)


class TestGetLlmClient:
    def test_created_once_from_config(self, app):
        with app.app_context():
            app.extensions.pop("mcp_agent.llm_client", None)
            first = get_llm_client()
            second = get_llm_client()
        assert first is second
        assert first.api_key == app.config["LLM_API_KEY"]
        assert first.default_model == app.config["LLM_MODEL"]
        assert first.temperature == app.config["LLM_TEMPERATURE"]
