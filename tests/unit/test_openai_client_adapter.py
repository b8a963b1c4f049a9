from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from casedraft.evaluation.exceptions import GenerationNetworkError, GenerationResponseError
from casedraft.evaluation.openai_client_adapter import OpenAIClientAdapter


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _generate(adapter: OpenAIClientAdapter) -> str:
    return adapter.generate(
        document_type="diploma",
        document_name="degree.pdf",
        document_text="Bachelor of Arts",
        prompt="Determine the US equivalency.",
    )


def _make_adapter(mock_client: MagicMock) -> OpenAIClientAdapter:
    with patch(
        "casedraft.evaluation.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        return OpenAIClientAdapter(api_key="k", model="m", timeout_seconds=30)


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("Bachelor's degree")

        assert _generate(_make_adapter(mock_client)) == "Bachelor's degree"

    def test_sends_prompt_as_system_message(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("ok")

        _generate(_make_adapter(mock_client))

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "m"
        assert kwargs["temperature"] == 0.2
        system, user = kwargs["messages"]
        assert system == {"role": "system", "content": "Determine the US equivalency."}
        assert user["role"] == "user"
        assert "degree.pdf (diploma)" in user["content"]
        assert "Bachelor of Arts" in user["content"]

    def test_empty_content_returns_empty_string(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(None)

        assert _generate(_make_adapter(mock_client)) == ""

    def test_raises_response_error_without_choices(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(choices=[])

        with pytest.raises(GenerationResponseError, match="no choices"):
            _generate(_make_adapter(mock_client))

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=MagicMock()
        )

        with pytest.raises(GenerationNetworkError, match="network error"):
            _generate(_make_adapter(mock_client))

    def test_raises_network_error_on_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = httpx.TimeoutException("timeout")

        with pytest.raises(GenerationNetworkError, match="network error"):
            _generate(_make_adapter(mock_client))

    def test_raises_response_error_on_api_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIError(
            message="server error",
            request=MagicMock(),
            body=None,
        )

        with pytest.raises(GenerationResponseError, match="API error"):
            _generate(_make_adapter(mock_client))
