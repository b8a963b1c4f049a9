from unittest.mock import MagicMock, patch

import httpx
import pytest

from casedraft.evaluation.exceptions import GenerationNetworkError, GenerationResponseError
from casedraft.evaluation.http_client_adapter import HttpGenerationClient

_URL = "http://generation.local/api/process-document"


def _response(status: int, **kwargs: object) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", _URL), **kwargs)  # type: ignore[arg-type]


def _make_client(mock_http: MagicMock) -> HttpGenerationClient:
    with patch(
        "casedraft.evaluation.http_client_adapter.httpx.Client",
        return_value=mock_http,
    ):
        return HttpGenerationClient(endpoint_url=_URL, timeout_seconds=5)


def _generate(client: HttpGenerationClient) -> str:
    return client.generate(
        document_type="transcript_structured_data",
        document_name="transcript.pdf",
        document_text="MATH 101 Calculus 3 A",
        prompt="Extract the fields.",
    )


class TestHttpGenerationClient:
    def test_returns_summary_field(self) -> None:
        mock_http = MagicMock()
        mock_http.post.return_value = _response(200, json={"summary": "generated"})

        assert _generate(_make_client(mock_http)) == "generated"

    def test_posts_camel_case_payload(self) -> None:
        mock_http = MagicMock()
        mock_http.post.return_value = _response(200, json={"summary": ""})

        _generate(_make_client(mock_http))

        url = mock_http.post.call_args.args[0]
        payload = mock_http.post.call_args.kwargs["json"]
        assert url == _URL
        assert payload == {
            "documentType": "transcript_structured_data",
            "documentName": "transcript.pdf",
            "documentText": "MATH 101 Calculus 3 A",
            "prompt": "Extract the fields.",
        }

    def test_missing_summary_returns_empty_string(self) -> None:
        mock_http = MagicMock()
        mock_http.post.return_value = _response(200, json={"other": 1})

        assert _generate(_make_client(mock_http)) == ""

    def test_error_field_raises_response_error(self) -> None:
        mock_http = MagicMock()
        mock_http.post.return_value = _response(200, json={"error": "quota exceeded"})

        with pytest.raises(GenerationResponseError, match="quota exceeded"):
            _generate(_make_client(mock_http))

    def test_non_2xx_raises_response_error(self) -> None:
        mock_http = MagicMock()
        mock_http.post.return_value = _response(502, text="bad gateway")

        with pytest.raises(GenerationResponseError, match="502"):
            _generate(_make_client(mock_http))

    def test_timeout_raises_network_error(self) -> None:
        mock_http = MagicMock()
        mock_http.post.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(GenerationNetworkError, match="timed out"):
            _generate(_make_client(mock_http))

    def test_connection_failure_raises_network_error(self) -> None:
        mock_http = MagicMock()
        mock_http.post.side_effect = httpx.ConnectError("refused")

        with pytest.raises(GenerationNetworkError, match="network error"):
            _generate(_make_client(mock_http))

    def test_close_closes_http_client(self) -> None:
        mock_http = MagicMock()

        _make_client(mock_http).close()

        mock_http.close.assert_called_once()
