import httpx

from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationNetworkError, GenerationResponseError


class HttpGenerationClient(BaseGenerationClient):
    """Client for the document-processing HTTP endpoint.

    POSTs ``{documentType, documentName, documentText, prompt}`` and reads
    ``{summary, error?}`` from the JSON answer.
    """

    def __init__(self, *, endpoint_url: str, timeout_seconds: int) -> None:
        self._endpoint_url = endpoint_url
        self._client = httpx.Client(timeout=timeout_seconds)

    def generate(
        self,
        *,
        document_type: str,
        document_name: str,
        document_text: str,
        prompt: str,
    ) -> str:
        payload = {
            "documentType": document_type,
            "documentName": document_name,
            "documentText": document_text,
            "prompt": prompt,
        }
        try:
            response = self._client.post(self._endpoint_url, json=payload)
        except httpx.TimeoutException as exc:
            raise GenerationNetworkError(f"Generation service timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise GenerationNetworkError(f"Generation service network error: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            detail = data.get("error") or response.reason_phrase
            raise GenerationResponseError(
                f"API error ({response.status_code}): {detail}"
            )
        if data.get("error"):
            raise GenerationResponseError(f"API error: {data['error']}")

        summary = data.get("summary")
        return summary if isinstance(summary, str) else ""

    def close(self) -> None:
        self._client.close()
