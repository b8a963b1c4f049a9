import httpx
import openai

from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationNetworkError, GenerationResponseError


class OpenAIClientAdapter(BaseGenerationClient):
    """Generation client built on the OpenAI-compatible chat API.

    The instruction goes in the system message, the source text in the user
    message.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        temperature: float = 0.2,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self._model = model
        self._temperature = temperature

    def generate(
        self,
        *,
        document_type: str,
        document_name: str,
        document_text: str,
        prompt: str,
    ) -> str:
        user_content = f"Document: {document_name} ({document_type})\n\n{document_text}"
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                messages=[
                    {"role": "system", "content": prompt},
                    {"role": "user", "content": user_content},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise GenerationNetworkError(
                f"AI provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise GenerationResponseError(
                f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise GenerationResponseError("AI returned no choices")
        return response.choices[0].message.content or ""
