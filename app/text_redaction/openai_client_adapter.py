import httpx
import openai

from app.logging.logger import Log
from app.text_redaction.client_base import BaseChatClient
from app.text_redaction.exceptions import TextRedactionNetworkError, TextRedactionResponseError


class OpenAIClientAdapter(BaseChatClient):
    """Chat client on the OpenAI API or any server speaking its protocol.

    The SDK retries connection errors, 429s and 5xx responses itself;
    ``max_retries`` bounds that. Whatever is left surfaces as
    ``TextRedactionNetworkError``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        max_retries: int = 2,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=max_retries,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise TextRedactionNetworkError(
                f"AI provider network error: request timed out ({exc})"
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise TextRedactionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIStatusError as exc:
            raise TextRedactionNetworkError(
                f"AI provider API error: status {exc.status_code}: {exc.message}"
            ) from exc
        except openai.APIError as exc:
            raise TextRedactionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise TextRedactionResponseError("AI returned no choices")
        choice = response.choices[0]
        if choice.message.content is None:
            raise TextRedactionResponseError(
                f"AI returned empty response (finish_reason={choice.finish_reason})"
            )
        if response.usage is not None:
            Log.debug(
                "Chat completion usage",
                model=model,
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
            )
        return choice.message.content
