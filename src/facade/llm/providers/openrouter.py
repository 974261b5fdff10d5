import functools
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ...config import OpenRouterCredentials
from ...errors import TransportError
from ...streaming.session import CancellationToken, StreamingSession
from ...streaming.splitter import split_thinking
from ..base import LLMProvider
from ..models import ChatMessage, ModelDescriptor, StreamCallbacks, ThinkingResult
from ..request import ChatRequestBuilder, validate_request

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0
CONNECT_TIMEOUT = 10.0


class OpenRouterProvider(LLMProvider):
    """OpenRouter provider for the catalog models.

    Hidden design decisions:
    - Streaming goes over a raw httpx response so the byte stream can be
      reassembled and decoded by facade.streaming
    - Non-streaming completions use the OpenAI SDK pointed at OpenRouter,
      sharing the same httpx client
    - Every request is sent once; retries are disabled on the SDK client
    """

    def __init__(
        self,
        credentials: OpenRouterCredentials,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        **client_kwargs: Any
    ):
        """Initialize OpenRouter provider.

        Args:
            credentials: API key, base URL and attribution
            http_client: HTTP client for all requests; the caller keeps
                ownership of a client passed in (default: a new AsyncClient)
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for the AsyncOpenAI client
        """
        self._credentials = credentials
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=CONNECT_TIMEOUT)
        )
        self._client = AsyncOpenAI(
            api_key=credentials.api_key.get_secret_value(),
            base_url=credentials.base_url,
            default_headers=credentials.attribution_headers,
            timeout=timeout,
            max_retries=0,
            http_client=self._http,
            **client_kwargs
        )

    @property
    def credentials(self) -> OpenRouterCredentials:
        return self._credentials

    async def complete(
        self,
        messages: list[ChatMessage],
        model_key: str,
        system_prompt: str | None = None,
    ) -> ThinkingResult:
        """Generate a completion and split out the thinking trace.

        Args:
            messages: Conversation history
            model_key: Catalog key of the model to use
            system_prompt: Optional system prompt placed before the thinking instruction

        Returns:
            ThinkingResult; an empty backend response yields empty strings
        """
        parsed, model = validate_request(messages, model_key)
        builder = ChatRequestBuilder(model, self._credentials)

        logger.debug("Requesting completion from %s", model.id)
        try:
            completion = await self._client.chat.completions.create(
                model=model.id,
                messages=builder.messages(parsed, system_prompt),
                temperature=builder.temperature,
            )
        except openai.APIStatusError as e:
            raise TransportError(
                f"API error {e.status_code}: {e.message}", status_code=e.status_code
            ) from e
        except openai.APIError as e:
            raise TransportError(f"API error: {e.message}") from e

        content = ""
        if completion.choices:
            content = completion.choices[0].message.content or ""
        return split_thinking(content)

    async def stream_completion(
        self,
        messages: list[ChatMessage],
        model_key: str,
        callbacks: StreamCallbacks,
        cancel: CancellationToken | None = None,
        system_prompt: str | None = None,
    ) -> None:
        """Stream a completion through a new StreamingSession.

        Args:
            messages: Conversation history
            model_key: Catalog key of the model to use
            callbacks: Consumer hooks
            cancel: Optional token to stop reading early
            system_prompt: Optional system prompt placed before the thinking instruction
        """
        session = StreamingSession(
            functools.partial(self.open_stream, system_prompt=system_prompt)
        )
        await session.run(messages, model_key, callbacks, cancel)

    async def open_stream(
        self,
        messages: list[ChatMessage],
        model: ModelDescriptor,
        system_prompt: str | None = None,
    ) -> AsyncIterator[bytes]:
        """Send a streaming request and yield raw response bytes.

        Raises:
            TransportError: On connection failure or a non-success status
        """
        builder = ChatRequestBuilder(model, self._credentials)
        payload = builder.payload(messages, stream=True, system_prompt=system_prompt)

        try:
            async with self._http.stream(
                "POST", builder.url, headers=builder.headers, json=payload
            ) as response:
                if response.is_error:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise TransportError(
                        f"API error {response.status_code}: {body[:500] or 'Unknown error'}",
                        status_code=response.status_code,
                    )
                async for chunk in response.aiter_bytes():
                    yield chunk
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {builder.url} failed: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client if this provider created it.

        Note: Uses the OpenAI SDK's async close, which closes the shared client.
        See: https://github.com/openai/openai-python#async-usage
        """
        if self._owns_http:
            await self._client.close()
