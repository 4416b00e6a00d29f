"""
GENERATION SERVICE MODULE
=========================

Business logic for POST /api/generate: one request in, one reply out, no state
kept between requests.

FLOW:
  1. Check that an OpenAI API key was configured (ServiceMisconfigured if not).
  2. build_messages(): system prompt + filtered history + "Generate code for: <prompt>".
  3. Call the completion service (with retries for transient failures only).
  4. Use the reply text as the code, or "// No code generated" if it is empty.
  5. Return code, prompt and the history with the new user/assistant turns appended.

The system prompt is rebuilt for every request and never appears in the
returned history, so a client cannot alter it by editing its own transcript.
"""

import logging
from typing import Callable, List, Optional, Sequence

from app.errors import ServiceMisconfigured, classify_error, error_for_kind, is_transient
from app.models import ChatMessage, GenerateRequest, GenerateResponse
from app.services.completion_client import CompletionClient
from app.utils.retry import with_retry
from config import (
    CODEGEN_SYSTEM_PROMPT,
    GENERATION_MAX_RETRIES,
    GENERATION_MAX_TOKENS,
    GENERATION_RETRY_DELAY,
    GENERATION_TEMPERATURE,
    OPENAI_MODEL,
)


logger = logging.getLogger("CodeGen")

PROMPT_PREFIX = "Generate code for: "
NO_CODE_PLACEHOLDER = "// No code generated"


def format_prompt(prompt: str) -> str:
    """The user turn actually sent to the model for a prompt."""
    return f"{PROMPT_PREFIX}{prompt}"


class GenerationService:
    """
    Turns a GenerateRequest into a GenerateResponse using the completion service.

    The API key is passed in rather than read from the environment; an empty
    key is allowed here and reported on each request as ServiceMisconfigured.
    client_factory builds the completion client on first use (tests pass a fake).
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = OPENAI_MODEL,
        temperature: float = GENERATION_TEMPERATURE,
        max_tokens: int = GENERATION_MAX_TOKENS,
        max_retries: int = GENERATION_MAX_RETRIES,
        retry_delay: float = GENERATION_RETRY_DELAY,
        system_prompt: str = CODEGEN_SYSTEM_PROMPT,
        client_factory: Optional[Callable[..., CompletionClient]] = None,
    ):
        self.api_key = api_key or ""
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.system_prompt = system_prompt
        self._client_factory = client_factory or CompletionClient
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self):
        if self._client is None:
            logger.info("Creating completion client (model=%s)", self.model)
            self._client = self._client_factory(
                api_key=self.api_key,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        return self._client

    def build_messages(self, prompt: str, history: Sequence[ChatMessage]) -> List[ChatMessage]:
        """Messages sent downstream, in order: system, history, current prompt."""
        messages = [ChatMessage(role="system", content=self.system_prompt)]
        messages.extend(history)
        messages.append(ChatMessage(role="user", content=format_prompt(prompt)))
        return messages

    def generate(self, request: GenerateRequest) -> GenerateResponse:
        """
        Generate code for one request.

        Raises:
            ServiceMisconfigured: no API key was configured.
            CredentialRejected / QuotaExceeded / Unclassified: the completion call failed.
        """
        if not self.is_configured:
            logger.error("OpenAI API key not configured")
            raise ServiceMisconfigured()

        client = self._get_client()
        messages = self.build_messages(request.prompt, request.history)
        logger.info(
            "Generating code: prompt_len=%s history_turns=%s",
            len(request.prompt),
            len(request.history),
        )

        try:
            content = with_retry(
                lambda: client.complete(messages),
                max_retries=self.max_retries,
                initial_delay=self.retry_delay,
                retry_if=is_transient,
            )
        except Exception as e:
            kind = classify_error(e)
            logger.error("Error generating code (%s): %s", kind.value, e)
            raise error_for_kind(kind) from e

        code = content or NO_CODE_PLACEHOLDER
        history = list(request.history) + [
            ChatMessage(role="user", content=format_prompt(request.prompt)),
            ChatMessage(role="assistant", content=code),
        ]
        logger.info("Generated %s chars of code", len(code))
        return GenerateResponse(code=code, prompt=request.prompt, history=history)
