"""
COMPLETION CLIENT MODULE
========================

Thin wrapper around the OpenAI chat-completion API (through langchain-openai's
ChatOpenAI). It takes our ChatMessage list, converts it to LangChain messages,
calls the model once and returns the reply text.

Failures are re-raised as CompletionError with an ErrorKind (auth / quota /
other) so callers never have to inspect provider wording themselves.

Messages are passed to the model directly rather than through a
ChatPromptTemplate: generated code is full of curly braces, which a template
would treat as variables.
"""

import logging
from typing import List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from app.errors import CompletionError, classify_error
from app.models import ChatMessage


logger = logging.getLogger("CodeGen")


def to_langchain_messages(messages: Sequence[ChatMessage]) -> List[BaseMessage]:
    """Convert role/content turns to LangChain message objects, keeping order."""
    converted: List[BaseMessage] = []
    for msg in messages:
        if msg.role == "system":
            converted.append(SystemMessage(content=msg.content))
        elif msg.role == "assistant":
            converted.append(AIMessage(content=msg.content))
        else:
            converted.append(HumanMessage(content=msg.content))
    return converted


def _content_text(content) -> str:
    """Flatten AIMessage content, which may be a string or a list of parts."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and isinstance(part.get("text"), str):
            parts.append(part["text"])
    return "".join(parts)


class CompletionClient:
    """One configured chat model; complete() is safe to call from many requests."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ):
        self.model = model
        # Retries are handled by GenerationService so attempts are counted in one place.
        self.llm = ChatOpenAI(
            model=model,
            api_key=api_key,
            temperature=temperature,
            max_tokens=max_tokens,
            max_retries=0,
        )

    def complete(self, messages: Sequence[ChatMessage]) -> Optional[str]:
        """
        Send messages to the model and return the first choice's text.
        Returns None when the model replied with no content.
        Raises CompletionError on any failure.
        """
        try:
            response = self.llm.invoke(to_langchain_messages(messages))
        except Exception as e:
            kind = classify_error(e)
            logger.warning("Completion call failed (%s): %s", kind.value, e)
            raise CompletionError(kind, str(e)) from e

        text = _content_text(getattr(response, "content", None))
        return text or None
