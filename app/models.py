"""
DATA MODELS MODULE
==================

This file defines the Pydantic models used for the generation API. FastAPI uses
them to serialize responses; the endpoint builds GenerateRequest by hand from
the raw JSON body so that a missing prompt is reported as 400, not 422.

MODELS:
  ChatMessage       - One turn in a conversation (role + content).
  GenerateRequest   - Body of POST /api/generate (prompt + optional history).
  GenerateResponse  - Body returned on success (code + prompt + updated history).
  ErrorResponse     - Body returned on any failure ({"error": "..."}).
"""

from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.errors import InvalidRequest

# Roles a client may send back in its history. Anything else becomes "user".
HISTORY_ROLES = ("user", "assistant")


# ==============================================================================
# MESSAGE AND REQUEST/RESPONSE MODELS
# ==============================================================================

class ChatMessage(BaseModel):
    """
    A single turn in a conversation. Order in the list defines chronology.
    "system" turns are only ever built server-side.
    """
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


def filter_history(history: Any) -> List[ChatMessage]:
    """
    Keep well-formed history entries and normalise their roles.

    Entries that are not mappings, or whose role/content are not strings, are
    dropped. Surviving roles other than user/assistant are rewritten to user.
    A history that is not a list or tuple counts as empty.
    """
    if not isinstance(history, (list, tuple)):
        return []

    turns = []
    for item in history:
        if isinstance(item, ChatMessage):
            item = item.model_dump()
        if not isinstance(item, dict):
            continue
        role = item.get("role")
        content = item.get("content")
        if not isinstance(role, str) or not isinstance(content, str):
            continue
        turns.append(ChatMessage(
            role=role if role in HISTORY_ROLES else "user",
            content=content,
        ))
    return turns


class GenerateRequest(BaseModel):
    """
    Request body for POST /api/generate.

    - prompt: Required, non-empty. What the user wants built.
    - history: Optional. Previous turns, filtered by filter_history().
    """
    prompt: str = Field(..., min_length=1)
    history: List[ChatMessage] = Field(default_factory=list)

    @field_validator("history", mode="before")
    @classmethod
    def _filter_history(cls, value: Any) -> List[ChatMessage]:
        return filter_history(value)

    @classmethod
    def from_payload(cls, payload: Any) -> "GenerateRequest":
        """Build a request from decoded JSON; raise InvalidRequest if the prompt is unusable."""
        if not isinstance(payload, dict):
            raise InvalidRequest()
        prompt = payload.get("prompt")
        if not isinstance(prompt, str) or not prompt:
            raise InvalidRequest()
        return cls(prompt=prompt, history=payload.get("history"))


class GenerateResponse(BaseModel):
    """
    Response body for POST /api/generate.

    - code: The generated code (or "// No code generated").
    - prompt: The prompt exactly as received.
    - history: Filtered request history plus the new user and assistant turns.
    """
    code: str
    prompt: str
    history: List[ChatMessage]


class ErrorResponse(BaseModel):
    error: str
