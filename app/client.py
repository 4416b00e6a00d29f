"""
CONVERSATION CLIENT
===================

Client-side state for a code-generation session: the current prompt, whether a
request is in flight, the latest generated code and the transcript. Used by the
terminal front end (client.py) and usable from any other Python caller.

RULES:
  - Empty or whitespace-only prompts are not sent.
  - Only one request at a time; submitting while one is in flight does nothing.
  - On success the transcript is replaced by the history the server returns.
  - On any failure the code and a trailing assistant turn both show ERROR_PLACEHOLDER.
  - Whatever happens, the prompt is cleared and the in-flight flag reset.

The transcript lives only in memory; reset() or a restart discards it.
"""

import logging
from typing import Dict, List, Optional

import requests

from config import CLIENT_TIMEOUT, CODEGEN_API_URL


logger = logging.getLogger("CodeGen")

GENERATE_PATH = "/api/generate"
ERROR_PLACEHOLDER = "// Error generating code. Please try again."
NO_CODE_PLACEHOLDER = "// No code generated"
EMPTY_CODE_PLACEHOLDER = "// Generated code will appear here"


def format_transcript(history: List[Dict[str, str]], assistant_name: str = "AI") -> str:
    """Render a transcript as numbered "You:" / "AI:" lines."""
    if not history:
        return "No messages yet"
    lines = []
    for i, msg in enumerate(history, 1):
        who = "You" if msg.get("role") == "user" else assistant_name
        lines.append(f"{i}. {who}: {msg.get('content', '')}")
    return "\n".join(lines)


class ConversationClient:
    """One user's in-memory conversation with the CodeGen API."""

    def __init__(
        self,
        base_url: str = CODEGEN_API_URL,
        timeout: float = CLIENT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.prompt = ""
        self.is_generating = False
        self.generated_code = ""
        self.history: List[Dict[str, str]] = []

    def reset(self):
        """Forget the transcript and the last generated code."""
        self.prompt = ""
        self.generated_code = ""
        self.history = []

    def submit(self, prompt: Optional[str] = None) -> bool:
        """
        Send the current prompt (or the one given) to the server.

        Returns True if a request was made, False if the submission was ignored
        (blank prompt, or a request already in flight). Never raises for
        HTTP or network errors; those show up as ERROR_PLACEHOLDER.
        """
        if self.is_generating:
            return False
        if prompt is not None:
            self.prompt = prompt
        if not self.prompt.strip():
            return False

        self.is_generating = True
        updated_history = self.history + [{"role": "user", "content": self.prompt}]

        try:
            response = self.session.post(
                f"{self.base_url}{GENERATE_PATH}",
                json={"prompt": self.prompt, "history": self.history},
                timeout=self.timeout,
            )
            if response.ok:
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError(f"unexpected response body: {type(data).__name__}")
                code = data.get("code")
                self.generated_code = code or EMPTY_CODE_PLACEHOLDER
                history = data.get("history")
                if isinstance(history, list):
                    self.history = history
                else:
                    self.history = updated_history + [
                        {"role": "assistant", "content": code or NO_CODE_PLACEHOLDER}
                    ]
            else:
                logger.warning("Generate request failed: HTTP %s", response.status_code)
                self._show_error(updated_history)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Generate request failed: %s", e)
            self._show_error(updated_history)
        finally:
            self.is_generating = False
            self.prompt = ""
        return True

    def _show_error(self, updated_history: List[Dict[str, str]]):
        self.generated_code = ERROR_PLACEHOLDER
        self.history = updated_history + [{"role": "assistant", "content": ERROR_PLACEHOLDER}]
