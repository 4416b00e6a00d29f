"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all CodeGen settings: the OpenAI API key, model name,
  generation parameters, server/client addresses and the code-generation
  system prompt.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so the API key stays out of code).
  - Exposes OPENAI_API_KEY and OPENAI_MODEL for the completion service.
  - Defines temperature, output token cap and retry settings for each request.
  - Holds the fixed system prompt sent at the start of every conversation.

USAGE:
  Import what you need: `from config import OPENAI_API_KEY, CODEGEN_SYSTEM_PROMPT`
  The API key is read once here and passed into GenerationService explicitly;
  nothing else reads the environment.
"""

import os
import logging
from dotenv import load_dotenv


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back to default on bad values."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    """Read an int from the environment, falling back to default on bad values."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


# ============================================================================
# OPENAI API CONFIGURATION
# ============================================================================
# OPENAI_API_KEY has no default. When it is empty the server still starts;
# every generation request then fails with "OpenAI API key not configured" (500).

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# ============================================================================
# GENERATION PARAMETERS
# ============================================================================
# Low temperature keeps generated code consistent between runs.
# MAX_TOKENS caps the length of one reply.
# MAX_RETRIES counts attempts including the first; only transient failures are
# retried (a rejected key or exhausted quota fails straight away).

GENERATION_TEMPERATURE = _env_float("GENERATION_TEMPERATURE", 0.3)
GENERATION_MAX_TOKENS = _env_int("GENERATION_MAX_TOKENS", 2000)
GENERATION_MAX_RETRIES = _env_int("GENERATION_MAX_RETRIES", 2)
GENERATION_RETRY_DELAY = _env_float("GENERATION_RETRY_DELAY", 1.0)

# ============================================================================
# SERVER / CLIENT
# ============================================================================

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _env_int("SERVER_PORT", 8000)

# Used by the terminal client (client.py) to reach the server.
CODEGEN_API_URL = os.getenv("CODEGEN_API_URL", "http://localhost:8000").rstrip("/")
CLIENT_TIMEOUT = _env_float("CLIENT_TIMEOUT", 120.0)

# ============================================================================
# CODE GENERATION SYSTEM PROMPT
# ============================================================================
# Sent as the first message of every request and never returned to the client.
# The Plan / Think / Validate / Output stages are instructions to the model only.

CODEGEN_SYSTEM_PROMPT = """You are an expert software developer. Generate clean, production-ready code based on the user's request.

Requirements:
- Write clean, well-commented code
- Follow best practices and modern conventions
- Include proper error handling
- Use TypeScript when appropriate
- Return only the code, no explanations unless specifically requested
- If the request is unclear, ask for clarification or make reasonable assumptions

Use chain of thought and work through these steps before producing the code:

1) Plan
2) Think
3) Validate
4) Output

For example:
Prompt -> "User": Generate a snake game using react
#Plan "Assistant": The user wants to create a snake game using react. I will prepare a plan for the best output in accordance with the user's prompt.
#Think "Assistant": To build a snake game I first list the resources required, check the current react documentation for the latest APIs, keep the project typesafe and start writing the code.
#Validate "Assistant": Once the code is written, look for discrepancies and bugs and pick the best fixes. Do not present the output yet.
#Output "Assistant": Produce the final code in this stage.
"""
