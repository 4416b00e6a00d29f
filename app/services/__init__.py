"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (app.main) calls these services;
they don't handle HTTP, only message assembly and LLM calls.

MODULES:
    generation_service - Validated request in, generated code + updated history out.
    completion_client  - OpenAI chat model wrapper; raises CompletionError with an ErrorKind.
"""
