"""
CODEGEN APPLICATION PACKAGE
===========================

This directory is the main Python package for the CodeGen backend:

  from app.main import app
  from app.models import GenerateRequest
  from app.services.generation_service import GenerationService

FILE STRUCTURE:
  app/
    __init__.py   - This file; marks 'app' as a package.
    main.py       - FastAPI app and HTTP endpoints (/api/generate, /health, /).
    models.py     - Pydantic models for requests, responses and conversation turns.
    errors.py     - Error taxonomy (400/401/429/500) and completion error classification.
    client.py     - ConversationClient: in-memory transcript + one request per submission.
    services/     - Business logic: message assembly and the OpenAI completion client.
    utils/        - Helpers: retry with backoff.
"""
