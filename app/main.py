"""
CODEGEN MAIN API
================

This module defines the FastAPI application and all HTTP endpoints. Each
request is handled on its own: the server keeps no sessions, and the client
sends its whole conversation history with every request.

ENDPOINTS:
  GET  /              - Returns API name and list of endpoints.
  GET  /health        - Returns whether the generation service is ready and a key is set.
  POST /api/generate  - Generate code for a prompt, given the conversation so far.

ERRORS:
  Every failure is returned as {"error": "<short message>"} with status
  400 (missing prompt), 401 (key rejected), 429 (quota exceeded) or 500.

STARTUP:
  On startup, the lifespan function creates the GenerationService with the
  API key read from config. A missing key is logged but does not stop the server.
"""


from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
import uvicorn

from app.errors import GenerationError, InvalidRequest, ServiceMisconfigured, Unclassified
from app.models import ErrorResponse, GenerateRequest, GenerateResponse
from app.services.generation_service import GenerationService
from config import OPENAI_API_KEY, OPENAI_MODEL, SERVER_HOST, SERVER_PORT


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("CodeGen")


# -----------------------------------------------------------------------------
# GLOBAL SERVICE REFERENCE
# -----------------------------------------------------------------------------
# Set during startup (lifespan) and used by the generate endpoint.
generation_service: GenerationService = None


def print_title():
    """Print the CodeGen banner to the console when the server starts."""
    CYAN = "\033[96m"
    MAGENTA = "\033[95m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    banner = f"""
{BOLD}{CYAN}   ___          _       ___
{CYAN}  / __\\___   __| | ___ / _ \\___ _ __
{MAGENTA} / /  / _ \\ / _` |/ _ \\ /_\\/ _ \\ '_ \\
{MAGENTA}/ /__| (_) | (_| |  __/ /_\\\\  __/ | | |
{CYAN}\\____/\\___/ \\__,_|\\___\\____/\\___|_| |_|{RESET}
"""
    print(banner)


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create the GenerationService on startup.

    The API key is read from config here and injected into the service; the
    service itself never looks at the environment.
    """
    global generation_service

    print_title()
    logger.info("=" * 60)
    logger.info("CodeGen - Starting Up...")
    logger.info("=" * 60)

    generation_service = GenerationService(api_key=OPENAI_API_KEY)

    logger.info("Service Status:")
    logger.info("    - Model: %s", OPENAI_MODEL)
    if generation_service.is_configured:
        logger.info("    - OpenAI API key: configured")
    else:
        logger.warning("    - OpenAI API key: NOT configured (requests will fail with 500)")
    logger.info("API: http://localhost:%s", SERVER_PORT)
    logger.info("Docs: http://localhost:%s/docs", SERVER_PORT)
    logger.info("=" * 60)

    yield

    logger.info("Shutting down CodeGen. Goodbye!")


# -------------------------------------------------------------------------
# FASTAPI APP, CORS AND ERROR HANDLER
# -------------------------------------------------------------------------
app = FastAPI(
    title="CodeGen API",
    description="Generate code from natural-language prompts",
    lifespan=lifespan
)

# Allow any origin so a frontend on another port or device can call this API without CORS errors.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    """Render every GenerationError as {"error": message} with its status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and a short description of each endpoint (for discovery)."""
    return {
        "message": "CodeGen API",
        "endpoints": {
            "/api/generate": "Generate code from a prompt and conversation history",
            "/health": "System health check"
        }
    }


@app.get("/health")
async def health():
    """Return 'healthy', whether the service is initialized and whether a key is configured."""
    return {
        "status": "healthy",
        "generation_service": generation_service is not None,
        "api_key_configured": bool(generation_service and generation_service.is_configured),
    }


@app.post(
    "/api/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate(request: Request):
    """
    Generate code for a prompt.

    HOW IT WORKS:
    1. Reads the JSON body; a missing or empty prompt is a 400
    2. Drops malformed history entries and coerces unknown roles to "user"
    3. Sends system prompt + history + "Generate code for: <prompt>" to OpenAI
    4. Returns the code and the history with two new turns appended

    REQUEST BODY:
    {
        "prompt": "add two numbers",
        "history": [{"role": "user", "content": "..."}, ...]
    }

    RESPONSE:
    {
        "code": "function add(a, b) { return a + b; }",
        "prompt": "add two numbers",
        "history": [
            {"role": "user", "content": "Generate code for: add two numbers"},
            {"role": "assistant", "content": "function add(a, b) { return a + b; }"}
        ]
    }
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Rejected request with unreadable JSON body")
        raise InvalidRequest()

    generate_request = GenerateRequest.from_payload(payload)

    if not generation_service:
        logger.error("Generation service not initialized")
        raise ServiceMisconfigured("Generation service not initialized")

    try:
        # The completion call blocks, so keep it off the event loop.
        return await run_in_threadpool(generation_service.generate, generate_request)
    except GenerationError:
        raise
    except Exception as e:
        logger.error(f"Error generating code: {e}", exc_info=True)
        raise Unclassified()


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m app.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server (same as run.py); used if someone does python -m app.main"""
    uvicorn.run(
        "app.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
        log_level="info"
    )

if __name__ == "__main__":
    run()
