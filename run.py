"""
RUN SCRIPT - Start the CodeGen server
=====================================

PURPOSE:
  Single entry point to start the backend.

WHAT IT DOES:
  - Imports the FastAPI app from app.main.
  - Runs it with uvicorn on SERVER_HOST:SERVER_PORT (default 0.0.0.0:8000).
  - reload=True means any change to Python files will restart the server (handy for development).

USAGE:
  python run.py

  Then use the API from another app, or start the terminal client: python client.py
  API docs: http://localhost:8000/docs

NOTE:
  Before running, set OPENAI_API_KEY in .env. Without it the server starts, but
  every /api/generate request returns 500.
"""

import uvicorn

from config import SERVER_HOST, SERVER_PORT

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",   # String path to the FastAPI app instance (module:variable).
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True       # Auto-restart when .py files change (useful during development).
    )
