"""
CODEGEN TERMINAL CLIENT
=======================

PURPOSE:
Command-line front end for the CodeGen API. Type what you want built; the
generated code is printed, and the conversation so far is sent along with each
new prompt so you can ask for follow-up changes.

USAGE:
    python client.py

    Make sure the server is running first: python run.py

COMMANDS:
    /history - View the conversation so far
    /code    - Print the last generated code again
    /clear   - Start a new conversation
    /quit or /exit - Exit

HOW IT WORKS:
1. Each line you type is submitted as a prompt (blank lines are ignored)
2. The client sends the prompt plus the transcript to POST /api/generate
3. The returned code is printed and the transcript replaced by the server's copy
4. The transcript lives only in this process; quitting discards it
"""

from app.client import EMPTY_CODE_PLACEHOLDER, ConversationClient, format_transcript
from config import CODEGEN_API_URL


# -----------------------------------------------------------------------------
# UI HELPERS
# -----------------------------------------------------------------------------

def print_header():
    print("\n" + "="*60)
    print("💻 CodeGen - Generate code from plain English")
    print("="*60)
    print(f"\nServer: {CODEGEN_API_URL}")
    print("\nCommands:")
    print("  /history - See the conversation")
    print("  /code - Show the last generated code")
    print("  /clear - Start a new conversation")
    print("  /quit - Exit")
    print("="*60 + "\n")


def get_user_input():
    """Get the user's next line, or None on Ctrl+C / Ctrl+D."""
    try:
        return input("\nYou: ").strip()
    except (KeyboardInterrupt, EOFError):
        return None


def print_code(code):
    print("\n" + "-"*60)
    print(code or EMPTY_CODE_PLACEHOLDER)
    print("-"*60)


# -----------------------------------------------------------------------------
# MAIN LOOP
# -----------------------------------------------------------------------------

def main():
    """Read prompts until /quit or /exit, handling /history, /code and /clear."""
    print_header()
    client = ConversationClient()

    while True:
        user_input = get_user_input()
        if user_input is None or user_input in ["/quit", "/exit"]:
            print("\n👋 Goodbye!")
            break

        if user_input == "/history":
            print(f"\n📜 Conversation ({len(client.history)} messages):")
            print(format_transcript(client.history))
            continue

        if user_input == "/code":
            print_code(client.generated_code)
            continue

        if user_input == "/clear":
            client.reset()
            print("\n🔄 Conversation cleared. Starting fresh!")
            continue

        if user_input.startswith("/"):
            print(f"❌ Unknown command: {user_input}")
            continue

        print("⏳ Generating...", flush=True)
        if client.submit(user_input):
            print_code(client.generated_code)


# Run the interactive loop when this file is executed (python client.py).
if __name__ == "__main__":
    main()
