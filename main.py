# =============================================================================
# main.py  —  Entry Point for the Rent Roll Assistant
# =============================================================================
#
# HOW TO RUN:
#   python load_data.py load rent_roll.jsonl     # once, to fill the database
#   python main.py
#
# WHAT HAPPENS:
#   1. Creates the ADK agent (agent/rent_roll_agent.py), which spawns the
#      rent roll MCP server as a subprocess
#   2. Sets up an in-memory session
#   3. Reads questions from the terminal and sends them to the agent
#   4. Shows each tool the agent calls, then its final answer
#
# The MCP server and core/ work without this file.  It is one possible
# conversational front end; the desktop app is another.
# =============================================================================

import asyncio

from dotenv import load_dotenv

# Must run before the agent is created: LiteLlm reads its API key from the
# environment when it initializes.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.rent_roll_agent import create_agent

APP_NAME = "rent_roll_assistant"
USER_ID = "local_user"


async def run_agent():
    """Run the rent roll assistant interactively until the user quits."""
    print("=" * 70)
    print("  RENT ROLL ASSISTANT")
    print("  Powered by Google ADK + LiteLlm + FastMCP")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask about units, tenants, leases or revenue.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        # Keep the last text part: that's the agent's final answer.  Tool
        # calls are echoed so you can see which operation answered.
        final_response = ""
        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text

                    if getattr(part, "function_call", None):
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
