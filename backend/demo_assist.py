"""Demo script for AssistOrchestrator against live Supabase and Groq."""
import json
import sys
import uuid
sys.path.insert(0, '.')

from models.envelope import envelope_to_payload
from services.assistant_orchestrator import AssistOrchestrator
from services.conversation_manager import ConversationManager
from services.llm_client import LLMClient


def main():
    """Run a two-turn conversation and print each envelope."""
    print("=== AssistOrchestrator Demo ===\n")

    try:
        print("1. Initializing services...")
        orchestrator = AssistOrchestrator(ConversationManager(), LLMClient())
        print("✓ Services initialized\n")

        user_id = str(uuid.uuid4())
        session_id = str(uuid.uuid4())
        print(f"Session: user={user_id} session={session_id}\n")

        questions = [
            "Given an array of integers, find two numbers that add up to a target",
            "can you explain the time complexity again?",
        ]
        for i, question in enumerate(questions, 2):
            print(f"{i}. Asking: {question}")
            outcome = orchestrator.assist({
                "userId": user_id,
                "sessionId": session_id,
                "input": question,
            })
            print(f"✓ Persisted: {outcome.persisted}")
            print(json.dumps(envelope_to_payload(outcome.envelope), indent=2))
            print()

        print("=== Demo complete ===")

    except Exception as e:
        print(f"✗ Error: {e}")
        import traceback
        traceback.print_exc()


if __name__ == "__main__":
    main()
