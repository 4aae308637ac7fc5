"""Configuration management for the coding assistant orchestrator."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").lower()

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Model Configuration
ASSISTANT_MODEL = os.getenv("ASSISTANT_MODEL", "llama-3.3-70b-versatile")
ASSISTANT_TEMPERATURE = float(os.getenv("ASSISTANT_TEMPERATURE", "0.2"))
ASSISTANT_MAX_TOKENS = int(os.getenv("ASSISTANT_MAX_TOKENS", "2048"))
LLM_JSON_MODE = _env_bool("LLM_JSON_MODE", True)

# Conversation History Configuration
HISTORY_WINDOW = int(os.getenv("HISTORY_WINDOW", "5"))  # turns
CONVERSATIONS_TABLE = os.getenv("CONVERSATIONS_TABLE", "conversations")

# Request Validation Configuration
MAX_INPUT_CHARS = int(os.getenv("MAX_INPUT_CHARS", "8000"))
MAX_IDENTIFIER_CHARS = int(os.getenv("MAX_IDENTIFIER_CHARS", "128"))
REQUIRE_UUID_IDS = _env_bool("REQUIRE_UUID_IDS", False)

# Observability Configuration
INTERACTION_LOG_PATH = os.getenv("INTERACTION_LOG_PATH", "logs/interactions.jsonl")
