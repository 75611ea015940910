import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

# ---- Model gateway ----
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "chat_completions")  # chat_completions | ollama | completions
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://host.docker.internal:11434/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "llama-3.3-70b")
LLM_API_KEY = os.getenv("LLM_API_KEY", "")

LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2000"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "300"))

# ---- Idea registry ----
REGISTRY_BACKEND = os.getenv("REGISTRY_BACKEND", "memory")  # memory | sql
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ideas.db")

# ---- Process flow ----
RECENT_CONTEXT_LIMIT = int(os.getenv("RECENT_CONTEXT_LIMIT", "3"))
RECENT_CONTEXT_CHARS = int(os.getenv("RECENT_CONTEXT_CHARS", "100"))

# ---- HTTP ----
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SERVICE_NAME = "saas-processor"
SERVICE_VERSION = "2.0.0"
