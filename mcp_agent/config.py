import os


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "postgresql://localhost/usbmkt")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")

    # Chat-completion service (OpenAI-compatible, Groq by default)
    LLM_API_KEY = os.environ.get("LLM_API_KEY", os.environ.get("GROQ_API_KEY", ""))
    LLM_BASE_URL = os.environ.get("LLM_BASE_URL", "https://api.groq.com/openai/v1")
    LLM_MODEL = os.environ.get("LLM_MODEL", "llama3-70b-8192")
    LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.3"))
    LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "1024"))
    LLM_TIMEOUT = int(os.environ.get("LLM_TIMEOUT", "30"))

    # Campaign CRUD API (e.g. https://dashboard.example.com/api)
    CAMPAIGNS_API_URL = os.environ.get("CAMPAIGNS_API_URL", "")
    CAMPAIGNS_API_TIMEOUT = int(os.environ.get("CAMPAIGNS_API_TIMEOUT", "10"))

    # Conversation history
    MAX_HISTORY_MESSAGES = int(os.environ.get("MAX_HISTORY_MESSAGES", "20"))
    MAX_HISTORY_FETCH_LIMIT = int(os.environ.get("MAX_HISTORY_FETCH_LIMIT", "50"))
