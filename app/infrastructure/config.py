import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./studyforge.db")

# LLM relay (Hugging Face Inference via LangChain)
HF_TOKEN = os.getenv("HF_TOKEN")
CHAT_MODEL_REPO_ID = os.getenv("CHAT_MODEL_REPO_ID", "mistralai/Mistral-7B-Instruct-v0.2")
CHAT_TIMEOUT_SECONDS = int(os.getenv("CHAT_TIMEOUT_SECONDS", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
