"""
Orchestrator settings read once from the environment (.env supported).

Edge service URL and retry budget, per-intent result counts, brief limits,
LLM provider keys and models, and the HTTP port.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Edge service: executes news tools (headlines, topic news, history, local news, summarize)
NEWSBOT_EDGE_URL: str = os.getenv("NEWSBOT_EDGE_URL", "").strip()

# Edge call resilience: per-attempt timeout (seconds) and immediate retries after the first attempt
EDGE_TIMEOUT: float = 15.0
EDGE_MAX_RETRIES: int = 2

# Optional defaults forwarded to the headlines tool
NEWSBOT_COUNTRY: str = os.getenv("NEWSBOT_COUNTRY", "").strip()
NEWSBOT_LANG: str = os.getenv("NEWSBOT_LANG", "").strip()

# Action defaults (max_results sent to the edge)
TOPIC_MAX_RESULTS: int = 10
LOCAL_MAX_RESULTS: int = 8

# Brief synthesis
BRIEF_FETCH_MAX: int = 8
BRIEF_SOURCE_CAP: int = 3
BRIEF_CHAR_BUDGET: int = 15000
BRIEF_MAX_TOKENS: int = 700

# OpenAI (router + brief LLM). When set, OpenAI is used instead of Hugging Face.
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
)

# Hugging Face chat (fallback LLM when OPENAI_API_KEY is not set)
HF_API_KEY: str = os.getenv("HF_API_KEY", "").strip()
HF_CHAT_URL: str = "https://router.huggingface.co/v1/chat/completions"
HF_LLM_MODEL: str = (
    os.getenv("HF_LLM_MODEL", "meta-llama/Llama-3.2-3B-Instruct").strip()
    or "meta-llama/Llama-3.2-3B-Instruct"
)

LLM_API_TIMEOUT: float = 60.0

# HTTP server
PORT: int = int(os.getenv("PORT", "8081") or 8081)
