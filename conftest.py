"""Root conftest.py — loads .env and redirects log files before any tests run."""
import os
import tempfile

import pytest
from dotenv import load_dotenv

load_dotenv()

# Activity / LLM call logs go to a throwaway directory instead of ./logs
_LOG_DIR = tempfile.mkdtemp(prefix="ticket-writer-logs-")
os.environ["ACTIVITY_LOG_PATH"] = os.path.join(_LOG_DIR, "activity.jsonl")
os.environ["LLM_LOG_PATH"] = os.path.join(_LOG_DIR, "llm_calls.jsonl")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Clear cached settings and clients so monkeypatch.setenv takes effect."""
    from config.settings import get_settings
    from llm.openai_client import get_llm
    get_settings.cache_clear()
    get_llm.cache_clear()
    yield
    get_settings.cache_clear()
    get_llm.cache_clear()
