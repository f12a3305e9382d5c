"""Static configuration for insightscope.

All user-editable settings (model, history, export, logging) live in a single
JSON file for quick edits without touching Python. Secrets stay in .env.
"""

import json
import os

from dotenv import load_dotenv

from core.config import AnalysisConfig, HistoryConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("INSIGHTSCOPE_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


load_dotenv()

_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Analyzer settings. MODEL is a LiteLLM model string, e.g. "gemini/<name>".
_analysis = _CONFIG.get("analysis", {})
ANALYSIS = AnalysisConfig(
    model=str(_analysis.get("model", "gemini/gemini-3-flash-preview")),
    temperature=float(_analysis.get("temperature", 0.2)),
    snippet_chars=int(_analysis.get("snippet_chars", 100)),
)
# Environment variable that must hold the provider key before analyzing.
API_KEY_ENV = _analysis.get("api_key_env", "GEMINI_API_KEY")

# History is one JSON list under a well-known key in a small SQLite file.
_history = _CONFIG.get("history", {})
DB_PATH = _resolve_path(_history.get("db_path", "insightscope.db"))
HISTORY = HistoryConfig(
    storage_key=_history.get("storage_key", "quantum_analysis_history"),
    limit=int(_history.get("limit", 50)),
)

# Raw-input and history exports land here.
EXPORT_DIR = _resolve_path(_CONFIG.get("export", {}).get("directory", "exports"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
