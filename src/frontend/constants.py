"""Shared constants for the Textual UI."""

from __future__ import annotations

from core.models import AnalysisMode

BRAND_VIOLET = "#8B5CF6"
MARK_STYLE = "bold white on #9F1239"

MODE_LABELS = {
    AnalysisMode.QUANTUM: "Quantum",
    AnalysisMode.CODE: "Code",
    AnalysisMode.WEATHER: "Weather",
    AnalysisMode.INTERNET: "Internet",
}

PLACEHOLDERS = {
    AnalysisMode.QUANTUM: (
        "Paste quantum data here...\n\nExample JSON:\n[\n"
        '  {"id": 1, "value": 0.5, "status": "active"}\n]'
    ),
    AnalysisMode.CODE: (
        "Paste source code here for review...\n\nExample:\n"
        "function calculateEntropy(data) {\n  // ... code ...\n}"
    ),
    AnalysisMode.WEATHER: (
        "Paste weather JSON or CSV data...\n\nExample:\n"
        "Timestamp, Temp, Humidity\n2023-01-01, 22C, 45%"
    ),
    AnalysisMode.INTERNET: (
        "Paste web content, articles, or logs...\n\nExample:\n"
        "User reviews from social media feed..."
    ),
}
