"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryConfig:
    """Bounded history settings."""

    storage_key: str
    limit: int


@dataclass(frozen=True)
class AnalysisConfig:
    """Analyzer and record settings consumed by the processor and adapters."""

    model: str
    temperature: float
    snippet_chars: int
