"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for storage and analysis adapters so that
the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from core.models import AnalysisMode


class StoragePort(Protocol):
    """Key/value persistence required by the history store."""

    def get_value(self, key: str) -> Optional[str]:
        ...

    def set_value(self, key: str, value: str) -> None:
        ...


class AnalyzerPort(Protocol):
    """External generative-analysis call."""

    async def analyze(self, text: str, mode: AnalysisMode) -> dict[str, Any]:
        ...
