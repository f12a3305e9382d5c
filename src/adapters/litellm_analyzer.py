"""Generative-analysis adapter backed by LiteLLM.

Builds a per-mode prompt, asks the model for a JSON reply and validates it
against the insight schema before handing a plain dict back to the core.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

import litellm
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.models import AnalysisMode

LOGGER = logging.getLogger(__name__)

PROMPTS: dict[AnalysisMode, str] = {
    AnalysisMode.QUANTUM: (
        "Perform a quantum-inspired data analysis. Identify patterns, potential "
        "quantum tunneling-like anomalies, and correlations."
    ),
    AnalysisMode.CODE: (
        "Perform a code review and calculation analysis. Identify algorithmic complexity "
        "(Big O), potential bugs, security vulnerabilities, and optimizations. Treat the "
        "input as code or pseudocode."
    ),
    AnalysisMode.WEATHER: (
        "Analyze this weather data. Summarize forecasts, identify meteorological "
        "anomalies, trends, and potential impacts on operations."
    ),
    AnalysisMode.INTERNET: (
        "Analyze this internet/web data. Specific tasks: Sentiment analysis, keyword "
        "extraction, fact verification, and summarization of key topics."
    ),
}

RESPONSE_INSTRUCTIONS = (
    "Respond with professional insights formatted as JSON with the keys "
    '"summary" (string), "insights" (list of objects with "type", "title", '
    '"description" and "confidence" between 0 and 1) and "recommendations" '
    "(list of strings)."
)


class AnalysisError(RuntimeError):
    """Raised when the model reply cannot be turned into an analysis."""


class Insight(BaseModel):
    """One finding returned by the model."""

    type: str = "TREND"
    title: str = ""
    description: str = ""
    confidence: float = 0.0

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        return min(max(number, 0.0), 1.0)


class AnalysisResult(BaseModel):
    """Structured analysis reply."""

    summary: str = ""
    insights: List[Insight] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


def build_prompt(text: str, mode: AnalysisMode) -> str:
    """Compose the user prompt for one input."""

    return f"{PROMPTS[mode]}\n\n{RESPONSE_INSTRUCTIONS}\n\nDataset/Input content: {text}\n"


def parse_analysis(content: Optional[str]) -> AnalysisResult:
    """Parse a raw model reply into an AnalysisResult."""

    try:
        payload = json.loads(content or "{}")
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"Model reply is not JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise AnalysisError("Model reply must be a JSON object")
    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as exc:
        raise AnalysisError(f"Model reply does not match the insight schema: {exc}") from exc


class LiteLLMAnalyzer(BaseModel):
    """AnalyzerPort implementation calling LiteLLM.

    Extra constructor keywords are passed through to ``litellm.acompletion``.
    """

    model_config = ConfigDict(extra="allow")

    model: str
    temperature: float = 0.2
    max_tokens: Optional[int] = None

    @property
    def additional_params(self) -> dict[str, Any]:
        return self.__pydantic_extra__ or {}

    async def analyze(self, text: str, mode: AnalysisMode) -> dict[str, Any]:
        """Run one analysis request and return the validated reply as a dict."""

        params: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": build_prompt(text, mode)}],
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
            **self.additional_params,
        }
        if self.max_tokens is not None:
            params["max_tokens"] = self.max_tokens

        LOGGER.info("Requesting %s analysis from %s (%s chars)", mode.value, self.model, len(text))
        response = await litellm.acompletion(**params)
        content = response.choices[0].message.content
        return parse_analysis(content).model_dump()
