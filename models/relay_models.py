"""Request payloads and result values for the analysis and speech relays."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel


class AnalyzePayload(BaseModel):
    image: Optional[str] = None


class SpeechPayload(BaseModel):
    text: Optional[str] = None
    voice: Optional[str] = None


@dataclass
class RelayResult:
    """Outcome of one relay call: either a value or an error message."""

    ok: bool
    value: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: str) -> "RelayResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "RelayResult":
        return cls(ok=False, error=error)
