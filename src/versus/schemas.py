"""Pydantic models for the Versus API."""

import logging
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

TIE = "Tie"

ScoreTable = Dict[str, Dict[str, int]]
NoteTable = Dict[str, Dict[str, List[str]]]


class CompareRequest(BaseModel):
    """Input schema for a comparison request."""
    items: List[str] = Field(..., min_length=2)
    attributes: Optional[List[str]] = None

    @field_validator("items", mode="before")
    @classmethod
    def keep_first_two(cls, value):
        # only the first two are compared, so the rest is never validated
        if isinstance(value, list) and len(value) > 2:
            logger.warning(f"Received {len(value)} items, comparing only the first two")
            return value[:2]
        return value

    @field_validator("items")
    @classmethod
    def strip_items(cls, value: List[str]) -> List[str]:
        stripped = [item.strip() for item in value]
        if any(not item for item in stripped[:2]):
            raise ValueError("item names must not be blank")
        return stripped

    @field_validator("attributes")
    @classmethod
    def drop_blank_attributes(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return [attr.strip() for attr in value if attr.strip()] or None


class ComparisonResult(BaseModel):
    """Completed comparison of two items."""
    model_config = ConfigDict(populate_by_name=True)

    items: List[str]
    attributes: List[str]
    scores: ScoreTable = {}
    pros: Optional[NoteTable] = None
    cons: Optional[NoteTable] = None
    winner: str
    winner_reason: Optional[str] = Field(default=None, alias="winnerReason")
    summary: Optional[str] = None
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    sources: Optional[List[str]] = None

    def to_wire(self) -> dict:
        """Serialize with the camelCase keys the UI expects."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CompareSuccess(BaseModel):
    """Envelope for a completed comparison."""
    ok: bool = True
    result: ComparisonResult


class CompareRaw(BaseModel):
    """Envelope for model text that could not be parsed."""
    ok: bool = True
    raw: str
    parsed: None = None


class ErrorEnvelope(BaseModel):
    """Envelope for every failure."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = False
    error: str
    details: Optional[str] = None
    retry_after: Optional[int] = Field(default=None, alias="retryAfter")
