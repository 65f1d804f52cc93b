# recommendation_schemas.py
# ----------------------
# Pydantic schemas for the holiday recommendation endpoint and client
# ----------------------

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Temperature = Literal["warm", "cold", "moderate"]
HolidayType = Literal[
    "summer",
    "winter",
    "historical",
    "safari",
    "adventure",
    "cultural",
    "culinary",
    "wellness",
]

TEMPERATURES: List[Temperature] = ["warm", "cold", "moderate"]
HOLIDAY_TYPES: List[HolidayType] = [
    "summer",
    "winter",
    "historical",
    "safari",
    "adventure",
    "cultural",
    "culinary",
    "wellness",
]

DEFAULT_COUNT = 5


class HolidayPreferences(BaseModel):
    """
    Request body of POST /api/recommendations.
    Values are forwarded into the prompt as received: enum membership,
    budget order and count bounds are left to the model.
    """
    model_config = ConfigDict(extra="allow")

    temperature: Any = None                      # warm / cold / moderate
    type: Any = None                             # one of HOLIDAY_TYPES
    budgetMin: Any = None
    budgetMax: Any = None
    count: Any = DEFAULT_COUNT                   # number of destinations requested


class Destination(BaseModel):
    """
    A single holiday suggestion. Every field is required and must be
    non-empty, matching what the renderer needs to draw a card.
    """
    name: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    estimatedCost: float = Field(..., gt=0)      # USD
    bestTimeToVisit: str = Field(..., min_length=1)
    highlights: List[str]


class RecommendationResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    destinations: List[Destination]


class DestinationsEnvelope(BaseModel):
    """Shape check only: `destinations` exists and is a list."""
    destinations: List[Any]


class DebugInfo(BaseModel):
    message: str
    stack: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    details: str
    debug: Optional[DebugInfo] = None


class ParseResult(BaseModel):
    """
    Tagged outcome of turning completion text into recommendations.
    `payload` is the JSON object exactly as the model produced it.
    """
    ok: bool
    stage: Optional[Literal["direct", "extracted"]] = None
    payload: Optional[Dict[str, Any]] = None
    response: Optional[RecommendationResponse] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, stage: str, payload: Dict[str, Any], response: Optional[RecommendationResponse] = None) -> "ParseResult":
        return cls(ok=True, stage=stage, payload=payload, response=response)

    @classmethod
    def failure(cls, error: str, stage: Optional[str] = None) -> "ParseResult":
        return cls(ok=False, stage=stage, error=error)
