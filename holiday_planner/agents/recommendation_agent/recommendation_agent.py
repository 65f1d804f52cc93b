# holiday_planner/agents/recommendation_agent/recommendation_agent.py

import json
import logging
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from holiday_planner.schemas.recommendation_schemas import (
    DestinationsEnvelope,
    HolidayPreferences,
    ParseResult,
    RecommendationResponse,
)

from .prompt import build_user_prompt

logger = logging.getLogger(__name__)

INVALID_FORMAT = "Invalid response format from AI"
MISSING_FIELDS = "Missing required fields in destination"
UNPARSEABLE = "Could not parse AI response as JSON"

_NOT_JSON = object()


class CompletionClient(Protocol):
    async def complete(self, prompt: str) -> str: ...


class RecommendationParseError(ValueError):
    pass


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError, RecursionError):
        return _NOT_JSON


def extract_json_block(text: str) -> Optional[str]:
    """Greedy span from the first "{" to the last "}", or None."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start:end + 1]


def has_destination_list(data: Any) -> bool:
    try:
        DestinationsEnvelope.model_validate(data)
    except ValidationError:
        return False
    return True


def validate_recommendations(data: Any, stage: str = "direct") -> ParseResult:
    """
    Check a decoded JSON value against the RecommendationResponse schema.
    The envelope is checked first so a bad top level and a bad destination
    report different errors.
    """
    if not has_destination_list(data):
        return ParseResult.failure(INVALID_FORMAT, stage)

    try:
        response = RecommendationResponse.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        logger.debug("Destination failed validation at %s: %s", first.get("loc"), first.get("msg"))
        return ParseResult.failure(MISSING_FIELDS, stage)

    return ParseResult.success(stage, data, response)


def parse_recommendations(text: str, lenient_fallback: bool = False) -> ParseResult:
    """
    Turn raw completion text into recommendations.

    The whole text is tried as JSON first. If that fails to decode or to
    validate, the first "{...}" span is decoded instead. With
    `lenient_fallback` the extracted object is accepted once it holds a
    destinations list; otherwise it goes through the same validator.
    """
    data = _loads(text)
    if data is not _NOT_JSON:
        direct = validate_recommendations(data, "direct")
        if direct.ok:
            return direct
        logger.warning("Error parsing AI response: %s", direct.error)
    else:
        logger.warning("Error parsing AI response: completion text is not JSON")

    block = extract_json_block(text or "")
    if block is None:
        return ParseResult.failure(UNPARSEABLE, "extracted")

    extracted = _loads(block)
    if extracted is _NOT_JSON:
        return ParseResult.failure(UNPARSEABLE, "extracted")

    if lenient_fallback:
        if has_destination_list(extracted):
            return ParseResult.success("extracted", extracted)
        return ParseResult.failure(UNPARSEABLE, "extracted")

    result = validate_recommendations(extracted, "extracted")
    if result.ok:
        return result
    logger.warning("Extracted JSON rejected: %s", result.error)
    return ParseResult.failure(UNPARSEABLE, "extracted")


async def generate_recommendations(
    prefs: HolidayPreferences,
    client: CompletionClient,
    lenient_fallback: bool = False,
) -> Dict[str, Any]:
    """
    Core recommendation call: build the prompt, ask the completion service
    once and return the validated JSON object as the model produced it.
    """
    prompt = build_user_prompt(prefs)
    text = await client.complete(prompt)

    logger.info("Raw AI response: %s", text)

    result = parse_recommendations(text, lenient_fallback=lenient_fallback)
    if not result.ok:
        raise RecommendationParseError(result.error)

    returned = len(result.payload["destinations"])
    if returned != prefs.count:
        logger.info("Requested %s destinations, model returned %s", prefs.count, returned)
    return result.payload
