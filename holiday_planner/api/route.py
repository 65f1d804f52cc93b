# holiday_planner/api/route.py

import logging
import traceback
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from holiday_planner.agents.recommendation_agent.gemini_client import GeminiCompletionClient
from holiday_planner.agents.recommendation_agent.recommendation_agent import (
    CompletionClient,
    generate_recommendations,
)
from holiday_planner.schemas.recommendation_schemas import (
    DebugInfo,
    ErrorResponse,
    HolidayPreferences,
    RecommendationResponse,
)
from holiday_planner.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])

FAILURE_MESSAGE = "Failed to generate recommendations"


def get_completion_client(settings: Settings = Depends(get_settings)) -> CompletionClient:
    return GeminiCompletionClient(settings)


def build_error_body(exc: Exception, settings: Settings) -> Dict[str, Any]:
    """Every failure shares one body; debug detail is left out in production."""
    message = str(exc) or exc.__class__.__name__
    body = ErrorResponse(error=FAILURE_MESSAGE, details=message)
    if not settings.is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        body.debug = DebugInfo(message=message, stack=stack)
    return body.model_dump(exclude_none=True)


@router.post(
    "/recommendations",
    response_model=RecommendationResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def recommend_destinations(
        request: Request,
        settings: Settings = Depends(get_settings),
        client: CompletionClient = Depends(get_completion_client),
):
    """
    Expects a JSON body like:
    {
        "temperature": "warm",
        "type": "summer",
        "budgetMin": 1000,
        "budgetMax": 5000,
        "count": 5
    }
    The body is read inside the handler so a malformed request gets the
    same 500 response as a failed completion.
    """
    try:
        body = await request.json()
        logger.info("Received request: %s", body)

        prefs = HolidayPreferences.model_validate(body)
        payload = await generate_recommendations(
            prefs,
            client,
            lenient_fallback=settings.lenient_fallback,
        )
        return JSONResponse(content=payload)

    except Exception as exc:
        logger.exception("Error in recommendations API: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=build_error_body(exc, settings),
        )
