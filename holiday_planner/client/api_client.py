# client/api_client.py
from typing import Any, Dict, List, Optional

import httpx

from holiday_planner.schemas.recommendation_schemas import HolidayPreferences
from holiday_planner.utils.config import PLANNER_API_TIMEOUT, PLANNER_API_URL

RECOMMENDATIONS_PATH = "/api/recommendations"


class RecommendationRequestError(RuntimeError):
    pass


class RecommendationApiClient:
    """Calls POST /api/recommendations and checks the shape of what comes back."""

    def __init__(
        self,
        base_url: str = PLANNER_API_URL,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = PLANNER_API_TIMEOUT,
    ):
        # None disables httpx's 5s default
        self.http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def fetch(self, prefs: HolidayPreferences, count: int) -> List[Dict[str, Any]]:
        payload = prefs.model_dump(exclude={"count"})
        payload["count"] = count

        try:
            response = self.http.post(RECOMMENDATIONS_PATH, json=payload)
        except httpx.HTTPError as exc:
            raise RecommendationRequestError(f"Failed to reach recommendation service: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            raise RecommendationRequestError(message or "Failed to fetch recommendations")

        if not isinstance(data, dict) or not isinstance(data.get("destinations"), list):
            raise RecommendationRequestError("Invalid response format")

        return data["destinations"]

    def close(self) -> None:
        self.http.close()
