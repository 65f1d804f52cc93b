# client/session.py
"""
State behind the preference form: current preferences, the destinations on
screen, and the loading / "show more" flags. Kept free of any UI framework
so the Streamlit page only renders it.
"""

import html
import logging
import threading
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from holiday_planner.schemas.recommendation_schemas import DEFAULT_COUNT, HolidayPreferences

from .api_client import RecommendationApiClient, RecommendationRequestError

logger = logging.getLogger(__name__)

LODGING_SEARCH_URL = "https://www.airbnb.com/s/{query}/homes"
SHOW_MORE_COUNT = 5
GENERIC_FAILURE = "Failed to get recommendations"

# characters encodeURIComponent leaves alone besides letters and digits
_URI_COMPONENT_SAFE = "-_.!~*'()"


def lodging_search_url(destination: Dict[str, Any]) -> str:
    query = f"{destination.get('name')}, {destination.get('country')}"
    return LODGING_SEARCH_URL.format(query=quote(query, safe=_URI_COMPONENT_SAFE))


def destination_card_html(destination: Dict[str, Any]) -> str:
    """Card markup for one destination; every model-supplied value is escaped."""
    def text(key: str) -> str:
        return html.escape(str(destination.get(key)))

    highlights = "".join(f"<li>{html.escape(str(h))}</li>" for h in destination.get("highlights") or [])
    return f"""
<div class="destination-card">
  <h3>{text('name')}, {text('country')}</h3>
  <a class="airbnb-link" href="{html.escape(lodging_search_url(destination))}" target="_blank" rel="noopener noreferrer">Find on Airbnb</a>
  <p>{text('description')}</p>
  <p class="meta">Estimated Cost: ${text('estimatedCost')}</p>
  <p class="meta">Best Time to Visit: {text('bestTimeToVisit')}</p>
  <p class="meta"><strong>Highlights:</strong></p>
  <ul class="meta">{highlights}</ul>
</div>
"""


def default_preferences() -> HolidayPreferences:
    return HolidayPreferences(temperature="warm", type="summer", budgetMin=1000, budgetMax=5000)


class PlannerSession:

    def __init__(
        self,
        api: RecommendationApiClient,
        on_error: Optional[Callable[[str], None]] = None,
        preferences: Optional[HolidayPreferences] = None,
    ):
        self.api = api
        self.on_error = on_error or (lambda message: None)
        self.preferences = preferences or default_preferences()
        self.destinations: List[Dict[str, Any]] = []
        self.show_more = False

        self._lock = threading.Lock()
        self._generation = 0
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def can_show_more(self) -> bool:
        return bool(self.destinations) and not self.show_more and not self.loading

    def update_preferences(self, **changes: Any) -> None:
        self.preferences = self.preferences.model_copy(update=changes)

    def _fetch(self, count: int) -> Optional[List[Dict[str, Any]]]:
        """Run one request; errors go to on_error and yield None."""
        prefs = self.preferences
        with self._lock:
            self._in_flight += 1
        try:
            return self.api.fetch(prefs, count)
        except RecommendationRequestError as exc:
            logger.error("Error fetching recommendations: %s", exc)
            self.on_error(str(exc) or GENERIC_FAILURE)
            return None
        finally:
            with self._lock:
                self._in_flight -= 1

    def submit(self) -> bool:
        """Fresh search: replaces the list. Returns False if nothing was applied."""
        with self._lock:
            self._generation += 1
            generation = self._generation

        results = self._fetch(DEFAULT_COUNT)
        if results is None:
            return False

        with self._lock:
            if generation != self._generation:
                logger.info("Dropping superseded results from request %s", generation)
                return False
            self.destinations = list(results)
            self.show_more = False
        return True

    def request_more(self) -> bool:
        """Appends another batch for the same preferences."""
        with self._lock:
            generation = self._generation

        results = self._fetch(SHOW_MORE_COUNT)
        if results is None:
            return False

        with self._lock:
            if generation != self._generation:
                logger.info("Dropping superseded results from request %s", generation)
                return False
            self.destinations = self.destinations + list(results)
            self.show_more = True
        return True
