import html
import json
from typing import Any

import bleach

from holiday_planner.schemas.recommendation_schemas import HolidayPreferences

RESPONSE_SHAPE = """{
  "destinations": [
    {
      "name": "City/Location Name",
      "country": "Country Name",
      "description": "2-3 sentence description",
      "estimatedCost": numerical_cost_in_USD,
      "bestTimeToVisit": "best season or months",
      "highlights": ["highlight1", "highlight2", "highlight3"]
    }
  ]
}"""

PROMPT_TEMPLATE = """You are a travel expert. Based on these preferences:
- Temperature preference: {temperature}
- Holiday type: {holiday_type}
- Budget range: ${budget_min} - ${budget_max}

Provide exactly {count} holiday destinations in this JSON format:
{shape}

Ensure all costs are within the budget range and the temperature matches the preference.
Response must be valid JSON only, no additional text."""


def sanitize_text(val: Any) -> str:
    """
    Coerce value to text and strip markup with bleach, leaving other
    characters as typed (bleach escapes &, < and >; those are undone).
    - dict/list -> JSON string
    - None -> "None", so a missing value is still visible to the model
    """
    if isinstance(val, (dict, list)):
        text = json.dumps(val, ensure_ascii=False)
    else:
        text = str(val)
    return html.unescape(bleach.clean(text, strip=True))


def build_user_prompt(prefs: HolidayPreferences) -> str:
    return PROMPT_TEMPLATE.format(
        temperature=sanitize_text(prefs.temperature),
        holiday_type=sanitize_text(prefs.type),
        budget_min=sanitize_text(prefs.budgetMin),
        budget_max=sanitize_text(prefs.budgetMax),
        count=sanitize_text(prefs.count),
        shape=RESPONSE_SHAPE,
    )
