# client/app.py
# Run with: streamlit run holiday_planner/client/app.py

import streamlit as st

from holiday_planner.client.api_client import RecommendationApiClient
from holiday_planner.client.session import PlannerSession, destination_card_html
from holiday_planner.schemas.recommendation_schemas import HOLIDAY_TYPES, TEMPERATURES
from holiday_planner.utils.config import PLANNER_API_URL

APP_STYLE = """
<style>
.destination-card {
  border: 1px solid rgba(15,23,42,0.08);
  border-radius: 10px;
  padding: 1rem 1.25rem;
  margin-bottom: 1rem;
}
.airbnb-link {
  background: #FF385C;
  color: white !important;
  padding: 0.3rem 0.75rem;
  border-radius: 8px;
  text-decoration: none;
  font-size: 0.9rem;
}
.airbnb-link:hover { background: #E31C5F; }
.meta { color: #64748b; font-size: 0.92rem; }
</style>
"""


def get_session() -> PlannerSession:
    if "planner" not in st.session_state:
        st.session_state.planner = PlannerSession(RecommendationApiClient(PLANNER_API_URL))
    return st.session_state.planner


def alert(message: str) -> None:
    st.error(message)


def render_form(session: PlannerSession) -> bool:
    prefs = session.preferences
    with st.form("preferences"):
        temperature = st.selectbox(
            "Preferred Temperature",
            TEMPERATURES,
            index=TEMPERATURES.index(prefs.temperature) if prefs.temperature in TEMPERATURES else 0,
            format_func=str.capitalize,
        )
        holiday_type = st.selectbox(
            "Holiday Type",
            HOLIDAY_TYPES,
            index=HOLIDAY_TYPES.index(prefs.type) if prefs.type in HOLIDAY_TYPES else 0,
            format_func=lambda t: f"{t.capitalize()} Holiday",
        )
        st.markdown("Budget Range ($)")
        col_min, col_max = st.columns(2)
        budget_min = col_min.number_input("Min Budget", min_value=0, value=int(prefs.budgetMin or 0), step=100)
        budget_max = col_max.number_input(
            "Max Budget",
            min_value=int(budget_min),
            value=max(int(prefs.budgetMax or 0), int(budget_min)),
            step=100,
        )
        submitted = st.form_submit_button("Find My Perfect Holiday", use_container_width=True)

    session.update_preferences(
        temperature=temperature,
        type=holiday_type,
        budgetMin=int(budget_min),
        budgetMax=int(budget_max),
    )
    return submitted


def render_destinations(session: PlannerSession) -> None:
    if not session.destinations:
        return

    st.subheader("Recommended Destinations")
    for dest in session.destinations:
        st.markdown(destination_card_html(dest), unsafe_allow_html=True)


st.set_page_config(page_title="Plan Your Perfect Holiday", page_icon="🌴")
st.markdown(APP_STYLE, unsafe_allow_html=True)
st.title("Plan Your Perfect Holiday")

planner = get_session()
planner.on_error = alert

if render_form(planner):
    with st.spinner("Finding perfect destinations for you..."):
        planner.submit()

render_destinations(planner)

if planner.can_show_more:
    if st.button("Show More Destinations", use_container_width=True):
        with st.spinner("Finding perfect destinations for you..."):
            appended = planner.request_more()
        if appended:
            st.rerun()
