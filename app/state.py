"""
Streamlit session state and database initialization helpers.
"""

from __future__ import annotations

import streamlit as st

from lingo.fsrs import database
from lingo.srs_service import SrsService


def init_database() -> None:
    """
    Initialize database schema (cached per Streamlit process).
    """
    @st.cache_resource
    def _init_database() -> None:
        database.init_db()

    _init_database()


@st.cache_resource
def get_service() -> SrsService:
    """One shared service (and Scheduler) for every Streamlit session."""
    return SrsService(database.get_session_factory())


def ensure_session_state(user_options: dict[str, str]) -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "user_id" not in st.session_state:
        default_user_id = database.get_default_user_id()
        st.session_state.user_id = default_user_id
        st.session_state.user_label = next(
            (label for label, uid in user_options.items() if uid == default_user_id),
            next(iter(user_options))
        )
    if "current_card" not in st.session_state:
        st.session_state.current_card = None
    if "show_answer" not in st.session_state:
        st.session_state.show_answer = False
    if "session_batch" not in st.session_state:
        st.session_state.session_batch = []
    if "session_position" not in st.session_state:
        st.session_state.session_position = 0
    if "session_count" not in st.session_state:
        st.session_state.session_count = 0
    if "session_correct" not in st.session_state:
        st.session_state.session_correct = 0
    if "session_ratings" not in st.session_state:
        st.session_state.session_ratings = {}
    if "editing_card_id" not in st.session_state:
        st.session_state.editing_card_id = None
    if "cards_page" not in st.session_state:
        st.session_state.cards_page = 1
