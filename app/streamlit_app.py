"""
Lingo Review - Main App

Streamlit UI for the FSRS flashcard review system.

Run with:
    streamlit run app/streamlit_app.py
"""

import streamlit as st

from app.router import PAGES
from app.session_controller import end_session
from app.state import ensure_session_state, init_database
from app.ui import render_session_stats
from lingo.logging_config import configure_logging


# ---- User Configuration ----

USER_OPTIONS = {
    "Demo": "demo",
    "Test": "test",
}


# ---- Page Setup ----

st.set_page_config(
    page_title="Lingo Review",
    page_icon="📚",
    layout="centered"
)

configure_logging()
init_database()
ensure_session_state(USER_OPTIONS)


def _render_user_picker():
    """Sidebar user selector; switching users ends any running session."""
    user_labels = list(USER_OPTIONS.keys())
    selected_label = st.sidebar.selectbox(
        "User",
        user_labels,
        index=user_labels.index(st.session_state.user_label)
        if st.session_state.user_label in user_labels
        else 0
    )
    if USER_OPTIONS[selected_label] != st.session_state.user_id:
        end_session()
        st.session_state.cards_page = 1
    st.session_state.user_label = selected_label
    st.session_state.user_id = USER_OPTIONS[selected_label]


# ---- Main App ----

def main():
    """Main app entry point."""
    _render_user_picker()

    quit_clicked = render_session_stats()
    if quit_clicked:
        end_session()
        st.rerun()

    tabs = st.tabs([page.label for page in PAGES])
    for tab, page in zip(tabs, PAGES):
        with tab:
            page.render(USER_OPTIONS)


if __name__ == "__main__":
    main()
