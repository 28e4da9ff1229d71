"""
Study page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import start_new_session, process_feedback
from app.state import get_service
from app.ui import (
    render_card_back,
    render_card_details,
    render_card_front,
    render_feedback_buttons,
    render_session_complete,
)
from lingo.exceptions import NotFoundError
from lingo.fsrs import is_test_mode


def render_study_page(user_options: dict[str, str]) -> None:
    """
    Render the study flow (intro or active session).
    """
    if st.session_state.current_card is None:
        _render_intro_screen()
    else:
        _render_active_session()


def _render_intro_screen() -> None:
    st.markdown("<style>.stApp h1 { font-size: 1.6rem; }</style>", unsafe_allow_html=True)
    st.title("📚 Lingo Review")
    if is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using test_learning_db (set TEST_MODE=false in .env for production)")
    st.markdown(f"**Welcome {st.session_state.user_label}**")

    if st.session_state.session_count > 0:
        render_session_complete()

    service = get_service()
    queue = service.queue
    user_id = st.session_state.user_id
    now = service.clock()

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Due now", queue.due_count(user_id, now))
    with col2:
        upcoming = queue.forecast(user_id, now, days=7)
        st.metric("Due this week", sum(upcoming))

    st.bar_chart({"cards": upcoming})
    st.caption("Cards coming due per day (day 0 includes overdue cards)")

    if st.button("Start Review", type="primary", use_container_width=True):
        start_new_session()
        st.rerun()


def _render_active_session() -> None:
    card = st.session_state.current_card

    st.markdown("<br>", unsafe_allow_html=True)

    if not st.session_state.show_answer:
        render_card_front(card)
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Reveal Answer", use_container_width=True, type="primary"):
            st.session_state.show_answer = True
            st.rerun()
    else:
        render_card_back(card)
        st.markdown("<br>", unsafe_allow_html=True)

        try:
            preview = get_service().preview_review(st.session_state.user_id, card.id)
        except NotFoundError:
            preview = None

        key_suffix = f"{card.id}_{st.session_state.session_position}"
        rating = render_feedback_buttons(key_suffix=key_suffix, preview=preview)
        if rating is not None:
            process_feedback(rating)

        st.markdown("<br>", unsafe_allow_html=True)
        render_card_details(card.language, card.details)

    if is_test_mode():
        st.caption("TEST MODE - Using test_learning_db")
