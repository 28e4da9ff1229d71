"""
Session lifecycle helpers for Streamlit app.

A study session is a snapshot of the due queue taken when it starts; every
grade is submitted immediately, one review per click.
"""

from __future__ import annotations

import streamlit as st

from app.state import get_service
from lingo.exceptions import NotFoundError, ReviewConflictError
from lingo.fsrs import Rating

SESSION_SIZE = 50


def start_new_session() -> None:
    """
    Start a study session over the cards due right now.
    """
    service = get_service()
    cards = service.list_due_cards(st.session_state.user_id, limit=SESSION_SIZE)

    if not cards:
        st.info("Nothing is due right now. Add cards or come back later.")
        return

    st.session_state.session_batch = [card.id for card in cards]
    st.session_state.session_position = 0
    st.session_state.session_count = 0
    st.session_state.session_correct = 0
    st.session_state.session_ratings = {}

    load_next_card()


def load_next_card() -> None:
    """
    Load the next card of the session, or finish the session.
    """
    service = get_service()

    while st.session_state.session_position < len(st.session_state.session_batch):
        card_id = st.session_state.session_batch[st.session_state.session_position]
        try:
            card = service.get_card(st.session_state.user_id, card_id)
        except NotFoundError:
            # Deleted since the session started
            st.session_state.session_position += 1
            continue

        st.session_state.current_card = card
        st.session_state.show_answer = False
        return

    st.session_state.current_card = None


def process_feedback(rating: Rating) -> None:
    """
    Submit the grade for the current card and move to the next one.
    """
    card = st.session_state.current_card
    if card is not None:
        try:
            get_service().submit_review(st.session_state.user_id, card.id, rating)
        except (NotFoundError, ReviewConflictError) as exc:
            st.warning(str(exc))
        else:
            st.session_state.session_count += 1
            ratings = st.session_state.session_ratings
            ratings[rating.name] = ratings.get(rating.name, 0) + 1
            if rating != Rating.AGAIN:
                st.session_state.session_correct += 1

        st.session_state.session_position += 1

    load_next_card()
    st.rerun()


def end_session() -> None:
    """
    End the current session.
    """
    st.session_state.current_card = None
    st.session_state.session_batch = []
    st.session_state.session_position = 0
