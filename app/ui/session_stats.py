"""
Session Statistics UI

Progress of the running review session and the summary shown when it ends.
"""

import streamlit as st

from app.ui.feedback_buttons import RATING_LABELS
from lingo.fsrs import Rating


def _recall_rate() -> float:
    """Share of graded cards not rated Again, in percent."""
    graded = st.session_state.session_count
    if not graded:
        return 0.0
    return st.session_state.session_correct / graded * 100


def _rating_breakdown() -> str:
    counts = st.session_state.session_ratings
    return " · ".join(
        f"{RATING_LABELS[rating]} {counts.get(rating.name, 0)}" for rating in Rating
    )


def render_session_stats() -> bool:
    """
    Render session progress and the quit button.

    Returns:
        True if quit button was clicked, False otherwise
    """
    batch = st.session_state.session_batch
    if not batch:
        return False

    progress_col, recall_col, quit_col = st.columns([4, 2, 1])

    with progress_col:
        done = min(st.session_state.session_position, len(batch))
        st.progress(done / len(batch), text=f"{done} of {len(batch)} due cards")
        st.caption(_rating_breakdown())

    with recall_col:
        if st.session_state.session_count:
            st.metric("Recalled", f"{_recall_rate():.0f}%")

    with quit_col:
        if st.button("❌", help="Quit session", use_container_width=True):
            return True

    st.divider()
    return False


def render_session_complete():
    """Summary of the session that just ended."""
    graded = st.session_state.session_count
    if not graded:
        return

    st.success(f"🎉 Session complete! {graded} cards graded.")
    st.info(f"Recalled {_recall_rate():.1f}% · {_rating_breakdown()}")
