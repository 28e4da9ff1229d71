"""
Feedback Button UI

Renders the four FSRS grading buttons.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from lingo.fsrs import Rating, SchedulingResult


RATING_LABELS = {
    Rating.AGAIN: "❌ Again",
    Rating.HARD: "😰 Hard",
    Rating.GOOD: "👍 Good",
    Rating.EASY: "✨ Easy",
}


def format_interval(result: SchedulingResult) -> str:
    """Compact interval label such as "<1m", "10m", "3h" or "12d"."""
    seconds = result.interval.total_seconds()
    if seconds < 60:
        return "<1m"
    if seconds < 3600:
        return f"{round(seconds / 60)}m"
    if seconds < 86400:
        return f"{round(seconds / 3600)}h"
    return f"{round(seconds / 86400)}d"


def render_feedback_buttons(
    key_suffix: str = "",
    preview: Optional[dict[Rating, SchedulingResult]] = None
) -> Optional[Rating]:
    """
    Render feedback grading buttons.

    Args:
        key_suffix: Makes widget keys unique per card
        preview: Optional outcome per rating, shown as the interval under each button

    Returns:
        Rating selected by user, or None if no button clicked
    """
    st.markdown("**How well did you remember this card?**")

    columns = st.columns(len(RATING_LABELS))
    for column, (rating, label) in zip(columns, RATING_LABELS.items()):
        with column:
            if st.button(label, key=f"rate_{rating.name}_{key_suffix}", use_container_width=True):
                return rating
            if preview and rating in preview:
                st.caption(format_interval(preview[rating]))

    return None
