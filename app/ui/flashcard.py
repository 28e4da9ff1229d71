"""
Flashcard UI Component

Renders the front and back of a stored flashcard.
"""

from __future__ import annotations

from html import escape

import streamlit as st

from app.ui.flashcard_style import (
    CARD_MIN_HEIGHT,
    CARD_PADDING,
    LANGUAGE_LABELS,
    FlashcardStyle,
    style_for,
)
from lingo.fsrs.models import ContentLanguage, Flashcard


def render_flashcard(
    main_text: str,
    style: FlashcardStyle,
    subtitle: str = "",
    corner_text: str = "",
) -> None:
    """
    Render one card face.

    Args:
        main_text: Primary text (center, large); HTML-escaped
        style: Style preset
        subtitle: Optional secondary text below the main text
        corner_text: Optional label in the top-right corner
    """
    corner_html = ""
    if corner_text:
        corner_html = (
            f'<div style="position: absolute; top: 15px; right: 20px; '
            f'font-size: {style.corner_font_size}; color: {style.corner_color}; '
            f'font-style: italic;">{escape(corner_text)}</div>'
        )

    white_space = "normal" if style.wrap_text else "nowrap"
    main_html = (
        f'<h1 style="font-size: {style.main_font_size}; color: {style.main_color}; '
        f'font-weight: normal; margin: 0; white-space: {white_space}; '
        'text-align: center; line-height: 1.4; max-width: 100%; '
        'overflow-wrap: anywhere; word-break: break-word;">'
        f"{escape(main_text)}</h1>"
    )

    subtitle_html = ""
    if subtitle:
        subtitle_html = (
            f'<p style="font-size: {style.subtitle_font_size}; color: {style.subtitle_color}; '
            'font-style: italic; margin: 15px 0 0 0; text-align: center; '
            f'line-height: 1.4;">{escape(subtitle)}</p>'
        )

    html = (
        f'<div style="background-color: {style.bg_color}; padding: {CARD_PADDING}; '
        'border-radius: 15px; text-align: center; box-shadow: 0 4px 6px '
        f'rgba(0, 0, 0, 0.1); min-height: {CARD_MIN_HEIGHT}; display: flex; '
        'flex-direction: column; align-items: center; justify-content: center; '
        f'position: relative;">{corner_html}{main_html}{subtitle_html}</div>'
    )

    st.markdown(html, unsafe_allow_html=True)


def render_card_front(card: Flashcard) -> None:
    render_flashcard(
        card.front_text,
        style_for(card.front_text),
        corner_text=LANGUAGE_LABELS.get(card.language, ""),
    )


def render_card_back(card: Flashcard) -> None:
    """Back face: answer plus the reading aid for the card's language."""
    render_flashcard(
        card.back_text,
        style_for(card.back_text, back=True),
        subtitle=_reading_hint(card),
        corner_text=card.front_text,
    )


def _reading_hint(card: Flashcard) -> str:
    details = card.details or {}
    if card.language == ContentLanguage.JAPANESE:
        return details.get("furigana") or ""
    if card.language == ContentLanguage.CHINESE_SIMPLIFIED:
        return details.get("pinyin") or ""
    return details.get("ipa") or ""
