"""
Card Details UI

Renders the language-specific details stored on a flashcard.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from lingo.fsrs.models import ContentLanguage


def render_card_details(language: ContentLanguage, details: Optional[dict]):
    """
    Render card details expander (pronunciation, examples, audio).

    Args:
        language: Card language, selects which phonetic fields are shown
        details: Stored details dict (may be None)
    """
    with st.expander("📖 Details"):
        if not details:
            st.info("No details stored for this card.")
            return

        if details.get("part_of_speech"):
            st.caption(f"**Part of Speech:** {details['part_of_speech'].title()}")

        _render_pronunciation(language, details)
        _render_examples(details.get("example_sentences") or [])

        if details.get("audio_url"):
            st.audio(details["audio_url"])


def _render_pronunciation(language: ContentLanguage, details: dict):
    """Render the phonetic fields relevant to the card language."""
    if language == ContentLanguage.JAPANESE:
        if details.get("furigana"):
            st.caption(f"**Furigana:** {details['furigana']}")
        if details.get("pitch_accent"):
            accents = ", ".join(str(a) for a in details["pitch_accent"])
            st.caption(f"**Pitch Accent:** {accents}")
    elif language == ContentLanguage.CHINESE_SIMPLIFIED:
        if details.get("pinyin"):
            st.caption(f"**Pinyin:** {details['pinyin']}")
        if details.get("bopomofo"):
            st.caption(f"**Bopomofo:** {details['bopomofo']}")
    elif details.get("ipa"):
        st.caption(f"**IPA:** /{details['ipa']}/")


def _render_examples(examples: list[dict]):
    """Render example sentences with translations."""
    if not examples:
        return
    st.markdown("**Examples**")
    for ex in examples:
        st.caption(ex["sentence"])
        if ex.get("translation"):
            st.caption(f"→ {ex['translation']}")
        st.markdown("")
