"""
Card management page: create, search, edit and delete flashcards.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from app.state import get_service
from app.ui.flashcard_style import LANGUAGE_LABELS
from lingo.exceptions import NotFoundError, ValidationError
from lingo.fsrs import State
from lingo.fsrs.models import ContentLanguage


PAGE_SIZE = 20


def render_cards_page(user_options: dict[str, str]) -> None:
    """
    Render the card browser and editor.
    """
    del user_options  # user is selected once on app entry
    st.subheader("Flashcards")
    st.caption(f"User: {st.session_state.user_label} ({st.session_state.user_id})")

    with st.expander("➕ New card", expanded=False):
        _render_create_form()

    _render_card_list()


def _language_select(label: str, key: str, current: Optional[ContentLanguage] = None) -> ContentLanguage:
    options = list(ContentLanguage)
    return st.selectbox(
        label,
        options,
        index=options.index(current) if current else 0,
        format_func=lambda lang: LANGUAGE_LABELS[lang],
        key=key,
    )


def _details_payload(reading: str, part_of_speech: str, example: str, translation: str,
                     language: ContentLanguage) -> Optional[dict]:
    """Build a CardDetails dict from the form fields (None when all are empty)."""
    details: dict = {}
    if part_of_speech.strip():
        details["part_of_speech"] = part_of_speech.strip()
    if reading.strip():
        reading_field = {
            ContentLanguage.JAPANESE: "furigana",
            ContentLanguage.CHINESE_SIMPLIFIED: "pinyin",
            ContentLanguage.ENGLISH: "ipa",
        }[language]
        details[reading_field] = reading.strip()
    if example.strip():
        details["example_sentences"] = [{
            "sentence": example.strip(),
            "translation": translation.strip() or None,
        }]
    return details or None


def _show_validation_error(exc: ValidationError) -> None:
    st.error(str(exc))
    for error in exc.errors:
        location = ".".join(str(part) for part in error.get("loc", ()))
        st.caption(f"{location}: {error.get('msg')}")


def _render_create_form() -> None:
    with st.form("create_card", clear_on_submit=True):
        language = _language_select("Language", "create_language")
        front_text = st.text_input("Front")
        back_text = st.text_input("Back")
        col1, col2 = st.columns(2)
        with col1:
            reading = st.text_input("Reading (furigana / pinyin / IPA)")
        with col2:
            part_of_speech = st.text_input("Part of speech")
        example = st.text_input("Example sentence")
        translation = st.text_input("Example translation")
        submitted = st.form_submit_button("Create", type="primary")

    if not submitted:
        return

    payload = {
        "language": language,
        "front_text": front_text,
        "back_text": back_text,
        "details": _details_payload(reading, part_of_speech, example, translation, language),
    }
    try:
        card = get_service().create_card(st.session_state.user_id, payload)
    except ValidationError as exc:
        _show_validation_error(exc)
        return
    st.success(f"Created “{card.front_text}” - due now.")


def _render_card_list() -> None:
    col1, col2 = st.columns([3, 2])
    with col1:
        q = st.text_input("Search", placeholder="front or back text")
    with col2:
        language_filter = st.selectbox(
            "Language filter",
            [None] + list(ContentLanguage),
            format_func=lambda lang: "All languages" if lang is None else LANGUAGE_LABELS[lang],
        )

    query = {
        "page": st.session_state.cards_page,
        "limit": PAGE_SIZE,
        "q": q or None,
        "language": language_filter,
    }
    try:
        page = get_service().list_cards(st.session_state.user_id, query)
    except ValidationError as exc:
        _show_validation_error(exc)
        return

    st.caption(f"{page.meta.total} cards")
    for card in page.data:
        _render_card_row(card)

    if page.meta.last_page > 1:
        _render_pager(page.meta.page, page.meta.last_page)


def _render_pager(current: int, last_page: int) -> None:
    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("◀", disabled=current <= 1, use_container_width=True):
            st.session_state.cards_page = current - 1
            st.rerun()
    with col2:
        st.markdown(f"<div style='text-align:center'>Page {current} / {last_page}</div>",
                    unsafe_allow_html=True)
    with col3:
        if st.button("▶", disabled=current >= last_page, use_container_width=True):
            st.session_state.cards_page = current + 1
            st.rerun()


def _render_card_row(card) -> None:
    with st.container(border=True):
        col1, col2, col3 = st.columns([4, 3, 2])
        with col1:
            st.markdown(f"**{card.front_text}** → {card.back_text}")
            st.caption(LANGUAGE_LABELS[card.language])
        with col2:
            st.caption(f"State: {State(card.state).name.title()}")
            st.caption(f"Due: {card.due_date:%Y-%m-%d %H:%M} UTC")
            if card.state != State.NEW:
                st.caption(f"S {card.stability:.1f}d · D {card.difficulty:.1f} · lapses {card.lapses}")
        with col3:
            if st.button("Edit", key=f"edit_{card.id}", use_container_width=True):
                st.session_state.editing_card_id = card.id
                st.rerun()
            if st.button("Delete", key=f"delete_{card.id}", use_container_width=True):
                _delete_card(card.id)

        if st.session_state.editing_card_id == card.id:
            _render_edit_form(card)


def _render_edit_form(card) -> None:
    with st.form(f"edit_card_{card.id}"):
        language = _language_select("Language", f"edit_language_{card.id}", card.language)
        front_text = st.text_input("Front", value=card.front_text)
        back_text = st.text_input("Back", value=card.back_text)
        col1, col2 = st.columns(2)
        with col1:
            saved = st.form_submit_button("Save", type="primary")
        with col2:
            cancelled = st.form_submit_button("Cancel")

    if cancelled:
        st.session_state.editing_card_id = None
        st.rerun()
    if not saved:
        return

    payload = {"language": language, "front_text": front_text, "back_text": back_text}
    try:
        get_service().update_card(st.session_state.user_id, card.id, payload)
    except ValidationError as exc:
        _show_validation_error(exc)
        return
    except NotFoundError as exc:
        st.warning(str(exc))
    st.session_state.editing_card_id = None
    st.rerun()


def _delete_card(card_id: str) -> None:
    try:
        get_service().delete_card(st.session_state.user_id, card_id)
    except NotFoundError as exc:
        st.warning(str(exc))
    st.rerun()
