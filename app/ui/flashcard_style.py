"""
Flashcard style presets and constants.
"""

from __future__ import annotations

from dataclasses import dataclass

from lingo.fsrs.models import ContentLanguage


# ---- Shared Card Layout ----

CARD_PADDING = "35px 24px"
CARD_MIN_HEIGHT = "210px"
FRONT_BG_COLOR = "#f0f2f6"
BACK_BG_COLOR = "#e8f4f8"

# Front text longer than this is rendered as a sentence
LONG_TEXT_CHARS = 24


# ---- Language Labels ----

LANGUAGE_LABELS = {
    ContentLanguage.ENGLISH: "🇬🇧 English",
    ContentLanguage.JAPANESE: "🇯🇵 Japanese",
    ContentLanguage.CHINESE_SIMPLIFIED: "🇨🇳 Chinese (Simplified)",
}


@dataclass(frozen=True)
class FlashcardStyle:
    """
    Visual style preset for flashcards.
    """
    main_font_size: str = "3em"
    main_color: str = "#1f1f1f"
    subtitle_font_size: str = "1.2em"
    subtitle_color: str = "#666"
    corner_font_size: str = "0.9em"
    corner_color: str = "#666"
    wrap_text: bool = False
    bg_color: str = FRONT_BG_COLOR


# ---- Presets ----

WORD_FRONT_STYLE = FlashcardStyle(main_font_size="2.5em")

WORD_BACK_STYLE = FlashcardStyle(bg_color=BACK_BG_COLOR)

SENTENCE_FRONT_STYLE = FlashcardStyle(
    main_font_size="1.6em",
    corner_font_size="0.85em",
    wrap_text=True,
)

SENTENCE_BACK_STYLE = FlashcardStyle(
    main_font_size="2.0em",
    subtitle_font_size="1.0em",
    wrap_text=True,
    bg_color=BACK_BG_COLOR,
)


def style_for(text: str, back: bool = False) -> FlashcardStyle:
    """Pick the word or sentence preset by text length."""
    if len(text) > LONG_TEXT_CHARS:
        return SENTENCE_BACK_STYLE if back else SENTENCE_FRONT_STYLE
    return WORD_BACK_STYLE if back else WORD_FRONT_STYLE
