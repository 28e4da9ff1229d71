"""
Tab registry for the Streamlit app.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from app.pages.cards import render_cards_page
from app.pages.study import render_study_page


@dataclass(frozen=True)
class AppPage:
    title: str
    icon: str
    render: Callable[[dict[str, str]], None]

    @property
    def label(self) -> str:
        return f"{self.icon} {self.title}"


PAGES = [
    AppPage(title="Study", icon="🧠", render=render_study_page),
    AppPage(title="Cards", icon="🗂️", render=render_cards_page),
]
