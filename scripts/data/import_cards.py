"""
Import flashcards from a CSV file.

Expected columns:
    front, back                 (required)
    language                    (eng / jpn / chi_sim; or pass --language)
    part_of_speech, reading,    (optional; reading is stored as furigana,
    example, translation         pinyin or IPA depending on the language)

Rows are normalized (trimmed, whitespace collapsed) and de-duplicated on
(front, back, language) before import. Every imported card starts New and
due immediately.

Usage:
    python -m scripts.data.import_cards data/cards.csv [--user demo] [--language jpn]
                                                       [--limit N] [--dry-run]
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import pandas as pd

from lingo.exceptions import ValidationError
from lingo.fsrs import database
from lingo.logging_config import configure_logging
from lingo.schemas import FlashcardCreate, validate_payload
from lingo.srs_service import SrsService


REQUIRED_COLUMNS = ("front", "back")
READING_FIELD = {
    "jpn": "furigana",
    "chi_sim": "pinyin",
    "eng": "ipa",
}


def normalize(s: pd.Series) -> pd.Series:
    s = s.fillna("").astype(str).str.strip()
    # collapse multiple spaces
    return s.str.replace(r"\s+", " ", regex=True)


def load_rows(csv_path: Path, default_language: Optional[str]) -> pd.DataFrame:
    """
    Read and clean the CSV.

    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If required columns are missing
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype=str)
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(
            f"CSV must contain columns {list(REQUIRED_COLUMNS)}. Found: {list(df.columns)}"
        )
    if "language" not in df.columns:
        if default_language is None:
            raise ValueError("CSV has no 'language' column; pass --language")
        df["language"] = default_language

    for col in df.columns:
        df[col] = normalize(df[col])
    if default_language is not None:
        df.loc[df["language"] == "", "language"] = default_language

    df = df[(df["front"] != "") & (df["back"] != "")]
    return df.drop_duplicates(subset=["front", "back", "language"], keep="first")


def row_to_payload(row: pd.Series) -> dict:
    """Build a FlashcardCreate payload from one CSV row."""
    details: dict = {}
    if row.get("part_of_speech"):
        details["part_of_speech"] = row["part_of_speech"]
    reading_field = READING_FIELD.get(row["language"])
    if row.get("reading") and reading_field:
        details[reading_field] = row["reading"]
    if row.get("example"):
        details["example_sentences"] = [{
            "sentence": row["example"],
            "translation": row.get("translation") or None,
        }]

    return {
        "language": row["language"],
        "front_text": row["front"],
        "back_text": row["back"],
        "details": details or None,
    }


def import_cards(
    csv_path: Path,
    user_id: str,
    default_language: Optional[str] = None,
    limit: Optional[int] = None,
    dry_run: bool = False,
    service: Optional[SrsService] = None
) -> dict[str, int]:
    """
    Import cards from `csv_path` for `user_id`.

    Args:
        csv_path: CSV file to read
        user_id: Owner of the imported cards
        default_language: Language for rows without one
        limit: Maximum number of rows to import (None = all)
        dry_run: Validate only; nothing is written
        service: SrsService to write through (default: process-wide database)

    Returns:
        Counts of imported and rejected rows
    """
    df = load_rows(csv_path, default_language)
    if limit:
        df = df.head(limit)
    print(f"Loaded {len(df)} unique rows from {csv_path}")

    if service is None and not dry_run:
        database.init_db()
        service = SrsService(database.get_session_factory())

    imported = 0
    rejected = 0
    for position, (_, row) in enumerate(df.iterrows(), start=1):
        payload = row_to_payload(row)
        try:
            if dry_run:
                validate_payload(FlashcardCreate, payload)
            else:
                service.create_card(user_id, payload)
            imported += 1
        except ValidationError as e:
            rejected += 1
            print(f"  ✗ Row {position} ({row['front']}): {e}")
            for error in e.errors:
                print(f"      {'.'.join(str(p) for p in error.get('loc', ()))}: {error.get('msg')}")

    print(f"\n{'='*60}")
    print(f"{'[DRY RUN] Would import' if dry_run else 'Imported'}: {imported}")
    print(f"Rejected: {rejected}")
    print(f"{'='*60}")
    return {"imported": imported, "rejected": rejected}


def main():
    parser = argparse.ArgumentParser(description="Import flashcards from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV file to import")
    parser.add_argument("--user", default=database.get_default_user_id(), help="Owner user id")
    parser.add_argument("--language", choices=sorted(READING_FIELD), help="Language for rows without one")
    parser.add_argument("--limit", type=int, help="Import at most N rows")
    parser.add_argument("--dry-run", action="store_true", help="Validate without writing")
    args = parser.parse_args()

    configure_logging()
    import_cards(
        args.csv_path,
        args.user,
        default_language=args.language,
        limit=args.limit,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":
    main()
