"""Seed records fed to the index build pipeline."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

STARTER_PHRASES = (
    "That is a very happy Person",
    "That is a Happy Dog",
    "Today is a sunny day",
    "Yesterday is a sunny day",
)


@dataclass(frozen=True)
class SeedRecord:
    id: str
    title: str
    url: str
    text: str


def seed_records(phrases: Iterable[str] = STARTER_PHRASES) -> List[SeedRecord]:
    """Records for ``phrases`` with ids ``"0".."n-1"`` and urls ``/path/<i>``."""
    return [
        SeedRecord(id=str(i), title=text, url=f"/path/{i}", text=text)
        for i, text in enumerate(phrases)
    ]


def load_corpus(path: str | Path) -> List[SeedRecord]:
    """
    Load seed records from a JSON file.

    The file holds a list of objects with ``text`` and optional ``id``,
    ``title`` and ``url``. Missing ids default to the list position, a
    missing title to the text, and a missing url to ``/path/<id>``.
    """
    target = Path(path)
    with target.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)

    if not isinstance(raw, list):
        raise ValueError(f"{target}: expected a JSON list of records")

    records: List[SeedRecord] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or not isinstance(item.get("text"), str):
            raise ValueError(f"{target}: record {i} needs a string 'text' field")
        rid = str(item.get("id", i))
        records.append(
            SeedRecord(
                id=rid,
                title=str(item.get("title") or item["text"]),
                url=str(item.get("url") or f"/path/{rid}"),
                text=item["text"],
            )
        )

    logger.info("Loaded %d seed records from %s", len(records), target)
    return records


__all__ = ["STARTER_PHRASES", "SeedRecord", "seed_records", "load_corpus"]
