# spiral_journal/services/journal.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Tuple

from spiral_journal.config import DEFAULT_MOODS
from spiral_journal.services import storage

log = logging.getLogger(__name__)

DRAFT_CONTENT_KEY = "journal_draft_content"
DRAFT_MOODS_KEY = "journal_draft_moods"

EMPTY_TEXT_MESSAGE = "Please write something before saving!"
NO_MOOD_MESSAGE = "Please select at least one mood!"
DAILY_LIMIT_MESSAGE = "You've already created an entry today! Come back tomorrow to continue your journey."


def _ordered_unique(moods: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    out = []
    for m in moods:
        if m in seen:
            continue
        seen.add(m)
        out.append(m)
    return tuple(out)


@dataclass
class JournalDraft:
    """In-memory journal entry being written: selected mood tags plus text."""

    moods: Tuple[str, ...] = field(default=DEFAULT_MOODS)
    text: str = ""

    def set_moods(self, new_selection: Iterable[str]) -> None:
        # single assignment; readers see the old tuple or the new one
        self.moods = _ordered_unique(new_selection)

    def set_text(self, value: str) -> None:
        self.text = value

    def toggle_mood(self, mood: str) -> None:
        if mood in self.moods:
            self.set_moods(m for m in self.moods if m != mood)
        else:
            self.set_moods(self.moods + (mood,))

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


# ---------- Draft recovery ----------
def save_draft(draft: JournalDraft) -> None:
    if draft.is_empty:
        clear_draft()
        return
    storage.set_setting(DRAFT_CONTENT_KEY, draft.text)
    storage.set_setting(DRAFT_MOODS_KEY, json.dumps(list(draft.moods)))

def load_draft() -> Optional[JournalDraft]:
    content = storage.get_setting(DRAFT_CONTENT_KEY)
    if not content:
        return None
    raw_moods = storage.get_setting(DRAFT_MOODS_KEY)
    try:
        moods = json.loads(raw_moods) if raw_moods else []
    except ValueError:
        log.warning("Discarding unreadable draft moods")
        moods = []
    draft = JournalDraft(text=content)
    draft.set_moods(str(m) for m in moods if m)
    return draft

def clear_draft() -> None:
    storage.delete_setting(DRAFT_CONTENT_KEY)
    storage.delete_setting(DRAFT_MOODS_KEY)


# ---------- Saving ----------
def save_entry(user_id: int, draft: JournalDraft, now: Optional[datetime] = None) -> int:
    """Persist the draft as a journal entry and drop any recovered copy."""
    if draft.is_empty:
        raise ValueError(EMPTY_TEXT_MESSAGE)
    if not draft.moods:
        raise ValueError(NO_MOOD_MESSAGE)
    now = now or datetime.now()
    if storage.get_entry_for_day(user_id, now.date()) is not None:
        raise ValueError(DAILY_LIMIT_MESSAGE)
    ts = now.isoformat(timespec="seconds")
    entry_id = storage.insert_entry(
        user_id=user_id,
        ts=ts,
        text=draft.text.strip(),
        moods=list(draft.moods),
    )
    clear_draft()
    log.info("Saved journal entry id=%s with %d mood(s)", entry_id, len(draft.moods))
    return entry_id
