from __future__ import annotations

from datetime import datetime

import pytest

from spiral_journal.services import storage
from spiral_journal.services.journal import (
    JournalDraft,
    clear_draft,
    load_draft,
    save_draft,
    save_entry,
)


def test_draft_starts_with_default_moods() -> None:
    draft = JournalDraft()
    assert draft.moods == ("Happy", "Content")
    assert draft.text == ""
    assert draft.is_empty


def test_set_moods_replaces_whole_selection() -> None:
    draft = JournalDraft()
    before = draft.moods
    draft.set_moods(["Sad"])
    assert draft.moods == ("Sad",)
    assert before == ("Happy", "Content")


def test_set_moods_drops_duplicates_keeping_order() -> None:
    draft = JournalDraft()
    draft.set_moods(["Tired", "Sad", "Tired", "Proud", "Sad"])
    assert draft.moods == ("Tired", "Sad", "Proud")


def test_set_moods_accepts_generator() -> None:
    draft = JournalDraft()
    draft.set_moods(m for m in ["Calm", "Proud"])
    assert draft.moods == ("Calm", "Proud")


def test_toggle_mood() -> None:
    draft = JournalDraft()
    draft.toggle_mood("Happy")
    assert draft.moods == ("Content",)
    draft.toggle_mood("Grateful")
    assert draft.moods == ("Content", "Grateful")


def test_set_text_has_no_bounds() -> None:
    draft = JournalDraft()
    long_text = "x" * 50_000
    draft.set_text(long_text)
    assert draft.text == long_text
    draft.set_text("   ")
    assert draft.is_empty


def test_draft_recovery_roundtrip(tmp_db) -> None:
    draft = JournalDraft()
    draft.set_moods(["Anxious", "Tired"])
    draft.set_text("Long day at work.")
    save_draft(draft)

    recovered = load_draft()
    assert recovered is not None
    assert recovered.text == "Long day at work."
    assert recovered.moods == ("Anxious", "Tired")


def test_empty_draft_clears_recovery(tmp_db) -> None:
    draft = JournalDraft(text="something")
    save_draft(draft)
    draft.set_text("")
    save_draft(draft)
    assert load_draft() is None


def test_unreadable_moods_are_dropped(tmp_db) -> None:
    storage.set_setting("journal_draft_content", "hello")
    storage.set_setting("journal_draft_moods", "{not json")
    recovered = load_draft()
    assert recovered.text == "hello"
    assert recovered.moods == ()


def test_clear_draft(tmp_db) -> None:
    save_draft(JournalDraft(text="hi"))
    clear_draft()
    assert load_draft() is None


def test_save_entry_persists_and_clears_draft(tmp_db) -> None:
    user = storage.get_or_create_anonymous_user("uid-1")
    draft = JournalDraft()
    draft.set_moods(["Grateful"])
    draft.set_text("  Called my sister today.  ")
    save_draft(draft)

    entry_id = save_entry(user["id"], draft, now=datetime(2026, 10, 16, 21, 5, 0))

    df = storage.load_entries_df(user["id"])
    assert len(df) == 1
    row = df.iloc[0]
    assert row["id"] == entry_id
    assert row["text"] == "Called my sister today."
    assert row["moods"] == ["Grateful"]
    assert row["ts"].hour == 21
    assert load_draft() is None


def test_save_entry_rejects_empty(tmp_db) -> None:
    with pytest.raises(ValueError):
        save_entry(1, JournalDraft(text="   "))
    assert storage.load_entries_df(1).empty


def test_save_entry_requires_a_mood(tmp_db) -> None:
    user = storage.get_or_create_anonymous_user("uid-1")
    draft = JournalDraft()
    draft.set_moods([])
    draft.set_text("hello")

    with pytest.raises(ValueError, match="Please select at least one mood!"):
        save_entry(user["id"], draft)
    assert storage.load_entries_df(user["id"]).empty


def test_save_entry_empty_text_message(tmp_db) -> None:
    with pytest.raises(ValueError, match="Please write something before saving!"):
        save_entry(1, JournalDraft(text=""))


def test_one_entry_per_day(tmp_db) -> None:
    user = storage.get_or_create_anonymous_user("uid-1")
    draft = JournalDraft(text="Morning pages.")
    save_entry(user["id"], draft, now=datetime(2026, 10, 16, 9, 0, 0))

    again = JournalDraft(text="Evening thoughts.")
    save_draft(again)
    with pytest.raises(ValueError, match="already created an entry today"):
        save_entry(user["id"], again, now=datetime(2026, 10, 16, 10, 0, 0))

    assert len(storage.load_entries_df(user["id"])) == 1
    # the rejected draft stays recoverable
    assert load_draft().text == "Evening thoughts."


def test_daily_limit_is_per_day_and_per_user(tmp_db) -> None:
    first = storage.get_or_create_anonymous_user("uid-1")
    second = storage.get_or_create_anonymous_user("uid-2")
    save_entry(first["id"], JournalDraft(text="day one"), now=datetime(2026, 10, 16, 23, 59, 0))

    save_entry(first["id"], JournalDraft(text="day two"), now=datetime(2026, 10, 17, 0, 1, 0))
    save_entry(second["id"], JournalDraft(text="other user"), now=datetime(2026, 10, 16, 12, 0, 0))

    assert len(storage.load_entries_df(first["id"])) == 2
    assert storage.get_entry_for_day(first["id"], datetime(2026, 10, 16).date())["text"] == "day one"
    assert storage.get_entry_for_day(first["id"], datetime(2026, 10, 18).date()) is None
