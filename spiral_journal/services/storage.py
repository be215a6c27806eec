# spiral_journal/services/storage.py
import sqlite3, json, os, logging
from contextlib import contextmanager
from datetime import date
import pandas as pd
from typing import List, Dict, Any, Optional
from spiral_journal import config

log = logging.getLogger(__name__)

@contextmanager
def _connect():
    # commit on success, always close the handle
    conn = sqlite3.connect(config.DB_PATH, check_same_thread=False)
    try:
        with conn:
            yield conn
    finally:
        conn.close()

def init_db():
    db_dir = os.path.dirname(config.DB_PATH)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    with _connect() as conn:
        conn.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT DEFAULT (datetime('now'))
        )
        """)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            auth_uid TEXT UNIQUE,
            display_name TEXT,
            is_anonymous INTEGER DEFAULT 1,
            created_at TEXT DEFAULT (datetime('now'))
        )
        """)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            ts TEXT NOT NULL,
            text TEXT NOT NULL,
            moods TEXT,
            FOREIGN KEY(user_id) REFERENCES users(id)
        )
        """)
        conn.commit()

# ---------- Settings (key/value) ----------
def get_setting(key: str) -> Optional[str]:
    with _connect() as conn:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
    return row[0] if row else None

def set_setting(key: str, value: str) -> None:
    with _connect() as conn:
        conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = datetime('now')",
            (key, value),
        )
        conn.commit()

def delete_setting(key: str) -> None:
    with _connect() as conn:
        conn.execute("DELETE FROM settings WHERE key = ?", (key,))
        conn.commit()

# ---------- Anonymous users ----------
def get_user_by_auth_uid(uid: str) -> Dict[str, Any] | None:
    with _connect() as conn:
        cur = conn.execute(
            "SELECT id, auth_uid, display_name, is_anonymous FROM users WHERE auth_uid = ?",
            (uid,),
        )
        row = cur.fetchone()
    if not row:
        return None
    return {"id": row[0], "auth_uid": row[1], "display_name": row[2], "is_anonymous": bool(row[3])}

def get_or_create_anonymous_user(uid: str, display_name: str = "You") -> Dict[str, Any]:
    user = get_user_by_auth_uid(uid)
    if user:
        return user
    with _connect() as conn:
        cur = conn.execute(
            "INSERT INTO users (auth_uid, display_name, is_anonymous) VALUES (?, ?, 1)",
            (uid, display_name),
        )
        conn.commit()
        new_id = cur.lastrowid
    log.info("Created anonymous user profile id=%s", new_id)
    return {"id": new_id, "auth_uid": uid, "display_name": display_name, "is_anonymous": True}

# ---------- Entries ----------
def insert_entry(user_id: int, ts: str, text: str, moods: List[str]) -> int:
    with _connect() as conn:
        cur = conn.execute(
            "INSERT INTO entries (user_id, ts, text, moods) VALUES (?, ?, ?, ?)",
            (user_id, ts, text, json.dumps(list(moods))),
        )
        conn.commit()
        return cur.lastrowid

def get_entry_for_day(user_id: int, day: date) -> Dict[str, Any] | None:
    with _connect() as conn:
        row = conn.execute(
            "SELECT id, ts, text, moods FROM entries WHERE user_id = ? AND substr(ts, 1, 10) = ? ORDER BY ts LIMIT 1",
            (user_id, day.isoformat()),
        ).fetchone()
    if not row:
        return None
    return {"id": row[0], "ts": row[1], "text": row[2], "moods": json.loads(row[3]) if row[3] else []}

def load_entries_df(user_id: int) -> pd.DataFrame:
    with _connect() as conn:
        df = pd.read_sql_query(
            "SELECT id, ts, text, moods FROM entries WHERE user_id = ? ORDER BY ts DESC, id DESC",
            conn, params=(user_id,),
        )
    if not df.empty:
        df["moods"] = df["moods"].apply(lambda s: json.loads(s) if isinstance(s, str) and s else [])
        df["ts"] = pd.to_datetime(df["ts"])
    return df

# ---------- Danger zone ----------
def reset_user_data(user_id: int) -> None:
    with _connect() as conn:
        conn.execute("DELETE FROM entries WHERE user_id = ?", (user_id,))
        conn.commit()

def full_reset_db() -> None:
    if os.path.exists(config.DB_PATH):
        os.remove(config.DB_PATH)
    init_db()
