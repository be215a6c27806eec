#!/usr/bin/env python3
# scripts/list_users.py
from __future__ import annotations

import os, sys, sqlite3
from textwrap import shorten

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from spiral_journal.config import DB_PATH

def main():
    if not os.path.exists(DB_PATH):
        print(f"No DB found at {DB_PATH}. Open the app once so it initializes the DB.")
        return
    conn = sqlite3.connect(DB_PATH)
    cur = conn.execute(
        "SELECT u.id, u.auth_uid, u.display_name, u.created_at, COUNT(e.id) "
        "FROM users u LEFT JOIN entries e ON e.user_id = u.id "
        "GROUP BY u.id ORDER BY u.created_at DESC"
    )
    rows = cur.fetchall()
    if not rows:
        print("No users in DB yet. Finish setup in the app first.")
        return
    print(f"{'id':>4} | {'auth uid':<30} | {'name':<12} | {'entries':>7} | created_at")
    print("-" * 84)
    for r in rows:
        uid, auth_uid, name, created, n_entries = r
        print(f"{uid:>4} | {shorten(auth_uid or '', 30):<30} | {shorten(name or '', 12):<12} | "
              f"{n_entries:>7} | {created}")
    conn.close()

if __name__ == "__main__":
    main()
