#!/usr/bin/env python3
# scripts/reset_setup.py
from __future__ import annotations

import argparse
import os, sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from spiral_journal.logging_config import setup_logging
from spiral_journal.services.auth import FirebaseAuthService
from spiral_journal.services.config_store import ConfigStore
from spiral_journal.services.journal import clear_draft
from spiral_journal.services.storage import init_db, full_reset_db

def main():
    ap = argparse.ArgumentParser(description="Reset first-run setup so the setup screen shows again.")
    ap.add_argument("--wipe", action="store_true", help="Also delete every user and entry (full DB reset).")
    args = ap.parse_args()

    setup_logging()
    init_db()

    if args.wipe:
        full_reset_db()
        print("Database fully reset.")
        return

    store = ConfigStore()
    print("Before:", store.summary())
    store.reset()
    FirebaseAuthService(api_key="").sign_out()
    clear_draft()
    print("After: ", store.summary())
    print("Done. Restart the app to see the setup screen.")

if __name__ == "__main__":
    main()
