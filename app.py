import streamlit as st
from spiral_journal.config import APP_TITLE
from spiral_journal.logging_config import setup_logging
from spiral_journal.ui import render_app
from spiral_journal.services.storage import init_db

st.set_page_config(page_title=APP_TITLE, page_icon="📝", layout="centered")

def main():
    setup_logging()
    init_db()
    render_app()

if __name__ == "__main__":
    main()
