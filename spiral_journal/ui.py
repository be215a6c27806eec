# spiral_journal/ui.py
from __future__ import annotations

import pandas as pd
import streamlit as st

from .config import APP_TITLE, API_KEY_HELP_URL, API_KEY_PREFIX, AVAILABLE_MOODS
from .services.auth import FirebaseAuthService
from .services.config_store import ConfigStore
from .services.journal import JournalDraft, save_draft, load_draft, clear_draft, save_entry
from .services.setup import SetupSequencer, DemoMode
from .services.storage import load_entries_df, reset_user_data


# ---------- Session-scoped services ----------
def _go_main() -> None:
    st.session_state.route = "main"

def _services():
    if "config_store" not in st.session_state:
        st.session_state.config_store = ConfigStore()
        st.session_state.auth_service = FirebaseAuthService()
    if "sequencer" not in st.session_state:
        st.session_state.sequencer = SetupSequencer(
            st.session_state.config_store,
            st.session_state.auth_service,
            on_success=_go_main,
        )
    return st.session_state.config_store, st.session_state.auth_service, st.session_state.sequencer

def _initial_route(config_store: ConfigStore, auth_service: FirebaseAuthService) -> str:
    if config_store.is_configured and auth_service.current_user():
        return "main"
    return "setup"

def _draft() -> JournalDraft:
    if "draft" not in st.session_state:
        st.session_state.draft = JournalDraft()
    return st.session_state.draft


def _set_flash(state, message: str) -> None:
    state["flash"] = message

def _take_flash(state) -> str | None:
    return state.pop("flash", None)


# ---------- Setup screen ----------
def _render_setup(sequencer: SetupSequencer) -> None:
    st.subheader(f"Welcome to {APP_TITLE}")
    st.caption("Your AI-powered personal growth companion")
    busy = sequencer.is_busy or sequencer.state.is_loading

    with st.container(border=True):
        st.markdown("**Claude AI Configuration**")
        st.caption("Enter your Claude API key to enable AI-powered journal analysis and insights.")
        raw_key = st.text_input("Claude API Key", type="password", placeholder=f"{API_KEY_PREFIX}...")
        with st.expander("Need help getting your API key?"):
            st.markdown(
                f"1. Visit {API_KEY_HELP_URL}\n"
                "2. Sign up or log in to your account\n"
                "3. Navigate to API Keys section\n"
                "4. Create a new API key\n"
                f"5. Copy the key (starts with `{API_KEY_PREFIX}`)"
            )
            st.caption("You'll need credits on your Anthropic account to use the API.")

    with st.container(border=True):
        st.markdown("**Demo Mode**")
        st.caption("Try the app with limited features. You can add AI analysis later.")

    if st.button("Setup with AI Analysis", type="primary", use_container_width=True, disabled=busy):
        with st.spinner("Setting things up…"):
            outcome = sequencer.submit_api_key(raw_key)
        if outcome.validation_error is not None:
            st.warning(outcome.validation_error.message)
        elif outcome.ok:
            st.rerun()

    if st.button("Continue in Demo Mode", use_container_width=True, disabled=busy):
        with st.spinner("Setting up demo mode…"):
            outcome = sequencer.run_setup(DemoMode())
        if outcome.ok:
            st.rerun()

    if sequencer.state.error_message:
        st.error(sequencer.state.error_message)


# ---------- Journal screen ----------
def _render_journal(user: dict, config_store: ConfigStore) -> None:
    draft = _draft()

    if "draft_checked" not in st.session_state:
        st.session_state.draft_checked = True
        recovered = load_draft()
        if recovered is not None:
            st.session_state.recovered_draft = recovered

    recovered = st.session_state.get("recovered_draft")
    if recovered is not None:
        with st.container(border=True):
            st.markdown("**Recover unsaved entry?**")
            preview = recovered.text if len(recovered.text) <= 100 else recovered.text[:100] + "..."
            st.caption(preview)
            c1, c2 = st.columns(2)
            if c1.button("Recover", use_container_width=True):
                draft.set_moods(m for m in recovered.moods if m in AVAILABLE_MOODS)
                draft.set_text(recovered.text)
                st.session_state.journal_text = recovered.text
                st.session_state.journal_moods = list(draft.moods)
                st.session_state.pop("recovered_draft", None)
                st.rerun()
            if c2.button("Discard", use_container_width=True):
                clear_draft()
                st.session_state.pop("recovered_draft", None)
                st.rerun()

    if config_store.is_demo_mode:
        st.info("Demo mode: AI analysis is off. Use “Reset setup” in the sidebar to add an API key.")

    flash = _take_flash(st.session_state)
    if flash:
        st.success(flash)

    st.subheader("How are you feeling?")
    if "journal_moods" not in st.session_state:
        st.session_state.journal_moods = list(draft.moods)
    selection = st.multiselect("Moods", options=list(AVAILABLE_MOODS), key="journal_moods")
    if tuple(selection) != draft.moods:
        draft.set_moods(selection)
        save_draft(draft)

    text = st.text_area("What's on your mind?", key="journal_text", height=220)
    if text != draft.text:
        draft.set_text(text)
        save_draft(draft)

    if st.button("Save entry", type="primary", use_container_width=True, disabled=draft.is_empty or not draft.moods):
        try:
            save_entry(user["id"], draft)
        except ValueError as e:
            st.warning(str(e))
        else:
            st.session_state.draft = JournalDraft()
            st.session_state.pop("journal_text", None)
            st.session_state.pop("journal_moods", None)
            _set_flash(st.session_state, "Entry saved.")
            st.rerun()

    st.divider()
    st.markdown("#### Recent entries")
    df = load_entries_df(user["id"])
    if df.empty:
        st.caption("No entries yet.")
        return
    for _, row in df.head(10).iterrows():
        with st.container(border=True):
            st.caption(pd.Timestamp(row["ts"]).strftime("%a, %b %d %Y · %I:%M %p"))
            if row["moods"]:
                st.markdown(" · ".join(row["moods"]))
            st.markdown(row["text"])


# ---------- Main render ----------
def render_app():
    config_store, auth_service, sequencer = _services()
    if "route" not in st.session_state:
        st.session_state.route = _initial_route(config_store, auth_service)

    st.title(f"📝 {APP_TITLE}")

    if st.session_state.route != "main":
        _render_setup(sequencer)
        return

    user = auth_service.current_user()
    if user is None:
        st.session_state.route = "setup"
        st.rerun()

    with st.sidebar:
        st.caption("Signed in anonymously")
        with st.expander("⚠️ Danger zone", expanded=False):
            if st.button("Delete my entries", type="secondary"):
                reset_user_data(user["id"])
                _set_flash(st.session_state, "All your entries were deleted.")
                st.rerun()
            if st.button("Reset setup", type="secondary"):
                config_store.reset()
                auth_service.sign_out()
                for key in ("route", "sequencer", "draft", "draft_checked", "recovered_draft",
                            "journal_text", "journal_moods"):
                    st.session_state.pop(key, None)
                st.rerun()

    _render_journal(user, config_store)
