# spiral_journal/services/config_store.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from spiral_journal.services import storage

log = logging.getLogger(__name__)

CREDENTIAL_KEY = "claude_api_key"
CONFIGURED_KEY = "firebase_configured"
ANALYSIS_ENABLED_KEY = "analysis_enabled"
DEMO_MODE_KEY = "demo_mode"


def _to_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    return raw == "1"


class ConfigStore:
    """
    App settings persisted in the sqlite `settings` table.

    Each setter is a single durable write and raises `sqlite3.Error` on failure.
    Getters fall back to the defaults a fresh install has: analysis enabled,
    everything else off.
    """

    # ---- Credential ----
    def set_credential(self, credential: str) -> None:
        storage.set_setting(CREDENTIAL_KEY, credential)
        log.info("Stored API credential")

    def get_credential(self) -> Optional[str]:
        return storage.get_setting(CREDENTIAL_KEY)

    def clear_credential(self) -> None:
        storage.delete_setting(CREDENTIAL_KEY)

    @property
    def is_credential_configured(self) -> bool:
        return bool(self.get_credential())

    # ---- Flags ----
    def set_configured(self, configured: bool) -> None:
        storage.set_setting(CONFIGURED_KEY, "1" if configured else "0")

    @property
    def is_configured(self) -> bool:
        return _to_bool(storage.get_setting(CONFIGURED_KEY), False)

    def set_analysis_enabled(self, enabled: bool) -> None:
        storage.set_setting(ANALYSIS_ENABLED_KEY, "1" if enabled else "0")

    @property
    def is_analysis_enabled(self) -> bool:
        return _to_bool(storage.get_setting(ANALYSIS_ENABLED_KEY), True)

    def set_demo_mode(self, demo_mode: bool) -> None:
        storage.set_setting(DEMO_MODE_KEY, "1" if demo_mode else "0")

    @property
    def is_demo_mode(self) -> bool:
        return _to_bool(storage.get_setting(DEMO_MODE_KEY), False)

    # ---- Status ----
    @property
    def is_fully_configured(self) -> bool:
        return self.is_credential_configured and self.is_configured

    @property
    def can_run_demo(self) -> bool:
        return self.is_configured

    def summary(self) -> Dict[str, Any]:
        return {
            "credential_configured": self.is_credential_configured,
            "configured": self.is_configured,
            "analysis_enabled": self.is_analysis_enabled,
            "demo_mode": self.is_demo_mode,
            "fully_configured": self.is_fully_configured,
            "can_run_demo": self.can_run_demo,
        }

    def reset(self) -> None:
        self.clear_credential()
        self.set_configured(False)
        self.set_analysis_enabled(True)
        self.set_demo_mode(False)
        log.info("Configuration reset to first-run defaults")
