# spiral_journal/services/setup.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple, Union

from spiral_journal.config import API_KEY_PREFIX

log = logging.getLogger(__name__)


# ---- Credential validation ----
class ValidationError(Enum):
    EMPTY = "Please enter your Claude API key"
    BAD_FORMAT = "Invalid Claude API key format"

    @property
    def message(self) -> str:
        return self.value


def validate_credential(raw: str) -> Tuple[Optional[str], Optional[ValidationError]]:
    """
    Returns (trimmed_key, None) when the key looks usable, or (None, error).
    Empty input wins over a bad prefix.
    """
    value = (raw or "").strip()
    if not value:
        return None, ValidationError.EMPTY
    if not value.startswith(API_KEY_PREFIX):
        return None, ValidationError.BAD_FORMAT
    return value, None


# ---- Collaborators ----
class ConfigWriter(Protocol):
    def set_credential(self, credential: str) -> None: ...
    def set_configured(self, configured: bool) -> None: ...
    def set_demo_mode(self, demo_mode: bool) -> None: ...
    def set_analysis_enabled(self, enabled: bool) -> None: ...


class Authenticator(Protocol):
    def authenticate_anonymously(self) -> object: ...


# ---- Modes, state, outcome ----
@dataclass(frozen=True)
class ApiKeyMode:
    credential: str


@dataclass(frozen=True)
class DemoMode:
    pass


SetupMode = Union[ApiKeyMode, DemoMode]


class SetupStage(Enum):
    CONFIG_WRITE = "config_write"
    AUTH = "auth"


class SetupStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SetupError:
    stage: SetupStage
    cause: str


@dataclass
class SetupState:
    credential: str = ""
    is_demo_mode: bool = False
    is_loading: bool = False
    error_message: Optional[str] = None


@dataclass(frozen=True)
class SetupOutcome:
    ok: bool
    error: Optional[SetupError] = None
    skipped: bool = False
    validation_error: Optional[ValidationError] = None


SKIPPED = SetupOutcome(ok=False, skipped=True)


# ---- Sequencer ----
class SetupSequencer:
    """
    Runs first-run setup: write configuration, then sign in anonymously.

    Only one attempt runs at a time; a trigger that arrives while an attempt is
    pending returns `SKIPPED` and touches nothing. The first stage that raises
    stops the run; configuration already written is left in place.
    """

    def __init__(
        self,
        config_store: ConfigWriter,
        auth_service: Authenticator,
        on_success: Optional[Callable[[], None]] = None,
    ) -> None:
        self._config = config_store
        self._auth = auth_service
        self._on_success = on_success
        self._busy = threading.Lock()
        self.state = SetupState()
        self.status = SetupStatus.IDLE

    @property
    def is_busy(self) -> bool:
        return self._busy.locked()

    def submit_api_key(self, raw: str) -> SetupOutcome:
        value, err = validate_credential(raw)
        if err is not None:
            return SetupOutcome(ok=False, validation_error=err)
        return self.run_setup(ApiKeyMode(value))

    def run_setup(self, mode: SetupMode) -> SetupOutcome:
        if not self._busy.acquire(blocking=False):
            log.info("Setup already in progress; ignoring trigger")
            return SKIPPED
        try:
            self.status = SetupStatus.RUNNING
            self.state.is_loading = True
            self.state.error_message = None
            self.state.is_demo_mode = isinstance(mode, DemoMode)
            if isinstance(mode, ApiKeyMode):
                self.state.credential = mode.credential

            error = self._run_stages([
                (SetupStage.CONFIG_WRITE, lambda: self._write_config(mode)),
                (SetupStage.AUTH, self._auth.authenticate_anonymously),
            ])

            if error is not None:
                prefix = "Demo setup failed" if isinstance(mode, DemoMode) else "Setup failed"
                self.state.error_message = f"{prefix}: {error.cause}"
                self.status = SetupStatus.FAILED
                log.warning("Setup failed at stage %s: %s", error.stage.value, error.cause)
                return SetupOutcome(ok=False, error=error)

            self.status = SetupStatus.SUCCEEDED
            log.info("Setup succeeded (demo_mode=%s)", self.state.is_demo_mode)
        finally:
            self.state.is_loading = False
            self._busy.release()

        if self._on_success is not None:
            self._on_success()
        return SetupOutcome(ok=True)

    def _write_config(self, mode: SetupMode) -> None:
        if isinstance(mode, ApiKeyMode):
            self._config.set_credential(mode.credential)
            self._config.set_configured(True)
            self._config.set_demo_mode(False)
        else:
            self._config.set_demo_mode(True)
            self._config.set_configured(True)
            self._config.set_analysis_enabled(False)

    @staticmethod
    def _run_stages(stages: List[Tuple[SetupStage, Callable[[], object]]]) -> Optional[SetupError]:
        for stage, step in stages:
            try:
                step()
            except Exception as e:
                return SetupError(stage=stage, cause=str(e) or e.__class__.__name__)
        return None
