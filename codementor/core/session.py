"""
CodeMentor - Session Controller
Owns the editor state and the per-mode analysis state, runs analyses through
the gateway and mirrors (code, language, mode) to the preference store.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

from pydantic import BaseModel

from codementor.config import Settings
from codementor.core.ai_engine import AnalysisGateway
from codementor.core.backends import create_backend
from codementor.core.errors import AnalysisError
from codementor.core.preferences import JsonFileStorage, PreferenceStore
from codementor.core.templates import get_template
from codementor.models import (
    AnalysisMode,
    DifficultyLevel,
    ModeStateView,
    PersistedSession,
    RunStatus,
    SessionView,
    SupportedLanguage,
)

logger = logging.getLogger(__name__)


ConfirmPrompt = Callable[[str], Awaitable[bool]]

LANGUAGE_SWITCH_PROMPT = (
    "Switching language will discard the current code and reset the editor "
    "to the default template. Continue?"
)


@dataclass
class ModeState:
    """Latest request outcome for one mode."""
    status: RunStatus = RunStatus.IDLE
    result: Optional[BaseModel] = None
    error: Optional[str] = None
    # Bumped on every request and reset; only the latest generation may write
    generation: int = 0


class SessionController:
    """
    Single owner of session state.

    Analyses for different modes may overlap. Each mode keeps a generation
    counter, and a response is applied only if no newer request (or language
    reset) happened for that mode while it was in flight.
    """

    def __init__(
        self,
        gateway: AnalysisGateway,
        preferences: PreferenceStore,
        difficulty: DifficultyLevel = DifficultyLevel.BEGINNER
    ):
        self.gateway = gateway
        self.preferences = preferences
        saved = preferences.load()
        self._code = saved.code
        self._language = saved.language
        self._mode = saved.mode
        self._difficulty = DifficultyLevel(difficulty)
        self._modes: Dict[AnalysisMode, ModeState] = {mode: ModeState() for mode in AnalysisMode}
        self.storage_warning: Optional[str] = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def code(self) -> str:
        return self._code

    @property
    def language(self) -> SupportedLanguage:
        return self._language

    @property
    def mode(self) -> AnalysisMode:
        return self._mode

    @property
    def difficulty(self) -> DifficultyLevel:
        return self._difficulty

    @property
    def loading(self) -> bool:
        return self._modes[self._mode].status is RunStatus.LOADING

    @property
    def error(self) -> Optional[str]:
        return self._modes[self._mode].error

    @property
    def result(self) -> Optional[BaseModel]:
        return self._modes[self._mode].result

    def state_for(self, mode: AnalysisMode) -> ModeState:
        return self._modes[AnalysisMode(mode)]

    def snapshot(self) -> PersistedSession:
        return PersistedSession(code=self._code, language=self._language, mode=self._mode)

    def view(self) -> SessionView:
        """Build the view the presentation layer renders from."""
        modes = {
            mode: ModeStateView(
                status=state.status,
                result=state.result.model_dump(mode="json", by_alias=True) if state.result is not None else None,
                error=state.error
            )
            for mode, state in self._modes.items()
        }
        return SessionView(
            mode=self._mode,
            language=self._language,
            difficulty=self._difficulty,
            code=self._code,
            loading=self.loading,
            error=self.error,
            storage_warning=self.storage_warning,
            modes=modes
        )

    # ------------------------------------------------------------------
    # Editor state
    # ------------------------------------------------------------------

    def _persist(self) -> None:
        self.storage_warning = self.preferences.save(self.snapshot())

    def set_code(self, code: str) -> None:
        """Editor change notification."""
        if code == self._code:
            return
        self._code = code
        self._persist()

    def set_mode(self, mode: AnalysisMode) -> None:
        """Switch the presented mode. In-flight requests keep running."""
        mode = AnalysisMode(mode)
        if mode is self._mode:
            return
        self._mode = mode
        self._persist()

    def set_difficulty(self, difficulty: DifficultyLevel) -> None:
        self._difficulty = DifficultyLevel(difficulty)

    async def change_language(self, language: SupportedLanguage, confirm: ConfirmPrompt) -> bool:
        """
        Switch language after asking the user.
        Accepting resets the code to the language template and clears every
        mode's result and error. Declining changes nothing.
        """
        language = SupportedLanguage(language)
        if not await confirm(LANGUAGE_SWITCH_PROMPT):
            logger.debug("Language switch to %s declined", language.value)
            return False

        self._language = language
        self._code = get_template(language)
        for state in self._modes.values():
            state.generation += 1
            state.status = RunStatus.IDLE
            state.result = None
            state.error = None
        self._persist()
        logger.info("Language switched to %s", language.value)
        return True

    def dismiss_error(self) -> None:
        self._modes[self._mode].error = None

    def dismiss_storage_warning(self) -> None:
        self.storage_warning = None

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    async def run_analysis(self) -> RunStatus:
        """
        Run the current mode on the current code.
        Blank code is ignored. Returns the mode's status afterwards.
        """
        mode = self._mode
        state = self._modes[mode]
        if not self._code.strip():
            return state.status

        state.generation += 1
        generation = state.generation
        state.status = RunStatus.LOADING
        state.error = None

        try:
            result = await self.gateway.analyze(mode, self._code, self._difficulty, self._language)
        except AnalysisError as e:
            self._apply_failure(mode, generation, str(e))
        except Exception as e:
            logger.exception("Unexpected failure during %s analysis", mode.value)
            self._apply_failure(mode, generation, f"Unexpected error: {e}")
        else:
            if generation == state.generation:
                state.status = RunStatus.SUCCEEDED
                state.result = result
                state.error = None
            else:
                logger.debug("Discarding stale %s result (generation %d)", mode.value, generation)
        return state.status

    def _apply_failure(self, mode: AnalysisMode, generation: int, message: str) -> None:
        state = self._modes[mode]
        if generation != state.generation:
            logger.debug("Discarding stale %s error (generation %d)", mode.value, generation)
            return
        # Keep the previous result; only a new success replaces it
        state.status = RunStatus.FAILED
        state.error = message


def create_session(settings: Optional[Settings] = None) -> SessionController:
    """Wire a session controller from settings (read from the environment by default)."""
    settings = settings or Settings.from_env()
    gateway = AnalysisGateway(
        create_backend(settings),
        model=settings.model,
        response_language=settings.response_language
    )
    preferences = PreferenceStore(JsonFileStorage(settings.storage_path))
    return SessionController(gateway, preferences)
