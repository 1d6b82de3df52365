"""
CodeMentor - Pydantic Models
Shared data models for analysis results, persisted sessions and API payloads.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from enum import Enum


class AnalysisMode(str, Enum):
    """The four analyses a user can request."""
    EXPLAIN = "explain"
    FLOWCHART = "flowchart"
    DEBUG = "debug"
    RUN = "run"


class DifficultyLevel(str, Enum):
    """Level of the student the answer is written for."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SupportedLanguage(str, Enum):
    """Source languages accepted by the editor."""
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    PHP = "php"
    HTML = "html"

    @property
    def is_markup(self) -> bool:
        return self is SupportedLanguage.HTML


class Severity(str, Enum):
    """How bad a reported bug is."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class RunStatus(str, Enum):
    """Lifecycle of the latest request for one mode."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class WireModel(BaseModel):
    """Base for payloads exchanged with the AI backend (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Analysis Results
# ============================================================================

class LineExplanation(WireModel):
    """Explanation of a single source line."""
    line_number: int = Field(..., ge=1)
    code: str
    explanation: str
    state_changes: Optional[str] = None


class ExplanationResult(WireModel):
    """Line-by-line explanation of a snippet."""
    summary: str
    lines: List[LineExplanation]


class FlowchartResult(WireModel):
    """Mermaid graph describing the control flow of a snippet."""
    mermaid_code: str
    summary: str


class BugReport(WireModel):
    """One defect found during review, with the argument for why it is wrong."""
    bug_location: str
    description: str
    argument: str
    fix: str
    severity: Severity


class DebugResult(WireModel):
    """Bug review; an empty bug list means no defects were found."""
    general_advice: str
    bugs: List[BugReport]


class ExecutionResult(WireModel):
    """Console output of a simulated run."""
    output: str
    is_error: bool


# ============================================================================
# Persisted Session
# ============================================================================

class PersistedSession(BaseModel):
    """Durable snapshot of the editor state."""
    code: str
    language: SupportedLanguage
    mode: AnalysisMode

    model_config = ConfigDict(frozen=True)


# ============================================================================
# API Models
# ============================================================================

class CodeUpdate(BaseModel):
    """New editor contents."""
    code: str = Field(..., description="Current source code in the editor")


class ModeUpdate(BaseModel):
    """Analysis mode selection."""
    mode: AnalysisMode


class DifficultyUpdate(BaseModel):
    """Difficulty level selection."""
    difficulty: DifficultyLevel


class LanguageChangeRequest(BaseModel):
    """Language switch together with the user's answer to the reset prompt."""
    language: SupportedLanguage
    confirm: bool = Field(
        default=False,
        description="Whether the user accepted discarding the current code"
    )


class ModeStateView(BaseModel):
    """Status, result and error of one mode."""
    status: RunStatus
    result: Optional[Dict] = None
    error: Optional[str] = None


class SessionView(BaseModel):
    """Everything the presentation layer renders from."""
    mode: AnalysisMode
    language: SupportedLanguage
    difficulty: DifficultyLevel
    code: str
    loading: bool
    error: Optional[str] = None
    storage_warning: Optional[str] = None
    modes: Dict[AnalysisMode, ModeStateView]
