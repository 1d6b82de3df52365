"""
CodeMentor - Response Schemas
One output contract per analysis mode, sent to the AI backend with every
request, plus the validating parser that turns a raw payload back into the
matching result model.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from codementor.models import (
    AnalysisMode,
    DebugResult,
    ExecutionResult,
    ExplanationResult,
    FlowchartResult,
    Severity,
)


EXPLANATION_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "STRING",
            "description": "Short summary of what the code does."
        },
        "lines": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "lineNumber": {"type": "INTEGER"},
                    "code": {"type": "STRING"},
                    "explanation": {
                        "type": "STRING",
                        "description": "Simple, clear explanation matched to the difficulty level."
                    },
                    "stateChanges": {
                        "type": "STRING",
                        "description": "Variable changes if any, e.g. 'x becomes 5'."
                    }
                },
                "required": ["lineNumber", "code", "explanation"]
            }
        }
    },
    "required": ["summary", "lines"]
}

FLOWCHART_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "mermaidCode": {
            "type": "STRING",
            "description": "Valid Mermaid.js graph definition (e.g. starting with graph TD)."
        },
        "summary": {
            "type": "STRING",
            "description": "Description of the logic flow."
        }
    },
    "required": ["mermaidCode", "summary"]
}

DEBUG_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "generalAdvice": {
            "type": "STRING",
            "description": "Overall advice about the quality of the code."
        },
        "bugs": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "bugLocation": {"type": "STRING", "description": "Line number or function name."},
                    "description": {"type": "STRING", "description": "What the bug is."},
                    "argument": {
                        "type": "STRING",
                        "description": "Argument for WHY this is a bug and how it breaks the logic."
                    },
                    "fix": {"type": "STRING", "description": "Corrected code snippet."},
                    "severity": {
                        "type": "STRING",
                        "format": "enum",
                        "enum": [severity.value for severity in Severity]
                    }
                },
                "required": ["bugLocation", "description", "argument", "fix", "severity"]
            }
        }
    },
    "required": ["generalAdvice", "bugs"]
}

EXECUTION_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "output": {"type": "STRING", "description": "Output from stdout or the error message."},
        "isError": {"type": "BOOLEAN", "description": "Whether execution produced an error."}
    },
    "required": ["output", "isError"]
}


RESPONSE_SCHEMAS: Dict[AnalysisMode, Dict[str, Any]] = {
    AnalysisMode.EXPLAIN: EXPLANATION_SCHEMA,
    AnalysisMode.FLOWCHART: FLOWCHART_SCHEMA,
    AnalysisMode.DEBUG: DEBUG_SCHEMA,
    AnalysisMode.RUN: EXECUTION_SCHEMA,
}

RESULT_MODELS: Dict[AnalysisMode, Type[BaseModel]] = {
    AnalysisMode.EXPLAIN: ExplanationResult,
    AnalysisMode.FLOWCHART: FlowchartResult,
    AnalysisMode.DEBUG: DebugResult,
    AnalysisMode.RUN: ExecutionResult,
}


@dataclass
class ParsedResponse:
    """Outcome of validating a backend payload: a result or an error, never both."""
    ok: bool
    value: Optional[BaseModel] = None
    error: Optional[str] = None


def get_schema(mode: AnalysisMode) -> Dict[str, Any]:
    """Get the response schema for a mode."""
    return RESPONSE_SCHEMAS[AnalysisMode(mode)]


def parse_response(mode: AnalysisMode, payload: str) -> ParsedResponse:
    """Validate a JSON payload against the result model of ``mode``."""
    model = RESULT_MODELS[AnalysisMode(mode)]
    try:
        value = model.model_validate_json(payload)
    except ValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", str(e))
        detail = f"{location}: {message}" if location else message
        if len(errors) > 1:
            detail += f" (+{len(errors) - 1} more)"
        return ParsedResponse(ok=False, error=detail)
    return ParsedResponse(ok=True, value=value)
