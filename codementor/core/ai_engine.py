"""
CodeMentor - Analysis Gateway
Builds one schema-constrained request per analysis mode, sends it through an
injected AI backend and validates the payload into a typed result.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from codementor.config import DEFAULT_MODELS, PROVIDER_GEMINI
from codementor.core.backends import AIBackend, AIRequest
from codementor.core.errors import (
    AnalysisError,
    ConfigurationError,
    EmptyResponseError,
    MalformedResponseError,
    TransportError,
)
from codementor.core.schemas import get_schema, parse_response
from codementor.models import (
    AnalysisMode,
    DebugResult,
    DifficultyLevel,
    ExecutionResult,
    ExplanationResult,
    FlowchartResult,
    SupportedLanguage,
)

logger = logging.getLogger(__name__)


DIFFICULTY_GUIDANCE = {
    DifficultyLevel.BEGINNER: "Use analogies and avoid complicated jargon.",
    DifficultyLevel.INTERMEDIATE: "Discuss control flow and basic efficiency.",
    DifficultyLevel.ADVANCED: "Discuss memory, complexity and optimization.",
}


def sanitize_mermaid(mermaid_code: str) -> str:
    """Strip markdown fence markers from a Mermaid definition.

    The diagram renderer rejects fenced input, so this runs on every
    flowchart result. Applying it twice gives the same text as once.
    """
    return mermaid_code.replace("```mermaid", "").replace("```", "").strip()


def _code_block(code: str, language: Optional[SupportedLanguage]) -> str:
    tag = SupportedLanguage(language).value if language else ""
    return f"```{tag}\n{code}\n```"


class AnalysisGateway:
    """
    Stateless entry point for the four analyses.
    Every failure is raised as an ``AnalysisError`` subclass whose message is
    meant to be shown to the user as-is.
    """

    def __init__(
        self,
        backend: AIBackend,
        model: str = DEFAULT_MODELS[PROVIDER_GEMINI],
        response_language: str = "English"
    ):
        self.backend = backend
        self.model = model
        self.response_language = response_language

    async def _request(
        self,
        mode: AnalysisMode,
        contents: str,
        system_instruction: str
    ) -> BaseModel:
        """Send a request for ``mode`` and return the validated result."""
        try:
            if not self.backend.is_configured():
                raise ConfigurationError(f"API key missing for {self.backend.provider}")

            request = AIRequest(
                model=self.model,
                contents=contents,
                response_schema=get_schema(mode),
                system_instruction=system_instruction
            )
            try:
                payload = await self.backend.generate(request)
            except AnalysisError:
                raise
            except Exception as e:
                raise TransportError(self.backend.provider, str(e)) from e

            if not payload or not payload.strip():
                raise EmptyResponseError(mode.value)

            parsed = parse_response(mode, payload)
            if not parsed.ok:
                raise MalformedResponseError(mode.value, parsed.error or "invalid payload")
            return parsed.value  # type: ignore[return-value]
        except AnalysisError as e:
            logger.error("%s analysis failed (%s): %s", mode.value, e.kind, e)
            raise

    async def explain_lines(
        self,
        code: str,
        level: DifficultyLevel,
        language: Optional[SupportedLanguage] = None
    ) -> ExplanationResult:
        """Line-by-line explanation tailored to the difficulty level."""
        level = DifficultyLevel(level)
        contents = (
            f"Analyze this code for a {level.value} student. "
            f"Explain it line by line in {self.response_language}.\n\n"
            f"Code:\n{_code_block(code, language)}"
        )
        system_instruction = (
            "You are a helpful computer science tutor. "
            f"Match your language to the student's level: {level.value}. "
            f"{DIFFICULTY_GUIDANCE[level]} "
            f"Write every explanation in {self.response_language}."
        )
        result = await self._request(AnalysisMode.EXPLAIN, contents, system_instruction)
        return result  # type: ignore[return-value]

    async def generate_flowchart(
        self,
        code: str,
        level: DifficultyLevel,
        language: Optional[SupportedLanguage] = None
    ) -> FlowchartResult:
        """Mermaid flowchart of the code's logic, with fences removed."""
        level = DifficultyLevel(level)
        contents = (
            "Create a Mermaid.js flowchart that represents the logic of this code. "
            f"Include a summary in {self.response_language} written for a {level.value} student.\n\n"
            f"Code:\n{_code_block(code, language)}"
        )
        system_instruction = (
            "You are a visualization expert. Produce valid Mermaid.js graph syntax (graph TD).\n"
            "CRITICAL RULE: every node label MUST be wrapped in double quotes.\n"
            'Example: A["Start"] --> B["Is n <= 1?"]\n'
            f"Do not include markdown backticks. Use {self.response_language} for diagram labels."
        )
        result = await self._request(AnalysisMode.FLOWCHART, contents, system_instruction)
        assert isinstance(result, FlowchartResult)
        return result.model_copy(update={"mermaid_code": sanitize_mermaid(result.mermaid_code)})

    async def analyze_bugs(
        self,
        code: str,
        level: DifficultyLevel,
        language: Optional[SupportedLanguage] = None
    ) -> DebugResult:
        """Argumentative bug review. An empty bug list is a valid answer."""
        level = DifficultyLevel(level)
        contents = (
            "Find the bugs in this code. Be argumentative and strict but educational. "
            f"Explain why the code fails. Language: {self.response_language}.\n\n"
            f"Code:\n{_code_block(code, language)}"
        )
        system_instruction = (
            f"You are a senior software engineer reviewing code for a {level.value} student.\n"
            "Do not just point out mistakes; give a logical argument for why the current "
            "implementation fails (runtime error, logic bug or poor performance).\n"
            f"Be constructive. Use {self.response_language}."
        )
        result = await self._request(AnalysisMode.DEBUG, contents, system_instruction)
        return result  # type: ignore[return-value]

    async def run_code_simulation(
        self,
        code: str,
        language: SupportedLanguage,
        level: DifficultyLevel = DifficultyLevel.BEGINNER
    ) -> ExecutionResult:
        """
        Simulate running the code and return its console output.
        Markup is never sent to the backend: the source itself is the output
        and the UI renders it in a sandbox.
        """
        language = SupportedLanguage(language)
        if language.is_markup:
            return ExecutionResult(output=code, is_error=False)

        contents = (
            f"Simulate the execution of this {language.value} code. Give the OUTPUT text "
            "exactly as it would appear in the console/terminal.\n\n"
            f"Code:\n{_code_block(code, language)}"
        )
        system_instruction = (
            "You are a code compiler and interpreter. Run the code mentally and produce "
            "the pure OUTPUT only.\n"
            "- Do not give explanations.\n"
            "- Do not use markdown backticks.\n"
            "- If there is a syntax or runtime error, output the error message the way a "
            "real compiler would and set isError to true.\n"
            "- If the code asks for user input, assume standard/dummy input or skip it when "
            "not critical, and add the note [Waiting for input]."
        )
        result = await self._request(AnalysisMode.RUN, contents, system_instruction)
        return result  # type: ignore[return-value]

    async def analyze(
        self,
        mode: AnalysisMode,
        code: str,
        level: DifficultyLevel,
        language: SupportedLanguage
    ) -> BaseModel:
        """Dispatch to the operation bound to ``mode``."""
        mode = AnalysisMode(mode)
        if mode is AnalysisMode.EXPLAIN:
            return await self.explain_lines(code, level, language)
        if mode is AnalysisMode.FLOWCHART:
            return await self.generate_flowchart(code, level, language)
        if mode is AnalysisMode.DEBUG:
            return await self.analyze_bugs(code, level, language)
        return await self.run_code_simulation(code, language, level)
