"""Execution adapter -- maps (language, source) to an ``ExecutionResult``.

Per-language behaviour is a tagged variant: every ``Language`` is bound to a
runner object, and ``ExecutionAdapter.execute`` dispatches on the tag.

- ``SandboxedRunner`` really executes the program (Python, in-process).
- ``InstructionalRunner`` executes nothing and explains that the language
  needs an external runtime.

Making another language executable means registering a new runner for it;
the adapter itself does not change.  The adapter never raises: user-code
exceptions and internal faults both become an error result.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from loguru import logger

from codeprep.hub.execution.sandbox import PythonSandbox
from codeprep.hub.models.enums import Language
from codeprep.hub.models.language import display_name
from codeprep.hub.models.workspace import ExecutionResult

NO_OUTPUT_MESSAGE = "Code executed successfully (no output)"

PERSONAL_SAVED_LINE = "Code saved to your workspace."
GROUP_SAVED_LINE = "Your code has been saved to the group."


def describe_error(exc: BaseException) -> str:
    """The message shown for a failed run; falls back to the exception type."""
    return str(exc) or type(exc).__name__


def error_result(exc: BaseException, lines: list[str] | None = None) -> ExecutionResult:
    message = describe_error(exc)
    return ExecutionResult(output=f"Error: {message}", is_error=True, error=message, lines=lines or [])


def instructional_message(language: Language, *, group_context: bool = False) -> str:
    saved_line = GROUP_SAVED_LINE if group_context else PERSONAL_SAVED_LINE
    return (
        f"{display_name(language)} execution requires a backend runtime.\n\n"
        "To run this code:\n"
        "1. Copy it to a local environment\n"
        "2. Or integrate with a code execution API\n\n"
        f"{saved_line}"
    )


class LanguageRunner(Protocol):
    """Strategy for one language."""

    async def run(self, source: str, *, group_context: bool = False) -> ExecutionResult: ...


class SandboxedRunner:
    """Runs the program and reports its captured output."""

    def __init__(self, sandbox: PythonSandbox | None = None) -> None:
        self._sandbox = sandbox or PythonSandbox()

    async def run(self, source: str, *, group_context: bool = False) -> ExecutionResult:
        lines: list[str] = []
        try:
            await self._sandbox.execute(source, lines.append)
        except Exception as exc:
            return error_result(exc, lines)
        return ExecutionResult(output="\n".join(lines) or NO_OUTPUT_MESSAGE, lines=lines)


class InstructionalRunner:
    """Placeholder for languages without a runtime: returns a fixed explanation."""

    def __init__(self, language: Language) -> None:
        self.language = language

    async def run(self, source: str, *, group_context: bool = False) -> ExecutionResult:
        return ExecutionResult(output=instructional_message(self.language, group_context=group_context))


def default_runners() -> dict[Language, LanguageRunner]:
    """Python is executable in-process; every other language is instructional."""
    runners: dict[Language, LanguageRunner] = {lang: InstructionalRunner(lang) for lang in Language}
    runners[Language.PYTHON] = SandboxedRunner()
    return runners


class ExecutionAdapter:
    """Dispatches a run to the runner registered for its language."""

    def __init__(self, runners: Mapping[Language, LanguageRunner] | None = None) -> None:
        self._runners: dict[Language, LanguageRunner] = dict(runners) if runners is not None else default_runners()

    def register(self, language: Language, runner: LanguageRunner) -> None:
        self._runners[language] = runner

    def runner_for(self, language: Language) -> LanguageRunner:
        """Raises ``KeyError`` if no runner is registered for *language*."""
        return self._runners[Language(language)]

    @property
    def executable_languages(self) -> list[Language]:
        return [lang for lang, runner in self._runners.items() if not isinstance(runner, InstructionalRunner)]

    async def execute(self, language: Language, source: str, *, group_context: bool = False) -> ExecutionResult:
        try:
            runner = self.runner_for(language)
            result = await runner.run(source, group_context=group_context)
        except Exception as exc:
            logger.exception("Execution adapter fault (language={})", language)
            return error_result(exc)

        logger.debug("Executed {} program (error={}, lines={})", language, result.is_error, len(result.lines))
        return result
