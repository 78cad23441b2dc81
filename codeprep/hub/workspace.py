"""Editor workspace state.

A ``WorkspaceState`` is the single source of truth for what one editor
shows: the active program (or none), the unsaved code buffer, the selected
language and the output of the last run.  It is an explicit object -- the
registry owns one per open editor and routers pass it around -- so there is
no process-wide editor store.

Two small state machines:

- selection: no-active-program <-> active-program
- execution: idle -> running -> idle (``is_running`` is cleared on every
  exit path of ``run``)

Nothing here is persisted.  Only ``save`` writes the buffer back to the
program row; selecting another program silently discards unsaved edits.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from codeprep.hub.execution.adapter import error_result
from codeprep.hub.managers.activities import record_activity
from codeprep.hub.managers.programs import ProgramNotFoundError, save_program_code
from codeprep.hub.models.enums import ActivityAction, Language, NoticeLevel, TargetType
from codeprep.hub.models.language import default_code
from codeprep.hub.models.program import ProgramIndex
from codeprep.hub.models.workspace import ExecutionResult, Notice, WorkspaceSnapshot

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from codeprep.hub.context import UserContext
    from codeprep.hub.execution.adapter import ExecutionAdapter

WELCOME_CODE = '// Start coding here...\nconsole.log("Hello, CodePrep Hub!");'


class WorkspaceState:
    """Editor state for one user, optionally scoped to a group workspace."""

    def __init__(
        self,
        editor_id: str | None = None,
        *,
        user: UserContext | None = None,
        group_id: str | None = None,
        default_language: Language = Language.JAVASCRIPT,
    ) -> None:
        self.editor_id = editor_id or uuid.uuid4().hex
        self.user = user
        self.group_id = group_id
        self.default_language = default_language

        self.active_program: ProgramIndex | None = None
        self.language: Language = default_language
        self.code: str = WELCOME_CODE if default_language == Language.JAVASCRIPT else default_code(default_language)

        self.output: str = ""
        self.is_running: bool = False
        self.error: str | None = None

        self._notices: list[Notice] = []
        self._log = logger.bind(editor_id=self.editor_id)

    # -- User binding ----------------------------------------------------------

    def bind_user(self, user: UserContext) -> None:
        self.user = user

    def unbind_user(self) -> None:
        self.user = None

    # -- Selection -------------------------------------------------------------

    def select_program(self, program: ProgramIndex) -> None:
        """Make *program* active; the buffer mirrors its persisted code and language."""
        self.active_program = program
        self.code = program.code
        self.language = program.language
        self.clear_output()

    def clear_active_program(self) -> None:
        """Drop the selection and reset the buffer to the default language's snippet."""
        self.active_program = None
        self.language = self.default_language
        self.code = default_code(self.default_language)
        self.clear_output()

    # -- Buffer ----------------------------------------------------------------

    def set_code(self, code: str) -> None:
        self.code = code

    def set_language(self, language: Language) -> None:
        """Switch language; the starter snippet replaces the buffer only with no active program."""
        self.language = Language(language)
        if self.active_program is None:
            self.code = default_code(self.language)

    # -- Output ----------------------------------------------------------------

    def clear_output(self) -> None:
        self.output = ""
        self.error = None

    async def run(self, adapter: ExecutionAdapter) -> ExecutionResult:
        """Execute the buffer and write the result into the output panel."""
        self.is_running = True
        self.clear_output()
        try:
            result = await adapter.execute(self.language, self.code, group_context=self.group_id is not None)
        except Exception as exc:
            self._log.exception("Run failed")
            result = error_result(exc)
        finally:
            self.is_running = False

        self.output = result.output
        self.error = result.error if result.is_error else None
        return result

    # -- Save ------------------------------------------------------------------

    async def save(self, db: AsyncSession) -> bool:
        """Write the buffer back to the active program.

        Returns ``False`` without touching the database when there is no active
        program or no bound user.  Storage rejections are reported through an
        error notice instead of raising; the buffer is left as it was.
        """
        program = self.active_program
        if program is None or self.user is None:
            return False

        try:
            row = await save_program_code(
                db,
                self.user.user_id,
                program.id,
                code=self.code,
                language=self.language if program.is_group_program else None,
            )
        except (LookupError, PermissionError, SQLAlchemyError) as exc:
            await db.rollback()
            self._log.warning("Save rejected for program {}: {!r}", program.id, exc)
            self.notify(NoticeLevel.ERROR, f"Failed to save: {_describe_save_error(exc)}")
            return False
        except Exception:
            await db.rollback()
            self._log.exception("Unexpected error saving program {}", program.id)
            self.notify(NoticeLevel.ERROR, "Failed to save: unexpected error")
            return False

        self.active_program = ProgramIndex.model_validate(row)
        self._log.info("Saved program {} ({} chars)", program.id, len(self.code))
        self.notify(NoticeLevel.SUCCESS, "Program saved")

        try:
            await record_activity(
                db,
                user_id=self.user.user_id,
                action=ActivityAction.EDITED,
                target_type=TargetType.PROGRAM,
                target_id=program.id,
                target_name=program.title,
                group_id=program.group_id if program.is_group_program else None,
            )
        except SQLAlchemyError:
            await db.rollback()
            self._log.warning("Could not record edit activity for program {}", program.id)
        return True

    # -- Notices ---------------------------------------------------------------

    def notify(self, level: NoticeLevel, message: str) -> None:
        self._notices.append(Notice(level=level, message=message))

    def drain_notices(self) -> list[Notice]:
        notices, self._notices = self._notices, []
        return notices

    # -- View ------------------------------------------------------------------

    def snapshot(self, *, drain: bool = True) -> WorkspaceSnapshot:
        return WorkspaceSnapshot(
            editor_id=self.editor_id,
            user_id=self.user.user_id if self.user else None,
            group_id=self.group_id,
            active_program=self.active_program,
            code=self.code,
            language=self.language,
            output=self.output,
            is_running=self.is_running,
            error=self.error,
            notices=self.drain_notices() if drain else list(self._notices),
        )


def _describe_save_error(exc: Exception) -> str:
    if isinstance(exc, ProgramNotFoundError):
        return "program no longer exists"
    if isinstance(exc, SQLAlchemyError):
        return "database error"
    return str(exc) or type(exc).__name__
