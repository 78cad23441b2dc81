"""In-process Python sandbox.

Runs submitted source in a fresh namespace whose ``print`` is bound to a
caller-supplied sink, so nothing global (``sys.stdout``, ``builtins.print``)
is patched or restored around a run.

The source is compiled with top-level ``await`` allowed.  It runs on a worker
thread with its own event loop, which keeps the service loop free while a
program executes.  There is no isolation beyond a separate namespace: the
program has the same privileges as the service process, and there is no
timeout or cancellation once started.
"""

from __future__ import annotations

import ast
import asyncio
import builtins
import inspect
import json
from collections.abc import Callable
from functools import partial
from types import CodeType
from typing import Any

from anyio import to_thread

OutputSink = Callable[[str], None]

PROGRAM_FILENAME = "<program>"


class ProgramExit(Exception):  # noqa: N818
    """Raised when a program calls ``exit()``/``sys.exit()`` with a failure status."""

    def __init__(self, status: object) -> None:
        super().__init__(f"Program exited with status {status}")
        self.status = status


class ProgramError(Exception):
    """A program raised something that is not an ``Exception`` (``KeyboardInterrupt``, ``GeneratorExit``...)."""


def format_value(value: Any) -> str:
    """Render one printed value: containers as indented JSON, the rest via ``str``."""
    if isinstance(value, dict | list | tuple):
        try:
            return json.dumps(value, indent=2, default=str)
        except (TypeError, ValueError):
            return repr(value)
    return str(value)


def make_print(sink: OutputSink) -> Callable[..., None]:
    """Build a ``print`` replacement that emits one line per call into *sink*."""

    def _print(
        *args: Any,
        sep: str | None = " ",
        end: str | None = "\n",
        file: Any = None,
        flush: bool = False,
    ) -> None:
        sink((" " if sep is None else sep).join(format_value(arg) for arg in args))

    return _print


class PythonSandbox:
    """Executes Python source with captured output."""

    def compile(self, source: str) -> CodeType:
        """Compile *source*.  Raises ``SyntaxError`` for invalid programs."""
        return compile(source, PROGRAM_FILENAME, "exec", flags=ast.PyCF_ALLOW_TOP_LEVEL_AWAIT, dont_inherit=True)

    async def execute(self, source: str, sink: OutputSink) -> None:
        """Run *source* to completion, sending each printed line to *sink*.

        Exceptions raised by the program propagate to the caller unchanged.
        """
        code = self.compile(source)
        await to_thread.run_sync(partial(_run_code, code, sink))


def _run_code(code: CodeType, sink: OutputSink) -> None:
    namespace: dict[str, Any] = {
        "__name__": "__main__",
        "__builtins__": builtins,
        "print": make_print(sink),
    }
    try:
        result = eval(code, namespace)  # noqa: S307
        if inspect.iscoroutine(result):
            asyncio.run(result)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            raise ProgramExit(exc.code) from None
    except Exception:
        raise
    except BaseException as exc:
        raise ProgramError(str(exc) or type(exc).__name__) from exc
