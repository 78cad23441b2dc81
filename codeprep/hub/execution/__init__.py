"""Code execution for the editor.

- **sandbox**: In-process Python execution with an injected ``print`` sink
- **adapter**: Per-language dispatch (sandboxed vs. instructional runners)
"""

from codeprep.hub.execution.adapter import (
    NO_OUTPUT_MESSAGE,
    ExecutionAdapter,
    InstructionalRunner,
    LanguageRunner,
    SandboxedRunner,
    instructional_message,
)
from codeprep.hub.execution.sandbox import PythonSandbox

__all__ = [
    "NO_OUTPUT_MESSAGE",
    "ExecutionAdapter",
    "InstructionalRunner",
    "LanguageRunner",
    "PythonSandbox",
    "SandboxedRunner",
    "instructional_message",
]
