# SPDX-License-Identifier: MIT
"""Custom exceptions for luabuild.

All recoverable luabuild exceptions inherit from LuabuildError.
Filesystem failures are not wrapped: they surface as the OSError
raised by the operating system.
"""

from __future__ import annotations

from collections.abc import Sequence


class LuabuildError(Exception):
    """Base class for all luabuild exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ToolchainError(LuabuildError):
    """Error while locating, probing or running the C toolchain."""


class ToolNotFoundError(ToolchainError):
    """Required tool was not found.

    Attributes:
        tool: The name of the tool that was not found.
    """

    def __init__(self, tool: str, candidates: Sequence[str] = ()) -> None:
        self.tool = tool
        self.candidates = list(candidates)
        message = f"tool not found: {tool}"
        if self.candidates:
            message += f" (tried {', '.join(self.candidates)})"
        super().__init__(message)


class CompileError(ToolchainError):
    """A compiler or archiver invocation failed.

    Attributes:
        command: The command line that was run.
        returncode: Exit status of the command.
        output: Combined stdout/stderr captured from the command.
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        if output.strip():
            message = f"{message}\n{output.rstrip()}"
        super().__init__(message)


class BuildAborted(SystemExit):
    """Unrecoverable build failure raised by the convenience forms.

    The message is the text of the error that caused the abort, so the
    interpreter prints it and exits with status 1 when it is not caught.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
