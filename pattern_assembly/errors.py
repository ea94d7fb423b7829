"""Structured error kinds and the single reporting funnel for assembly runs.

Leaf components raise one of the :class:`AssemblyError` subclasses below (or
let a library exception escape); orchestration code hands every failure to
:class:`ErrorHandler`, which decides between the user callback, a console
report, and terminating the process.

Examples
--------
>>> from pattern_assembly.errors import ErrorHandler, PartialNotFoundError
>>> seen = []
>>> handler = ErrorHandler(on_error=seen.append)
>>> handler.handle(PartialNotFoundError("No partial 'card'.", reason="card"))
>>> seen[0].name
'PartialNotFoundError'
"""

from __future__ import annotations

import json
import sys
import typing as typ
from pathlib import Path

from jinja2 import TemplateError, TemplateNotFound, TemplateSyntaxError
from rich.console import Console
from ruamel.yaml import YAMLError

from ._constants import ERROR_LABEL

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class AssemblyError(Exception):
    """Base class for every structured failure raised during a run.

    Parameters
    ----------
    message : str
        Human-readable description.
    reason : str, optional
        Short token naming the cause (for example ``"missing-template"``).
    path : Path or str, optional
        File the failure relates to.
    name : str, optional
        Overrides the error kind; defaults to the class name.
    """

    def __init__(
        self,
        message: str = "An error occurred",
        *,
        reason: str = "",
        path: Path | str | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.path = Path(path) if path is not None else None
        self.name = name or type(self).__name__

    def as_dict(self) -> dict[str, str | None]:
        """Return the structured form passed to reporting."""
        return {
            "name": self.name,
            "reason": self.reason,
            "message": self.message,
            "path": str(self.path) if self.path is not None else None,
        }


class ConfigurationError(AssemblyError):
    """Raised when a user option is missing, unknown, or malformed."""


class FileReadError(AssemblyError):
    """Raised when an input file cannot be read."""


class ContentParseError(AssemblyError):
    """Raised for malformed front matter, data files, or unusable catalog entries."""


class PartialNotFoundError(AssemblyError):
    """Raised when a template references an unregistered partial id."""


class CyclicIncludeError(AssemblyError):
    """Raised when a partial includes itself or nesting runs too deep."""


class TemplateCompileError(AssemblyError):
    """Raised when a partial's source is not a valid template."""


class TemplateRenderError(AssemblyError):
    """Raised when executing a compiled partial fails."""


def coerce_error(exc: BaseException) -> AssemblyError:
    """Normalize any exception into an :class:`AssemblyError`."""
    match exc:
        case AssemblyError():
            return exc
        case TemplateNotFound():
            error: AssemblyError = PartialNotFoundError(
                f"No partial named '{exc.name}' is registered.", reason=str(exc.name)
            )
        case OSError():
            filename = getattr(exc, "filename", None)
            error = FileReadError(
                str(exc), reason=type(exc).__name__, path=filename
            )
        case UnicodeDecodeError():
            error = FileReadError(str(exc), reason="encoding")
        case RecursionError():
            error = CyclicIncludeError(
                "Template nesting exceeded the interpreter recursion limit.",
                reason="recursion",
            )
        case YAMLError() | json.JSONDecodeError():
            error = ContentParseError(str(exc), reason=type(exc).__name__)
        case TemplateSyntaxError():
            error = TemplateCompileError(
                str(exc), reason="syntax", path=exc.filename
            )
        case TemplateError():
            error = TemplateRenderError(str(exc), reason=type(exc).__name__)
        case _:
            error = AssemblyError(str(exc) or repr(exc), name="Error")
    error.__cause__ = exc
    return error


class ErrorHandler:
    """Route failures to a callback, the console, or process termination.

    At most one terminal action happens per error: when neither ``on_error``
    nor ``log_errors`` is configured the error is printed and the process
    exits with status 1.
    """

    def __init__(
        self,
        on_error: cabc.Callable[[AssemblyError], object] | None = None,
        *,
        log_errors: bool = False,
        console: Console | None = None,
    ) -> None:
        self.on_error = on_error
        self.log_errors = log_errors
        self.console = console or Console(stderr=True)

    def handle(self, exc: BaseException) -> None:
        """Report ``exc`` according to the configured policy."""
        error = coerce_error(exc)
        should_exit = True
        if callable(self.on_error):
            self.on_error(error)
            should_exit = False
        if self.log_errors:
            self._report(error)
            should_exit = False
        if should_exit:
            self._report(error)
            sys.exit(1)

    def _report(self, error: AssemblyError) -> None:
        self.console.print(
            f"Error ({ERROR_LABEL}): {error.message}",
            style="bold red",
            markup=False,
            highlight=False,
        )
        details = [error.name]
        if error.reason:
            details.append(f"reason: {error.reason}")
        if error.path is not None:
            details.append(f"path: {error.path}")
        self.console.print("  " + ", ".join(details), markup=False, highlight=False)


__all__ = [
    "AssemblyError",
    "ConfigurationError",
    "ContentParseError",
    "CyclicIncludeError",
    "ErrorHandler",
    "FileReadError",
    "PartialNotFoundError",
    "TemplateCompileError",
    "TemplateRenderError",
    "coerce_error",
]
