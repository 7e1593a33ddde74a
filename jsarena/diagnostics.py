"""
Diagnostics collection and display.

``Diagnostics`` accumulates the lexical and syntax errors of one parse call.
``format_error`` renders one error against the source it was found in; it
is a pure function of its arguments.
"""

from typing import Iterable, Iterator, List

from .lexer.tokens import SourceLocation
from .lexer.errors import SourceError


class Diagnostics:
    """Error sink shared by the lexer and the parser for one parse call."""

    def __init__(self):
        self._errors: List[SourceError] = []
        self._seen = set()

    def add(self, error: SourceError):
        """Record an error; an identical span/code pair is only kept once."""
        key = (error.span, error.code)
        if key in self._seen:
            return
        self._seen.add(key)
        self._errors.append(error)

    def extend(self, errors: Iterable[SourceError]):
        for error in errors:
            self.add(error)

    def sorted(self) -> List[SourceError]:
        """Errors ordered by position; ties keep discovery order."""
        return sorted(self._errors, key=lambda error: (error.span.start, error.span.end))

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[SourceError]:
        return iter(self._errors)


def format_error(error: SourceError, source: str, filename: str = "<input>") -> str:
    """
    Render an error with its location and the offending source line.

    Example::

        error[P001]: Unexpected token ')', expected an identifier
          --> <input>:1:5
           |
         1 | var );
           |     ^
           = help: The parser expected an identifier at this position.
    """
    diagnostic = error.diagnostic
    span = diagnostic.span
    location = SourceLocation.from_offset(source, span.start, filename)

    line_start = source.rfind('\n', 0, span.start) + 1
    line_end = source.find('\n', span.start)
    if line_end == -1:
        line_end = len(source)
    line_text = source[line_start:line_end].rstrip('\r')

    underline_start = span.start - line_start
    underline_width = max(1, min(span.end, line_start + len(line_text)) - span.start)

    gutter = " " * len(str(location.line))
    code = f"[{diagnostic.code}]" if diagnostic.code else ""

    lines = [
        f"{diagnostic.severity}{code}: {diagnostic.message}",
        f"{gutter}--> {location}",
        f"{gutter} |",
        f"{location.line} | {line_text}",
        f"{gutter} | {' ' * underline_start}{'^' * underline_width}",
    ]
    if diagnostic.help_text:
        lines.append(f"{gutter} = help: {diagnostic.help_text}")
    return "\n".join(lines)


def format_errors(errors: Iterable[SourceError], source: str, filename: str = "<input>") -> str:
    return "\n\n".join(format_error(error, source, filename) for error in errors)
