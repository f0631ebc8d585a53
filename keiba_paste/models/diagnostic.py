"""Diagnostic DTOs.

Every extractor returns its data together with the diagnostics collected
while reading the text. A result is successful iff none of its diagnostics
has error severity.
"""

from dataclasses import dataclass, field, replace
from typing import Generic, TypeVar

from keiba_paste.constants import SNIPPET_LIMIT
from keiba_paste.models.types import DiagnosticKind, Severity

T = TypeVar("T")


def bound_snippet(text: str | None, limit: int = SNIPPET_LIMIT) -> str | None:
    """生データを診断用に切り詰める"""
    if text is None:
        return None
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit]


@dataclass(frozen=True)
class Diagnostic:
    """One problem found while extracting a field.

    Attributes:
        kind: Which stage produced the diagnostic.
        field: The logical field name (e.g., "venue", "name", "winOdds").
        message: Human readable description.
        severity: "error" blocks success, "warning" does not.
        raw_snippet: The offending text, bounded in length.
        line_number: 1-based line number in the pasted block, if known.
    """

    kind: DiagnosticKind
    field: str
    message: str
    severity: Severity = "error"
    raw_snippet: str | None = None
    line_number: int | None = None

    @classmethod
    def error(
        cls,
        kind: DiagnosticKind,
        field: str,
        message: str,
        raw: str | None = None,
        line_number: int | None = None,
    ) -> "Diagnostic":
        return cls(kind, field, message, "error", bound_snippet(raw), line_number)

    @classmethod
    def warning(
        cls,
        kind: DiagnosticKind,
        field: str,
        message: str,
        raw: str | None = None,
        line_number: int | None = None,
    ) -> "Diagnostic":
        return cls(kind, field, message, "warning", bound_snippet(raw), line_number)

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def downgraded(self) -> "Diagnostic":
        """同じ内容の警告を返す"""
        return replace(self, severity="warning")


@dataclass(frozen=True)
class ExtractionResult(Generic[T]):
    """Result of one extraction call.

    Attributes:
        data: The extracted value, or None when extraction aborted.
        diagnostics: Every diagnostic produced by the call, in order.
    """

    data: T | None
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return not any(d.is_error for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]
