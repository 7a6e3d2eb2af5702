"""Diagnostic computation for descriptor documents.

Runs the pipeline (load -> lower) on source text and converts errors into
LSP Diagnostic objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from lsprotocol import types as lsp

from defgen.descriptors import InvariantViolation
from defgen.loader import Document, LoadError, load_document
from defgen.lower import LoweringResult
from defgen.lsp.symbols import find_unit_locations, utf16_column
from defgen.main import lower_document


@dataclass
class AnalysisResult:
    """Cached result of analyzing a document."""

    uri: str
    source: str
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    document: Optional[Document] = None
    units: Optional[list[tuple[str, LoweringResult]]] = None


def _make_diagnostic(
    line: int,
    col: int,
    message: str,
    severity: lsp.DiagnosticSeverity = lsp.DiagnosticSeverity.Error,
    source: str = "defgen",
    length: int = 1,
) -> lsp.Diagnostic:
    """Create an LSP Diagnostic from 0-based line/col."""
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=line, character=col),
            end=lsp.Position(line=line, character=col + max(length, 1)),
        ),
        message=message,
        severity=severity,
        source=source,
    )


def _load_error_diagnostic(source: str, e: LoadError) -> lsp.Diagnostic:
    # JSON syntax errors carry 1-based positions counted in code points
    if e.line is not None:
        line = max(0, e.line - 1)
        col = max(0, (e.col or 1) - 1)
        lines = source.split("\n")
        if line < len(lines):
            col = utf16_column(lines[line], col)
        return _make_diagnostic(line, col, e.message)
    for loc in find_unit_locations(source):
        if e.path == loc.path or e.path.startswith(loc.path + "."):
            return _make_diagnostic(loc.line, loc.start, str(e), length=loc.end - loc.start)
    return _make_diagnostic(0, 0, str(e))


def compute_diagnostics(uri: str, source: str) -> AnalysisResult:
    """Run the pipeline and return diagnostics."""
    result = AnalysisResult(uri=uri, source=source)

    try:
        result.document = load_document(source)
    except LoadError as e:
        result.diagnostics.append(_load_error_diagnostic(source, e))
        return result

    try:
        result.units = lower_document(result.document)
    except InvariantViolation as e:
        result.diagnostics.append(_make_diagnostic(0, 0, str(e)))

    return result
