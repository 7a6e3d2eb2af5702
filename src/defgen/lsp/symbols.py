"""Unit locations and document symbols for descriptor documents.

The JSON decoder keeps no positions, so units are located by a light scan
of the text: every object opened directly inside the `"modules"` or
`"injectors"` array is one unit, numbered in order within its section.
A unit is placed on its `"name"` value, or on its opening brace when it
has none. Columns are UTF-16 code units, as LSP positions are.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from lsprotocol import types as lsp

if TYPE_CHECKING:
    from defgen.lsp.diagnostics import AnalysisResult

_SECTIONS = ("modules", "injectors")


@dataclass
class UnitLocation:
    """Where a unit sits (0-based line, UTF-16 character range)."""
    section: str  # "modules" or "injectors"
    index: int
    name: Optional[str]
    line: int
    start: int
    end: int

    @property
    def path(self) -> str:
        return f"{self.section}[{self.index}]"

    @property
    def range(self) -> lsp.Range:
        return lsp.Range(
            start=lsp.Position(line=self.line, character=self.start),
            end=lsp.Position(line=self.line, character=self.end),
        )


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def utf16_column(line_text: str, col: int) -> int:
    """Convert a code point offset within a line to UTF-16 code units."""
    return _utf16_len(line_text[:col])


def _read_string(source: str, i: int) -> tuple[str, int]:
    """Body of the string opening at source[i], and the offset past its closing quote."""
    j = i + 1
    while j < len(source):
        ch = source[j]
        if ch == "\\":
            j += 2
            continue
        if ch == '"':
            return source[i + 1:j], j + 1
        if ch == "\n":
            break
        j += 1
    return source[i + 1:j], j


def _skip_ws(source: str, i: int) -> int:
    while i < len(source) and source[i] in " \t\r\n":
        i += 1
    return i


def find_unit_locations(source: str) -> list[UnitLocation]:
    line_starts = [0]
    for i, ch in enumerate(source):
        if ch == "\n":
            line_starts.append(i + 1)

    def place(offset: int, length: int) -> tuple[int, int, int]:
        line = bisect_right(line_starts, offset) - 1
        start = _utf16_len(source[line_starts[line]:offset])
        return line, start, start + _utf16_len(source[offset:offset + length])

    locations: list[UnitLocation] = []
    counters = {section: 0 for section in _SECTIONS}
    # Open containers; a section array is pushed under its section name
    stack: list[str] = []
    key: Optional[str] = None
    current: Optional[UnitLocation] = None
    i = 0
    while i < len(source):
        ch = source[i]
        if ch == '"':
            text, end = _read_string(source, i)
            colon = _skip_ws(source, end)
            is_key = colon < len(source) and source[colon] == ":"
            if is_key and stack == ["{"]:
                key = text
            elif is_key and text == "name" and current is not None and len(stack) == 3:
                value = _skip_ws(source, colon + 1)
                if value < len(source) and source[value] == '"':
                    name, end = _read_string(source, value)
                    current.name = name
                    current.line, current.start, current.end = place(value + 1, len(name))
            i = end
            continue
        if ch == "{" and len(stack) == 2 and stack[1] in _SECTIONS:
            section = stack[1]
            line, start, end = place(i, 1)
            current = UnitLocation(section, counters[section], None, line, start, end)
            locations.append(current)
            counters[section] += 1
        if ch == "[" and stack == ["{"] and key in _SECTIONS:
            stack.append(key)
        elif ch in "[{":
            stack.append(ch)
        elif ch in "]}":
            if stack:
                stack.pop()
            if len(stack) < 3:
                current = None
        i += 1
    return locations


def find_unit_at(source: str, position: lsp.Position) -> Optional[UnitLocation]:
    """The named unit whose name covers the given 0-based position."""
    for loc in find_unit_locations(source):
        if loc.name is None:
            continue
        if loc.line == position.line and loc.start <= position.character <= loc.end:
            return loc
    return None


def get_document_symbols(result: AnalysisResult) -> list[lsp.DocumentSymbol]:
    symbols = []
    for loc in find_unit_locations(result.source):
        if not loc.name:
            continue
        kind = lsp.SymbolKind.Module if loc.section == "modules" else lsp.SymbolKind.Object
        symbols.append(lsp.DocumentSymbol(
            name=loc.name,
            detail="module" if loc.section == "modules" else "injector",
            kind=kind,
            range=loc.range,
            selection_range=loc.range,
        ))
    return symbols
