"""Hover provider: shows the emitted definition for the unit under the cursor."""

from typing import Optional

from lsprotocol import types as lsp

from defgen.ir.emitter import Emitter
from defgen.lsp.diagnostics import AnalysisResult
from defgen.lsp.symbols import find_unit_at


def get_hover_info(result: AnalysisResult, position: lsp.Position) -> Optional[lsp.Hover]:
    if not result.units or result.document is None:
        return None
    loc = find_unit_at(result.source, position)
    if loc is None or loc.name is None:
        return None

    # Units are lowered modules first, then injectors
    index = loc.index
    if loc.section == "injectors":
        index += len(result.document.modules)
    if index >= len(result.units):
        return None

    text = Emitter().render_unit(*result.units[index])
    kind = "module" if loc.section == "modules" else "injector"
    return lsp.Hover(
        contents=lsp.MarkupContent(
            kind=lsp.MarkupKind.Markdown,
            value=f"**{kind}** `{loc.name}`\n```ts\n{text}\n```",
        ),
        range=loc.range,
    )
