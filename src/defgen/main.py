#!/usr/bin/env python3
"""defgen — lowers module and injector descriptors to definition code.

Usage: python -m defgen <input.json> [-o output.ts] [--emit-ir] [--no-types]
"""

import argparse
import logging
import os
import pprint
import sys
from typing import Optional

from .descriptors import InvariantViolation
from .ir.emitter import Emitter
from .ir.identifiers import DEFAULT_CONFIG, RuntimeConfig
from .loader import Document, LoadError, load_document
from .lower import LoweringResult, lower_injector, lower_module

logger = logging.getLogger(__name__)


def _format_error(source: str, filename: str, message: str,
                  line: Optional[int], col: Optional[int]) -> str:
    """Format an error with source context and caret when a position is known."""
    lines = source.split('\n')
    if line is None or line < 1 or line > len(lines):
        return f"error: {message}\n --> {filename}"
    col = col or 1
    source_line = lines[line - 1]
    width = len(str(line))
    pad = " " * width
    caret = " " * max(col - 1, 0) + "^"
    return (
        f"error: {message}\n"
        f" {pad}--> {filename}:{line}:{col}\n"
        f" {pad} |\n"
        f" {line} | {source_line}\n"
        f" {pad} | {caret}"
    )


def lower_document(doc: Document,
                   config: RuntimeConfig = DEFAULT_CONFIG) -> list[tuple[str, LoweringResult]]:
    """Lower every unit in document order: modules first, then injectors."""
    units = []
    for name, desc in doc.modules:
        units.append((f"{name}ModuleDef", lower_module(desc, config)))
    for name, desc in doc.injectors:
        units.append((f"{name}InjectorDef", lower_injector(desc, config)))
    logger.debug("lowered %d module(s), %d injector(s)",
                 len(doc.modules), len(doc.injectors))
    return units


def compile_source(source: str, config: RuntimeConfig = DEFAULT_CONFIG,
                   emit_types: bool = True) -> str:
    """JSON descriptor text → emitted definition source."""
    units = lower_document(load_document(source), config)
    return Emitter(emit_types=emit_types).emit(units)


def _dump_ir(units: list[tuple[str, LoweringResult]]):
    """Print a canonical IR dump for debugging."""
    for name, result in units:
        print(f"# {name}: {len(result.statements)} statement(s)")
        print("expression:")
        print(pprint.pformat(result.expression, indent=2, width=100))
        print("type:")
        print(pprint.pformat(result.type, indent=2, width=100))
        for stmt in result.statements:
            print("statement:")
            print(pprint.pformat(stmt, indent=2, width=100))


def main(argv: Optional[list[str]] = None):
    argparser = argparse.ArgumentParser(description="defgen definition lowering")
    argparser.add_argument("input", help="Input descriptor .json file")
    argparser.add_argument("-o", "--output", help="Output .ts file (default: <input>.ts)")
    argparser.add_argument("--emit-ir", action="store_true",
                           help="Print IR representation instead of emitting source")
    argparser.add_argument("--no-types", action="store_true",
                           help="Omit type annotations on definitions")
    argparser.add_argument("--runtime-module", default=DEFAULT_CONFIG.runtime_module,
                           help="Module the runtime symbols are imported from")
    argparser.add_argument("--jit-flag", default=DEFAULT_CONFIG.jit_flag,
                           help="Global flag gating debug-only scope registration")
    argparser.add_argument("-v", "--verbose", action="store_true",
                           help="Log lowering decisions to stderr")

    args = argparser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        stream=sys.stderr)
    config = RuntimeConfig(runtime_module=args.runtime_module, jit_flag=args.jit_flag)

    # Read input
    try:
        with open(args.input, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        print(f"Error: File '{args.input}' not found", file=sys.stderr)
        sys.exit(1)

    filename = os.path.basename(args.input)

    try:
        doc = load_document(source)
        units = lower_document(doc, config)
    except LoadError as e:
        print(_format_error(source, filename, str(e), e.line, e.col), file=sys.stderr)
        sys.exit(1)
    except InvariantViolation as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.emit_ir:
        _dump_ir(units)
        return

    output = Emitter(emit_types=not args.no_types).emit(units)

    # Output
    if args.output:
        out_path = args.output
    else:
        base = os.path.splitext(args.input)[0]
        out_path = base + ".ts"

    try:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(output)
    except OSError as e:
        print(f"error: cannot write '{out_path}': {e.strerror}", file=sys.stderr)
        sys.exit(1)

    print(f"Lowered {args.input} → {out_path}")


if __name__ == "__main__":
    main()
