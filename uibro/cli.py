"""
UIBro command line - run, inspect and format UIBro scripts
"""

import argparse
import json
import logging
import sys
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import List, Optional

from .driver import read_script, run_script
from .errors import Diagnostics, ScriptLoadError
from .formatter import format_program
from .lexer import Lexer
from .parser import Parser
from .toolkit import RecordingToolkit

COMMANDS = ('run', 'tokens', 'ast', 'format')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='uibro', description='UIBro script interpreter')
    parser.add_argument('command', choices=COMMANDS)
    parser.add_argument('file', help='script file (.ui)')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    parser.add_argument('--dump', action='store_true', help='print the widget tree as JSON after a run')
    parser.add_argument('--diagnostics', action='store_true', help='print skipped input to stderr')
    return parser


def to_jsonable(node):
    if isinstance(node, Enum):
        return node.name
    if is_dataclass(node):
        data = {'node': type(node).__name__}
        for f in fields(node):
            data[f.name] = to_jsonable(getattr(node, f.name))
        return data
    if isinstance(node, dict):
        return {k: to_jsonable(v) for k, v in node.items()}
    if isinstance(node, list):
        return [to_jsonable(v) for v in node]
    return node


def print_diagnostics(diagnostics: Diagnostics):
    for diagnostic in diagnostics:
        print(diagnostic.format(), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    diagnostics = Diagnostics()

    if args.command == 'run':
        toolkit = RecordingToolkit()
        try:
            source = read_script(args.file)
        except ScriptLoadError as exc:
            print(exc.format(), file=sys.stderr)
            return 1
        result = run_script(source, toolkit, diagnostics, path=args.file)
        if args.diagnostics:
            print_diagnostics(diagnostics)
        if not result.ok:
            print(result.error, file=sys.stderr)
            return 1
        if args.dump:
            print(json.dumps([w.to_dict() for w in toolkit.windows], indent=2))
        for notice in toolkit.notifications:
            print(f"[{notice.level}] {notice.title}: {notice.message}")
        return 0

    try:
        source = read_script(args.file)
    except ScriptLoadError as exc:
        print(exc.format(), file=sys.stderr)
        return 1
    tokens = Lexer(source, diagnostics).tokenize()
    if args.command == 'tokens':
        for token in tokens:
            print(f"{token.line}:{token.col}\t{token.type.name}\t{token.value!r}")
    else:
        program = Parser(tokens, diagnostics).parse()
        if args.command == 'ast':
            print(json.dumps(to_jsonable(program), indent=2))
        else:
            sys.stdout.write(format_program(program))
    if args.diagnostics:
        print_diagnostics(diagnostics)
    return 0


if __name__ == '__main__':
    sys.exit(main())
