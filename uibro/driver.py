"""
UIBro Driver - runs script text through lexer, parser and interpreter
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .errors import Diagnostics, ScriptLoadError, UIBroError
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import Parser
from .toolkit import Toolkit
from .values import Handle

logger = logging.getLogger(__name__)


@dataclass
class ScriptResult:
    window: Optional[Handle]
    interpreter: Interpreter
    error: Optional[str] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return self.error is None

    def native_window(self):
        if self.window is None:
            return None
        return self.interpreter.native(self.window)


def run_script(source: str, toolkit: Optional[Toolkit] = None,
               diagnostics: Optional[Diagnostics] = None,
               path: Optional[str] = None) -> ScriptResult:
    """Run a script and return its root window handle, or the error that stopped it."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    interpreter = Interpreter(toolkit, diagnostics)
    try:
        tokens = Lexer(source, diagnostics).tokenize()
        program = Parser(tokens, diagnostics).parse()
        logger.debug("running %s: %d statements", path or '<script>', len(program.statements))
        window = interpreter.run(program)
    except UIBroError as exc:
        if exc.path is None:
            exc.path = path
        message = exc.format()
        logger.error("script failed: %s", message)
        return ScriptResult(None, interpreter, message, diagnostics)
    logger.debug("finished with %d objects and %d diagnostics", len(interpreter.registry), len(diagnostics))
    return ScriptResult(window, interpreter, None, diagnostics)


def read_script(path: str) -> str:
    try:
        with open(path, encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ScriptLoadError(f"Cannot read script: {exc}", path=path) from exc


def run_file(path: str, toolkit: Optional[Toolkit] = None,
             diagnostics: Optional[Diagnostics] = None) -> ScriptResult:
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    try:
        source = read_script(path)
    except ScriptLoadError as exc:
        logger.error("script failed: %s", exc.format())
        return ScriptResult(None, Interpreter(toolkit, diagnostics), exc.format(), diagnostics)
    return run_script(source, toolkit, diagnostics, path=path)
