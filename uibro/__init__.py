"""
UIBro Script
A small language for building windows and controls from text
"""

from .lexer import Lexer, Token, TokenType, tokenize
from .ast import (
    ASTNode, Program, Literal, BinaryOp, Call, Chain, Assignment, IfStmt
)
from .parser import Parser, parse
from .values import Value, ValueKind, Handle, ObjectKind
from .toolkit import Toolkit, RecordingToolkit, Widget
from .interpreter import Interpreter, Environment, ObjectRegistry
from .formatter import SourceFormatter, format_program
from .driver import ScriptResult, run_script, run_file
from .errors import (
    UIBroError, ToolkitError, ScriptLoadError, InterpreterStateError,
    Diagnostic, Diagnostics
)

__version__ = '1.0.0'

__all__ = [
    # Core
    'Lexer', 'Token', 'TokenType', 'tokenize',
    'Parser', 'parse',
    'Interpreter', 'Environment', 'ObjectRegistry',
    'run_script', 'run_file', 'ScriptResult',

    # AST
    'ASTNode', 'Program', 'Literal', 'BinaryOp', 'Call', 'Chain',
    'Assignment', 'IfStmt',

    # Values
    'Value', 'ValueKind', 'Handle', 'ObjectKind',

    # Toolkit
    'Toolkit', 'RecordingToolkit', 'Widget',

    # Formatter
    'SourceFormatter', 'format_program',

    # Errors
    'UIBroError', 'ToolkitError', 'ScriptLoadError', 'InterpreterStateError',
    'Diagnostic', 'Diagnostics',
]
