"""
UIBro AST - Abstract Syntax Tree node definitions
"""

from typing import List, Optional
from dataclasses import dataclass, field

from .lexer import TokenType


@dataclass
class ASTNode:
    pass


@dataclass
class Program(ASTNode):
    statements: List[ASTNode]


@dataclass
class Literal(ASTNode):
    value: str
    kind: TokenType  # STRING, NUMBER, BOOLEAN or IDENTIFIER


@dataclass
class BinaryOp(ASTNode):
    left: Optional[ASTNode]  # None for unary '!'
    op: str
    right: ASTNode


@dataclass
class Call(ASTNode):
    name: str
    args: List[ASTNode]
    line: int = field(default=0, compare=False)


@dataclass
class Chain(ASTNode):
    root: str
    calls: List[Call]
    line: int = field(default=0, compare=False)


@dataclass
class Assignment(ASTNode):
    name: str
    value: ASTNode


@dataclass
class IfStmt(ASTNode):
    condition: ASTNode
    then_body: List[ASTNode]
    else_body: List[ASTNode] = field(default_factory=list)
