"""
UIBro Formatter - Converts an AST back into canonical UIBro script
"""

from .lexer import COMPONENTS, TokenType
from .ast import (
    ASTNode, Program, Literal, BinaryOp, Call, Chain, Assignment, IfStmt
)

INDENT = '    '

# Binding strength of each binary operator, loosest first
PRECEDENCE = {
    '||': 1,
    '&&': 2,
    '==': 3, '!=': 3,
    '<': 4, '<=': 4, '>': 4, '>=': 4,
    '+': 5, '-': 5,
    '*': 6, '/': 6,
}
UNARY = 7

ESCAPES = {'\\': '\\\\', '"': '\\"', '\n': '\\n', '\t': '\\t', '\r': '\\r'}


def quote(text: str) -> str:
    return '"' + ''.join(ESCAPES.get(ch, ch) for ch in text) + '"'


def leads_with_chain(node: ASTNode) -> bool:
    """An assignment whose right side opens with a chain would re-parse as that chain alone."""
    while isinstance(node, BinaryOp) and node.left is not None:
        node = node.left
    return isinstance(node, Chain)


class SourceFormatter:
    def __init__(self):
        self.indent = 0

    def format(self, program: Program) -> str:
        lines = [self.stmt(stmt) for stmt in program.statements]
        return '\n'.join(lines) + '\n' if lines else ''

    def ind(self) -> str:
        return INDENT * self.indent

    def block(self, body) -> str:
        if not body:
            return '{ }'
        self.indent += 1
        inner = '\n'.join(self.stmt(s) for s in body)
        self.indent -= 1
        return '{\n' + inner + '\n' + self.ind() + '}'

    def stmt(self, node: ASTNode) -> str:
        if isinstance(node, Assignment):
            value = self.expr(node.value)
            if not isinstance(node.value, Chain) and leads_with_chain(node.value):
                value = f"({value})"
            return self.ind() + f"{node.name} = {value};"
        elif isinstance(node, Chain):
            return self.ind() + self.chain(node) + ';'
        elif isinstance(node, IfStmt):
            result = self.ind() + f"if ({self.expr(node.condition)}) {self.block(node.then_body)}"
            current = node
            # Fold nested single-if else blocks back into elseif clauses
            while len(current.else_body) == 1 and isinstance(current.else_body[0], IfStmt):
                current = current.else_body[0]
                result += f" elseif ({self.expr(current.condition)}) {self.block(current.then_body)}"
            if current.else_body:
                result += f" else {self.block(current.else_body)}"
            return result
        return ""

    def chain(self, node: Chain) -> str:
        if not node.calls and node.root not in COMPONENTS:
            # A bare variable root only parses as a chain when a dot follows it
            return node.root + '.'
        return node.root + ''.join(self.call(c) for c in node.calls)

    def call(self, node: Call) -> str:
        return f".{node.name}({', '.join(self.expr(a) for a in node.args)})"

    def expr(self, node: ASTNode, parent: int = 0) -> str:
        if isinstance(node, Literal):
            if node.kind == TokenType.STRING:
                return quote(node.value)
            return node.value
        elif isinstance(node, Chain):
            return self.chain(node)
        elif isinstance(node, BinaryOp):
            if node.left is None:
                return f"{node.op}{self.expr(node.right, UNARY)}"
            spine = []
            while isinstance(node, BinaryOp) and node.left is not None:
                spine.append(node)
                node = node.left
            text = self.expr(node, PRECEDENCE[spine[-1].op])
            for i in range(len(spine) - 1, -1, -1):
                level = PRECEDENCE[spine[i].op]
                # Left-associative: the right operand needs parentheses at equal strength
                text = f"{text} {spine[i].op} {self.expr(spine[i].right, level + 1)}"
                outer = PRECEDENCE[spine[i - 1].op] if i else parent
                if level < outer:
                    text = f"({text})"
            return text
        return ""


def format_program(program: Program) -> str:
    return SourceFormatter().format(program)
