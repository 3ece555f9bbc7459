"""
UIBro Parser - Parses tokens into AST
Never raises: input it cannot use is skipped and reported to the diagnostics sink
"""

from typing import List, Optional

from .errors import Diagnostics
from .lexer import UI, Token, TokenType
from .ast import (
    ASTNode, Program, Literal, BinaryOp, Call, Chain, Assignment, IfStmt
)

# Deepest run of nested parentheses, `!` operators and blocks before input is skipped
MAX_NESTING = UI['limits']['nesting']


class Parser:
    def __init__(self, tokens: List[Token], diagnostics: Optional[Diagnostics] = None):
        self.tokens = tokens
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.pos = 0
        self.depth = 0

    def peek(self, offset: int = 0) -> Token:
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        last = self.tokens[-1] if self.tokens else None
        return Token(TokenType.EOF, '', last.line if last else 0, last.col if last else 0)

    def advance(self) -> Token:
        token = self.peek()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *types: TokenType) -> Optional[Token]:
        if self.peek().type in types:
            return self.advance()
        return None

    def expect(self, type: TokenType, what: str) -> Optional[Token]:
        """Consume a token of the given type, or report it missing and carry on."""
        if self.peek().type == type:
            return self.advance()
        self.report(f"Expected {what}, got {self.describe(self.peek())}", self.peek())
        return None

    def report(self, message: str, token: Token):
        self.diagnostics.report('parser', message, token.line, token.col)

    @staticmethod
    def describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return 'end of input'
        return f"'{token.value}'"

    def parse(self) -> Program:
        return Program(self.parse_statements(TokenType.EOF))

    def parse_statements(self, terminator: TokenType) -> List[ASTNode]:
        statements = []
        while self.peek().type not in (terminator, TokenType.EOF):
            if self.match(TokenType.SEMICOLON):
                continue
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                bad = self.advance()
                self.report(f"Discarded unexpected {self.describe(bad)}", bad)
        return statements

    def parse_statement(self) -> Optional[ASTNode]:
        token = self.peek()
        if token.type == TokenType.IDENTIFIER:
            if self.peek(1).type == TokenType.ASSIGN:
                return self.parse_assignment()
            if self.peek(1).type == TokenType.DOT:
                return self.parse_chain()
            return None
        if token.type == TokenType.COMPONENT:
            return self.parse_chain()
        if token.type == TokenType.IF:
            return self.parse_if()
        return None

    def starts_chain(self) -> bool:
        token = self.peek()
        if token.type == TokenType.COMPONENT:
            return True
        return token.type == TokenType.IDENTIFIER and self.peek(1).type == TokenType.DOT

    def parse_assignment(self) -> Assignment:
        name = self.advance().value
        self.advance()  # =
        if self.starts_chain():
            return Assignment(name, self.parse_chain())
        return Assignment(name, self.parse_expression())

    def parse_chain(self) -> Chain:
        root = self.advance()
        chain = Chain(root.value, [], line=root.line)
        while self.peek().type == TokenType.DOT:
            if self.peek(1).type != TokenType.IDENTIFIER or self.peek(2).type != TokenType.LPAREN:
                dot = self.advance()
                self.report("Expected method call after '.'", dot)
                break
            self.advance()  # .
            name = self.advance()
            self.advance()  # (
            chain.calls.append(Call(name.value, self.parse_arguments(), line=name.line))
        return chain

    def parse_arguments(self) -> List[ASTNode]:
        args = []
        if self.peek().type != TokenType.RPAREN:
            args.append(self.parse_expression())
            while self.match(TokenType.COMMA):
                args.append(self.parse_expression())
        self.expect(TokenType.RPAREN, "')'")
        return args

    def parse_if(self) -> IfStmt:
        self.advance()  # if
        node = IfStmt(self.parse_condition(), self.parse_block())
        current = node
        while True:
            if self.match(TokenType.ELSEIF):
                nested = IfStmt(self.parse_condition(), self.parse_block())
                current.else_body.append(nested)
                current = nested
            elif self.match(TokenType.ELSE):
                # Attaches to the innermost elseif, not to the outer if
                current.else_body = self.parse_block()
                break
            else:
                break
        return node

    def parse_condition(self) -> ASTNode:
        self.expect(TokenType.LPAREN, "'('")
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN, "')'")
        return condition

    def parse_block(self) -> List[ASTNode]:
        if not self.expect(TokenType.LBRACE, "'{'"):
            return []
        if self.depth >= MAX_NESTING:
            self.report("Block nested too deeply, skipped", self.peek())
            self.skip_nested(TokenType.RBRACE)
            self.expect(TokenType.RBRACE, "'}'")
            return []
        self.depth += 1
        statements = self.parse_statements(TokenType.RBRACE)
        self.depth -= 1
        self.expect(TokenType.RBRACE, "'}'")
        return statements

    def skip_nested(self, *stops: TokenType):
        """Discard tokens up to the first stop token outside any bracket pair."""
        level = 0
        while (token := self.peek()).type != TokenType.EOF:
            if level == 0 and token.type in stops:
                break
            if token.type in (TokenType.LPAREN, TokenType.LBRACE):
                level += 1
            elif token.type in (TokenType.RPAREN, TokenType.RBRACE):
                level = max(level - 1, 0)
            self.advance()

    def too_deep(self) -> Literal:
        self.report("Expression nested too deeply, skipped", self.peek())
        self.skip_nested(TokenType.RPAREN, TokenType.RBRACE, TokenType.COMMA, TokenType.SEMICOLON)
        return Literal('', TokenType.STRING)

    def parse_expression(self) -> ASTNode:
        if self.depth >= MAX_NESTING:
            return self.too_deep()
        self.depth += 1
        expr = self.parse_or()
        self.depth -= 1
        return expr

    def parse_or(self) -> ASTNode:
        left = self.parse_and()
        while token := self.match(TokenType.OR):
            left = BinaryOp(left, token.value, self.parse_and())
        return left

    def parse_and(self) -> ASTNode:
        left = self.parse_equality()
        while token := self.match(TokenType.AND):
            left = BinaryOp(left, token.value, self.parse_equality())
        return left

    def parse_equality(self) -> ASTNode:
        left = self.parse_comparison()
        while token := self.match(TokenType.EQ, TokenType.NEQ):
            left = BinaryOp(left, token.value, self.parse_comparison())
        return left

    def parse_comparison(self) -> ASTNode:
        left = self.parse_additive()
        while token := self.match(TokenType.LT, TokenType.LTE, TokenType.GT, TokenType.GTE):
            left = BinaryOp(left, token.value, self.parse_additive())
        return left

    def parse_additive(self) -> ASTNode:
        left = self.parse_multiplicative()
        while token := self.match(TokenType.ADD, TokenType.SUB):
            left = BinaryOp(left, token.value, self.parse_multiplicative())
        return left

    def parse_multiplicative(self) -> ASTNode:
        left = self.parse_unary()
        while token := self.match(TokenType.MUL, TokenType.DIV):
            left = BinaryOp(left, token.value, self.parse_unary())
        return left

    def parse_unary(self) -> ASTNode:
        if token := self.match(TokenType.NOT):
            if self.depth >= MAX_NESTING:
                return self.too_deep()
            self.depth += 1
            operand = self.parse_unary()
            self.depth -= 1
            return BinaryOp(None, token.value, operand)
        return self.parse_primary()

    def parse_primary(self) -> ASTNode:
        if self.match(TokenType.LPAREN):
            expr = self.parse_expression()
            self.expect(TokenType.RPAREN, "')'")
            return expr
        if self.starts_chain():
            return self.parse_chain()
        if token := self.match(TokenType.STRING, TokenType.NUMBER, TokenType.BOOLEAN, TokenType.IDENTIFIER):
            return Literal(token.value, token.type)
        self.report(f"Expected expression, got {self.describe(self.peek())}", self.peek())
        return Literal('', TokenType.STRING)


def parse(tokens: List[Token], diagnostics: Optional[Diagnostics] = None) -> Program:
    return Parser(tokens, diagnostics).parse()
