import logging
from typing import Sequence

from models import ASTNode, BinaryExpr, ErrorKind, ExprError, IntegerLiteral, Token, TokenType, UnaryExpr

logger = logging.getLogger(__name__)

# token types that can begin a factor
STARTS = (TokenType.INT, TokenType.LPAREN, TokenType.MINUS)


class Stream:
    def __init__(self, toks: Sequence[Token]):
        self.t = toks; self.i = 0
        last = toks[-1] if toks else None
        self.eof = Token(type=TokenType.EOF, value="", index=last.index + len(last.value) if last else 0)

    def peek(self) -> Token: return self.t[self.i] if self.i < len(self.t) else self.eof

    def pop(self) -> Token:
        x = self.peek()
        if x.type != TokenType.EOF: self.i += 1
        return x

    def match(self, *kinds: TokenType) -> bool: return self.peek().type in kinds

    def expect(self, kind: TokenType, msg: str) -> Token:
        tok = self.peek()
        if tok.type != kind:
            raise ExprError(ErrorKind.PARSE, msg, tok.index)
        return self.pop()


def parse(tokens: Sequence[Token]) -> ASTNode:
    """Build the AST for a token list produced by `tokenize`.

    Grammar, loosest first; binary operators are left-associative:

        expression := term ( (PLUS|MINUS) term )*
        term       := factor ( (STAR|SLASH) factor )*
        factor     := MINUS factor | primary
        primary    := INT | LPAREN expression RPAREN

    Raises ExprError(ParseError) on the first structural violation.
    """
    s = Stream(tokens)

    def operand_after(op: Token):
        if not s.match(*STARTS):
            raise ExprError(ErrorKind.PARSE, f"Expected expression after '{op.value}'", op.index + 1)

    # binary loops are inlined so each paren level costs four frames
    def expression():
        left = term()
        while s.match(TokenType.PLUS, TokenType.MINUS):
            op = s.pop(); operand_after(op)
            left = BinaryExpr(operator=op.value, left=left, right=term(), index=op.index)
        return left

    def term():
        left = factor()
        while s.match(TokenType.STAR, TokenType.SLASH):
            op = s.pop(); operand_after(op)
            left = BinaryExpr(operator=op.value, left=left, right=factor(), index=op.index)
        return left

    def factor():
        # MINUS factor, unrolled: the innermost minus wraps the primary first
        ops = []
        while s.match(TokenType.MINUS): ops.append(s.pop())
        node = primary()
        for op in reversed(ops):
            node = UnaryExpr(operand=node, index=op.index)
        return node

    def primary():
        tok = s.peek()
        if tok.type == TokenType.INT:
            s.pop(); return IntegerLiteral(value=int(tok.value), index=tok.index)
        if tok.type == TokenType.LPAREN:
            s.pop(); e = expression()
            s.expect(TokenType.RPAREN, "Expected ')' after expression")
            return e
        if tok.type == TokenType.EOF:
            raise ExprError(ErrorKind.PARSE, "Unexpected end of expression", tok.index)
        raise ExprError(ErrorKind.PARSE, f"Unexpected token '{tok.value}'", tok.index)

    try:
        root = expression()
    except RecursionError:
        raise ExprError(ErrorKind.PARSE, "Expression nested too deeply", s.peek().index) from None
    if not s.match(TokenType.EOF):
        tok = s.peek()
        raise ExprError(ErrorKind.PARSE, f"Unexpected token '{tok.value}' after expression", tok.index)
    logger.debug("parsed %d tokens into %s", len(tokens), root.kind)
    return root
