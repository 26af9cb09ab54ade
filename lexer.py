import logging
import re
from typing import List

from models import ErrorKind, ExprError, Token, TokenType

logger = logging.getLogger(__name__)

TOKENS = [
    ("WS", r"\s+"),
    ("INT", r"[0-9]+"),
    ("OP", r"[+\-*/()]"),
]
MASTER = re.compile("|".join(f"(?P<T{i}>{p})" for i, (_, p) in enumerate(TOKENS)))

OPS = {
    "+": TokenType.PLUS, "-": TokenType.MINUS, "*": TokenType.STAR, "/": TokenType.SLASH,
    "(": TokenType.LPAREN, ")": TokenType.RPAREN,
}


def tokenize(source: str) -> List[Token]:
    """Split `source` into tokens, always ending with a single EOF token.

    Raises ExprError(LexError) at the first character no token starts with.
    """
    i = 0; out: List[Token] = []
    while i < len(source):
        m = MASTER.match(source, i)
        if not m:
            raise ExprError(ErrorKind.LEX, f"Unexpected character '{source[i]}' at index {i}", i)
        name, _ = TOKENS[int(m.lastgroup[1:])]
        text = m.group(); start = i; i = m.end()
        if name == "WS": continue
        ttype = TokenType.INT if name == "INT" else OPS[text]
        out.append(Token(type=ttype, value=text, index=start))
    out.append(Token(type=TokenType.EOF, value="", index=len(source)))
    logger.debug("lexed %d tokens from %r", len(out), source)
    return out
