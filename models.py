from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TokenType(str, Enum):
    INT = "INT"
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: TokenType
    value: str
    index: int


# AST. `kind` is the discriminator, so trees dump straight to JSON.

class IntegerLiteral(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["IntegerLiteral"] = "IntegerLiteral"
    value: int
    index: int


class BinaryExpr(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["BinaryExpr"] = "BinaryExpr"
    operator: Literal["+", "-", "*", "/"]
    left: "ASTNode"
    right: "ASTNode"
    index: int


class UnaryExpr(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["UnaryExpr"] = "UnaryExpr"
    operator: Literal["-"] = "-"
    operand: "ASTNode"
    index: int


ASTNode = Annotated[Union[IntegerLiteral, BinaryExpr, UnaryExpr], Field(discriminator="kind")]

BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()


class ErrorKind(str, Enum):
    LEX = "LexError"
    PARSE = "ParseError"
    EVAL = "EvalError"


class ExprError(Exception):
    """Failure of one pipeline stage, tagged with the stage's kind.

    `index` is the source offset where the failure was detected.
    """

    def __init__(self, kind: ErrorKind, message: str, index: int):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.index = index

    def __repr__(self):
        return f"ExprError({self.kind.value}, {self.message!r}, index={self.index})"

    def to_dict(self, expression: Optional[str] = None) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.kind.value, "message": self.message, "index": self.index}
        if expression is not None:
            out["expression"] = expression
        return out


# HTTP shapes

class ExpressionReq(BaseModel):
    expression: Optional[str] = None


class EvaluateResp(BaseModel):
    result: int
    expression: str


class TokenizeResp(BaseModel):
    tokens: List[Token]
    expression: str


class ParseResp(BaseModel):
    ast: ASTNode
    expression: str


class ErrorBody(BaseModel):
    type: Literal["LexError", "ParseError", "EvalError", "ValidationError", "ServerError"]
    message: str
    index: Optional[int] = None
    expression: Optional[str] = None


class ErrorResp(BaseModel):
    error: ErrorBody
