import logging
import os
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from evaluator import evaluate
from lexer import tokenize
from models import ErrorResp, EvaluateResp, ExprError, ExpressionReq, ParseResp, TokenizeResp
from parser import parse

__version__ = "1.0.0"

# environment variables
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)

ERRORS = {400: {"model": ErrorResp}}


def evaluate_expression(source: str) -> int:
    """Lex, parse and evaluate `source`.

    Whichever stage fails first raises its ExprError unchanged; the error's
    `kind` tells the caller which stage it was.
    """
    tokens = tokenize(source)
    ast = parse(tokens)
    result = evaluate(ast)
    logger.debug("%r = %d", source, result)
    return result


app = FastAPI(title="expr-gateway", version=__version__, docs_url="/api-docs")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def err(status: int, type_: str, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": {"type": type_, "message": msg}})


def invalid() -> JSONResponse:
    return err(400, "ValidationError", "Expression is required and must be a string")


def expr_err(e: ExprError, expression: str) -> JSONResponse:
    logger.info("rejected %r: %r", expression, e)
    return JSONResponse(status_code=400, content={"error": e.to_dict(expression)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s invalid body: %s", request.method, request.url.path, exc.errors())
    return invalid()


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # a known path with the wrong method is reported as a missing route
    if exc.status_code in (404, 405):
        return err(404, "ServerError", f"Route {request.method} {request.url.path} not found")
    return err(exc.status_code, "ServerError", str(exc.detail))


@app.exception_handler(Exception)
async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return err(500, "ServerError", "Internal server error")


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/api-docs")


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/info")
def info():
    return {
        "name": "DSL Expression Evaluator API",
        "version": __version__,
        "description": "REST API for evaluating integer arithmetic expressions",
        "endpoints": [
            {"method": "POST", "path": "/api/evaluate", "description": "Evaluate an expression and return the result"},
            {"method": "POST", "path": "/api/tokenize", "description": "Tokenize an expression into tokens"},
            {"method": "POST", "path": "/api/parse", "description": "Parse an expression into an AST"},
        ],
        "supportedOperators": ["+", "-", "*", "/"],
        "features": ["Integer arithmetic", "Operator precedence", "Parentheses", "Unary minus", "Error handling"],
    }


@app.post("/api/evaluate", response_model=EvaluateResp, responses=ERRORS)
def evaluate_api(req: ExpressionReq):
    s = req.expression
    if not s: return invalid()
    if not s.strip(): return err(400, "ValidationError", "Expression cannot be empty")
    try:
        return EvaluateResp(result=evaluate_expression(s), expression=s)
    except ExprError as e:
        return expr_err(e, s)


@app.post("/api/tokenize", response_model=TokenizeResp, responses=ERRORS)
def tokenize_api(req: ExpressionReq):
    s = req.expression
    if not s: return invalid()
    try:
        return TokenizeResp(tokens=tokenize(s), expression=s)
    except ExprError as e:
        return expr_err(e, s)


@app.post("/api/parse", response_model=ParseResp, responses=ERRORS)
def parse_api(req: ExpressionReq):
    s = req.expression
    if not s: return invalid()
    try:
        return ParseResp(ast=parse(tokenize(s)), expression=s)
    except ExprError as e:
        return expr_err(e, s)


def main():
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("serving expr-gateway on http://%s:%d (docs at /api-docs)", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
