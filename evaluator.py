from models import ASTNode, BinaryExpr, ErrorKind, ExprError, IntegerLiteral, UnaryExpr


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero, unlike Python's `//`."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def apply(n: BinaryExpr, left: int, right: int) -> int:
    if n.operator == "+": return left + right
    if n.operator == "-": return left - right
    if n.operator == "*": return left * right
    if right == 0:
        raise ExprError(ErrorKind.EVAL, "Division by zero", n.index)
    return trunc_div(left, right)


def evaluate(root: ASTNode) -> int:
    # post-order walk on an explicit stack, left operand before right,
    # so tree depth is bounded by memory rather than the interpreter stack
    todo = [(root, False)]; vals = []
    while todo:
        n, ready = todo.pop()
        if isinstance(n, IntegerLiteral):
            vals.append(n.value)
        elif isinstance(n, UnaryExpr):
            if ready: vals.append(-vals.pop())
            else: todo += [(n, True), (n.operand, False)]
        elif isinstance(n, BinaryExpr):
            if ready:
                right = vals.pop(); left = vals.pop()
                vals.append(apply(n, left, right))
            else: todo += [(n, True), (n.right, False), (n.left, False)]
        else:
            raise TypeError(f"Unknown node {type(n).__name__}")
    return vals.pop()
