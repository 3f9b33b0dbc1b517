import logging
import math
from typing import Callable

from arith.parser import BinaryOperation, BinaryOperator, Expression, Parser, UnaryOperation, UnaryOperator
from arith.utils import EvaluationError

logger = logging.getLogger(__name__)


BinaryOperationImpl = Callable[[float, float], float]
UnaryOperationImpl = Callable[[float], float]


def evaluate_expression(code: str, right_associative_power: bool = False) -> float:
    code = "".join(code.split())
    try:
        result = evaluate(Parser(code, right_associative_power=right_associative_power).parse())
    except RecursionError:
        raise EvaluationError("Expression is too deep or too long to evaluate") from None
    logger.debug("Computed %r = %s", code, result)
    return result


def evaluate(expression: Expression) -> float:
    if isinstance(expression, float):
        return expression
    elif isinstance(expression, BinaryOperation):
        left_res = evaluate(expression.left)
        right_res = evaluate(expression.right)
        return binary_impls[expression.operator](left_res, right_res)
    elif isinstance(expression, UnaryOperation):
        operand = evaluate(expression.operand)
        return unary_impls[expression.operator](operand)
    else:
        raise TypeError(f"Unexpected expression type: {expression!r}")


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _power(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        # magnitude overflow, only a negative base raised to an odd power stays negative
        return -math.inf if a < 0.0 and _is_odd_integer(b) else math.inf
    except ValueError:
        if a == 0.0:
            return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
        # negative base with a non-integer exponent
        return math.nan


binary_impls: dict[BinaryOperator, BinaryOperationImpl] = {
    BinaryOperator.ADD: lambda a, b: a + b,
    BinaryOperator.SUB: lambda a, b: a - b,
    BinaryOperator.MUL: lambda a, b: a * b,
    BinaryOperator.DIV: _divide,
    BinaryOperator.POW: _power,
}

unary_impls: dict[UnaryOperator, UnaryOperationImpl] = {
    UnaryOperator.NEG: lambda a: -a,
}
