import pytest

from arith.parser import (
    BinaryOperation,
    BinaryOperator,
    Expression,
    InvalidOperatorError,
    MismatchedParenthesisError,
    Parser,
    ParserError,
    StreamExhaustedError,
    UnaryOperation,
    UnaryOperator,
    UnexpectedTokenError,
    parse,
)
from arith.tokenizer import EXPR_END_TOKEN, OperatorPrecedence, Token, TokenizerError, TokenType
from arith.utils import EvaluationError

ADD = BinaryOperator.ADD
SUB = BinaryOperator.SUB
MUL = BinaryOperator.MUL
DIV = BinaryOperator.DIV
POW = BinaryOperator.POW


def binop(operator: BinaryOperator, left: Expression, right: Expression) -> BinaryOperation:
    return BinaryOperation(operator=operator, left=left, right=right)


def neg(operand: Expression) -> UnaryOperation:
    return UnaryOperation(operator=UnaryOperator.NEG, operand=operand)


@pytest.mark.parametrize(
    "code, expected_ast",
    [
        pytest.param("1", 1.0),
        pytest.param("1+2", binop(ADD, 1.0, 2.0)),
        pytest.param("1-2", binop(SUB, 1.0, 2.0)),
        pytest.param("1*2", binop(MUL, 1.0, 2.0)),
        pytest.param("1/2", binop(DIV, 1.0, 2.0)),
        pytest.param("1^2", binop(POW, 1.0, 2.0)),
        pytest.param("-1", neg(1.0)),
        pytest.param("--1", neg(neg(1.0))),
        pytest.param("(((1)))", 1.0),
        pytest.param("2*3+4", binop(ADD, binop(MUL, 2.0, 3.0), 4.0)),
        pytest.param("2+3*4", binop(ADD, 2.0, binop(MUL, 3.0, 4.0))),
        pytest.param("2^3+1", binop(ADD, binop(POW, 2.0, 3.0), 1.0)),
        pytest.param("2*3^2", binop(MUL, 2.0, binop(POW, 3.0, 2.0))),
        pytest.param("10-2-3", binop(SUB, binop(SUB, 10.0, 2.0), 3.0)),
        pytest.param("8/2/2", binop(DIV, binop(DIV, 8.0, 2.0), 2.0)),
        pytest.param("2^3^2", binop(POW, binop(POW, 2.0, 3.0), 2.0), id="power is left associative"),
        pytest.param("(2+3)*4", binop(MUL, binop(ADD, 2.0, 3.0), 4.0)),
        pytest.param("-(2+3)", neg(binop(ADD, 2.0, 3.0))),
        pytest.param("-5+10", binop(ADD, neg(5.0), 10.0)),
        pytest.param("-2^2", binop(POW, neg(2.0), 2.0), id="negation binds tighter than power"),
        pytest.param("2^-1", binop(POW, 2.0, neg(1.0))),
        pytest.param("1--1", binop(SUB, 1.0, neg(1.0))),
        pytest.param("(2)(3)", binop(MUL, 2.0, 3.0), id="implicit multiplication"),
        pytest.param("(2)(3)(4)", binop(MUL, 2.0, binop(MUL, 3.0, 4.0))),
        pytest.param("(2)(3)*4", binop(MUL, binop(MUL, 2.0, 3.0), 4.0)),
        pytest.param("(2)(3)+4", binop(ADD, binop(MUL, 2.0, 3.0), 4.0)),
        pytest.param("(2)(3^2)", binop(MUL, 2.0, binop(POW, 3.0, 2.0))),
        pytest.param("1+(2)(3)", binop(ADD, 1.0, binop(MUL, 2.0, 3.0))),
    ],
)
def test_parse(code: str, expected_ast: Expression) -> None:
    assert parse(code) == expected_ast


@pytest.mark.parametrize(
    "code, expected_ast",
    [
        pytest.param("2^3^2", binop(POW, 2.0, binop(POW, 3.0, 2.0))),
        pytest.param("2^3^2^1", binop(POW, 2.0, binop(POW, 3.0, binop(POW, 2.0, 1.0)))),
        pytest.param("2^3*4", binop(MUL, binop(POW, 2.0, 3.0), 4.0)),
        pytest.param("10-2-3", binop(SUB, binop(SUB, 10.0, 2.0), 3.0)),
    ],
)
def test_parse_right_associative_power(code: str, expected_ast: Expression) -> None:
    assert parse(code, right_associative_power=True) == expected_ast


def test_parser_holds_single_lookahead() -> None:
    parser = Parser("12+3")
    assert parser.current_token == Token(TokenType.NUMBER, "12", 12.0)
    assert parser.parse_primary() == 12.0
    assert parser.current_token == Token(TokenType.PLUS, "+")


@pytest.mark.parametrize(
    "code, error_cls, error_char_idx",
    [
        pytest.param("", UnexpectedTokenError, 0, id="empty"),
        pytest.param("+1", UnexpectedTokenError, 0, id="leading binary operator"),
        pytest.param("1+", UnexpectedTokenError, 2, id="missing right operand"),
        pytest.param("1+*2", UnexpectedTokenError, 2, id="two operators"),
        pytest.param("()", UnexpectedTokenError, 1, id="empty brackets"),
        pytest.param("(2)3", UnexpectedTokenError, 3, id="number after bracket"),
        pytest.param("(1+2", MismatchedParenthesisError, 4, id="missing closing bracket"),
        pytest.param("((1)", MismatchedParenthesisError, 4, id="missing outer closing bracket"),
        pytest.param("(1+2))", MismatchedParenthesisError, 5, id="extra closing bracket"),
        pytest.param(")", UnexpectedTokenError, 0, id="lone closing bracket"),
    ],
)
def test_parse_error(code: str, error_cls: type[ParserError], error_char_idx: int) -> None:
    with pytest.raises(error_cls) as exc_info:
        parse(code)
    assert exc_info.value.error_char_idx == error_char_idx
    assert isinstance(exc_info.value, EvaluationError)


def test_mismatched_parenthesis_reports_expected_and_found() -> None:
    with pytest.raises(MismatchedParenthesisError) as exc_info:
        parse("(1+2")
    assert exc_info.value.expected == Token(TokenType.BRACKET_CLOSE, ")")
    assert exc_info.value.found == EXPR_END_TOKEN
    assert str(exc_info.value) == "\n".join(
        [
            "[Parser error] Expected BRACKET_CLOSE, found EXPR_END",
            "(1+2",
            "    ^",
        ]
    )


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("x", id="unscannable first character"),
        pytest.param("1+x", id="unscannable later character"),
        pytest.param("2(3)", id="number followed by bracket"),
    ],
)
def test_scan_failure_aborts_parse(code: str) -> None:
    with pytest.raises(TokenizerError):
        parse(code)


def test_invalid_operator_in_binding_position() -> None:
    parser = Parser("(1)")
    with pytest.raises(InvalidOperatorError) as exc_info:
        parser._bind_operator(1.0)
    assert exc_info.value.found == Token(TokenType.BRACKET_OPEN, "(")


def test_advancing_past_end_marker() -> None:
    parser = Parser("1")
    assert parser.generate_ast(OperatorPrecedence.BASE) == 1.0
    assert parser.current_token == EXPR_END_TOKEN
    with pytest.raises(StreamExhaustedError):
        parser._advance()
