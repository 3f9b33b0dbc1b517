import enum
from dataclasses import dataclass
from typing import NoReturn, Optional, cast

from arith.tokenizer import OperatorPrecedence, Token, Tokenizer, TokenType, get_op_precedence
from arith.utils import EvaluationError, PrintableEnum, format_error_location


@dataclass
class ParserError(EvaluationError):
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        return format_error_location(f"[Parser error] {self.errmsg}", self.code, self.error_char_idx)


@dataclass
class UnexpectedTokenError(ParserError):
    found: Optional[Token] = None


@dataclass
class MismatchedParenthesisError(ParserError):
    expected: Optional[Token] = None
    found: Optional[Token] = None


@dataclass
class InvalidOperatorError(ParserError):
    found: Optional[Token] = None


class StreamExhaustedError(ParserError):
    pass


class BinaryOperator(PrintableEnum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    POW = enum.auto()


@dataclass
class BinaryOperation:
    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


class UnaryOperator(PrintableEnum):
    NEG = enum.auto()


@dataclass
class UnaryOperation:
    operator: UnaryOperator
    operand: "Expression"


Expression = float | BinaryOperation | UnaryOperation


BINARY_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
    TokenType.CARET: BinaryOperator.POW,
}

BRACKET_CLOSE_TOKEN = Token(type=TokenType.BRACKET_CLOSE, lexeme=")")


class Parser:
    """Precedence-climbing parser over a single lookahead token.

    Tokens are pulled from the tokenizer on demand, nothing is buffered
    besides ``current_token``. With ``right_associative_power`` the right
    operand of ``^`` binds at one class below its own, so ``2^3^2`` is
    ``2^(3^2)`` instead of ``(2^3)^2``.
    """

    def __init__(self, code: str, right_associative_power: bool = False) -> None:
        self.code = code
        self.right_associative_power = right_associative_power
        self._tokenizer = Tokenizer(code)
        self.current_token = next(self._tokenizer)
        self._current_token_idx = self._tokenizer.position
        if self.current_token.type is TokenType.EXPR_END:
            self._raise(UnexpectedTokenError, "Empty expression", found=self.current_token)

    def parse(self) -> Expression:
        expression = self.generate_ast(OperatorPrecedence.BASE)
        if self.current_token.type is TokenType.BRACKET_CLOSE:
            self._raise(MismatchedParenthesisError, "Unmatched closing bracket", found=self.current_token)
        if self.current_token.type is not TokenType.EXPR_END:
            self._raise(
                UnexpectedTokenError,
                f"Expected end of expression, found {self.current_token.type}",
                found=self.current_token,
            )
        return expression

    def generate_ast(self, min_precedence: OperatorPrecedence) -> Expression:
        left = self.parse_primary()
        while (
            get_op_precedence(self.current_token.type) > min_precedence
            and self.current_token.type is not TokenType.EXPR_END
        ):
            left = self._bind_operator(left)
        return left

    def parse_primary(self) -> Expression:
        token = self.current_token
        if token.type is TokenType.MINUS:
            self._advance()
            operand = self.generate_ast(OperatorPrecedence.NEGATION)
            return UnaryOperation(operator=UnaryOperator.NEG, operand=operand)
        elif token.type is TokenType.NUMBER:
            self._advance()
            return cast(float, token.value)
        elif token.type is TokenType.BRACKET_OPEN:
            self._advance()
            expression = self.generate_ast(OperatorPrecedence.BASE)
            self._expect(BRACKET_CLOSE_TOKEN)
            if self.current_token.type is TokenType.BRACKET_OPEN:
                # (a)(b) is read as (a) * (b)
                right = self.generate_ast(OperatorPrecedence.MUL_DIV)
                return BinaryOperation(operator=BinaryOperator.MUL, left=expression, right=right)
            return expression
        else:
            self._raise(UnexpectedTokenError, f"Operand expected, found {token.type}", found=token)

    def _bind_operator(self, left: Expression) -> Expression:
        operator_token = self.current_token
        operator = BINARY_OPERATORS.get(operator_token.type)
        # unreachable from parse(), generate_ast only binds tokens ranked above BASE
        if operator is None:
            self._raise(
                InvalidOperatorError,
                f"Binary operator expected, found {operator_token.type}",
                found=operator_token,
            )
        self._advance()

        precedence = get_op_precedence(operator_token.type)
        if operator is BinaryOperator.POW and self.right_associative_power:
            precedence = OperatorPrecedence(precedence - 1)
        right = self.generate_ast(precedence)
        return BinaryOperation(operator=operator, left=left, right=right)

    def _expect(self, expected: Token) -> None:
        if self.current_token.type is not expected.type:
            self._raise(
                MismatchedParenthesisError,
                f"Expected {expected.type}, found {self.current_token.type}",
                expected=expected,
                found=self.current_token,
            )
        self._advance()

    def _advance(self) -> None:
        try:
            self.current_token = next(self._tokenizer)
        except StopIteration:
            # parse() never advances past EXPR_END
            self._raise(StreamExhaustedError, "Token requested past the end of expression")
        self._current_token_idx = self._tokenizer.position

    def _raise(self, error_cls: type[ParserError], errmsg: str, **details: Optional[Token]) -> NoReturn:
        raise error_cls(errmsg, code=self.code, error_char_idx=self._current_token_idx, **details)


def parse(code: str, right_associative_power: bool = False) -> Expression:
    return Parser(code, right_associative_power=right_associative_power).parse()
