import enum
from dataclasses import dataclass
from typing import Iterator, Optional

from arith.utils import EvaluationError, PrintableEnum, PrintableIntEnum, format_error_location


@dataclass
class TokenizerError(EvaluationError):
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        return format_error_location(f"[Tokenizer error] {self.errmsg}", self.code, self.error_char_idx)


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    CARET = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    EXPR_END = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    value: Optional[float] = None

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


EXPR_END_TOKEN = Token(type=TokenType.EXPR_END, lexeme="")


class OperatorPrecedence(PrintableIntEnum):
    BASE = 0
    ADD_SUB = 1
    MUL_DIV = 2
    POWER = 3
    NEGATION = 4


def get_op_precedence(token_type: TokenType) -> OperatorPrecedence:
    return {
        TokenType.PLUS: OperatorPrecedence.ADD_SUB,
        TokenType.MINUS: OperatorPrecedence.ADD_SUB,
        TokenType.STAR: OperatorPrecedence.MUL_DIV,
        TokenType.SLASH: OperatorPrecedence.MUL_DIV,
        TokenType.CARET: OperatorPrecedence.POWER,
    }.get(token_type, OperatorPrecedence.BASE)


DIGITS = "0123456789"


def _is_valid_in_number(s: str) -> bool:
    return s in DIGITS or s == "."


SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
}


class Tokenizer(Iterator[Token]):
    """Lazily scans an expression with whitespace already removed.

    Yields one token per ``next()`` call, then the end marker exactly once,
    then stops. Unknown characters raise ``TokenizerError``.
    """

    def __init__(self, code: str) -> None:
        self.code = code
        self.position = 0
        self._i = 0
        self._exhausted = False

    def __next__(self) -> Token:
        if self._exhausted:
            raise StopIteration

        code = self.code
        i = self._i
        self.position = i
        if i >= len(code):
            self._exhausted = True
            return EXPR_END_TOKEN

        if code[i] in DIGITS:
            number_end_idx = i + 1
            while number_end_idx < len(code) and _is_valid_in_number(code[number_end_idx]):
                number_end_idx += 1
            if number_end_idx < len(code) and code[number_end_idx] == "(":
                raise TokenizerError(
                    "Number can't be directly followed by an opening bracket",
                    code=code,
                    error_char_idx=number_end_idx,
                )
            lexeme = code[i:number_end_idx]
            try:
                value = float(lexeme)
            except ValueError:
                raise TokenizerError(f"Malformed number: {lexeme!r}", code=code, error_char_idx=i) from None
            self._i = number_end_idx
            return Token(type=TokenType.NUMBER, lexeme=lexeme, value=value)
        elif code[i] in SINGLE_CHAR_TOKENS:
            self._i = i + 1
            return Token(type=SINGLE_CHAR_TOKENS[code[i]], lexeme=code[i])
        else:
            raise TokenizerError(f"Unexpected character: {code[i]!r}", code=code, error_char_idx=i)


def tokenize(code: str) -> list[Token]:
    return list(Tokenizer(code))
