import dataclasses
import logging
import operator as op
import re
from collections import deque
from collections.abc import Callable

import numpy as np

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

INT32 = np.iinfo(np.int32)
OPERAND = re.compile(r"-?[0-9]+", re.ASCII)


@dataclasses.dataclass
class EvalError(Exception):
    position: int | None = None


@dataclasses.dataclass
class InvalidSyntax(EvalError):
    def __str__(self) -> str:
        if self.position is None:
            return "invalid syntax"
        return f"invalid syntax at {self.position}"


@dataclasses.dataclass
class InvalidToken(EvalError):
    token: str = ""

    def __str__(self) -> str:
        return f"invalid token at {self.position}"


@dataclasses.dataclass
class DivisionByZero(EvalError):
    def __str__(self) -> str:
        return f"division by zero at {self.position}"


@dataclasses.dataclass(frozen=True)
class Trace:
    position: int
    tokens: tuple[str, ...]
    stack: tuple[int, ...]

    def __str__(self) -> str:
        return f"t: {list(self.tokens)}, s: {list(self.stack)}"


def wrap(value: int) -> int:
    """Reduce an integer to two's-complement int32, as unchecked machine arithmetic would."""
    return int(np.int64(value).astype(np.int32))


def truncdiv(x: int, y: int) -> int:
    q = abs(x) // abs(y)
    return q if (x < 0) == (y < 0) else -q


def truncmod(x: int, y: int) -> int:
    # sign follows the dividend
    return x - y * truncdiv(x, y)


OPERATORS: dict[str, Callable[[int, int], int]] = {
    "+": op.add,
    "-": op.sub,
    "*": op.mul,
    "/": truncdiv,
    "%": truncmod,
}


def parse_operand(token: str) -> int | None:
    if not OPERAND.fullmatch(token):
        return None
    value = int(token)
    if not INT32.min <= value <= INT32.max:
        return None
    return value


@dataclasses.dataclass
class Calculator:
    verbose: bool = False
    sink: Callable[[Trace], object] = print

    def evaluate(self, formula: str) -> int:
        """
        Evaluate one RPN formula and return its int32 result.

        Raises InvalidSyntax on stack underflow or when the stack does not end
        with exactly one value, InvalidToken on an unknown operator and
        DivisionByZero when `/` or `%` gets a zero divisor.
        """
        tokens = formula.split()
        stack: deque[int] = deque()

        for pos, token in enumerate(tokens, 1):
            if (value := parse_operand(token)) is not None:
                stack.append(value)
            else:
                try:
                    y = stack.pop()
                    x = stack.pop()
                except IndexError:
                    raise self._fail(InvalidSyntax(pos), formula) from None
                if token not in OPERATORS:
                    raise self._fail(InvalidToken(pos, token), formula)
                try:
                    res = OPERATORS[token](x, y)
                except ZeroDivisionError:
                    raise self._fail(DivisionByZero(pos), formula) from None
                stack.append(wrap(res))

            if self.verbose:
                self.sink(Trace(pos, tuple(tokens[pos:]), tuple(stack)))

        if len(stack) != 1:
            raise self._fail(InvalidSyntax(), formula)

        return stack[0]

    @staticmethod
    def _fail(error: EvalError, formula: str) -> EvalError:
        logger.debug("%r: %s", formula, error)
        return error


def evaluate(formula: str, verbose: bool = False) -> int:
    return Calculator(verbose).evaluate(formula)
