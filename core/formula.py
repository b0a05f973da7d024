"""Arithmetic formulas over the member's basic salary, e.g. "basic * 3 - 500"."""
import logging
import math
import re
from typing import List, Tuple

from config.constants import BASIC_PLACEHOLDERS
from core.exceptions import FormulaError

logger = logging.getLogger(__name__)

_ALLOWED = re.compile(r"^[\d\s.+\-*/()]+$")
_LETTERS = re.compile(r"[a-zA-Z_]")
_OPERATOR_RUN = re.compile(r"[+*/]{2,}")

PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "neg": 3}

# token kinds
NUMBER = "number"
OPERATOR = "operator"
NEGATE = "neg"
PAREN = "paren"


def validate_formula(expression: str) -> Tuple[bool, str]:
    """Check a formula with the salary already substituted; returns (ok, error)"""
    if _LETTERS.search(expression):
        return False, ("Formula contains invalid characters or functions. "
                       "Only numbers and basic operators (+, -, *, /) are allowed.")

    if not _ALLOWED.match(expression):
        return False, ("Formula contains invalid characters. "
                       "Only numbers, operators (+, -, *, /), and parentheses are allowed.")

    balance = 0
    for ch in expression:
        if ch == "(":
            balance += 1
        elif ch == ")":
            balance -= 1
        if balance < 0:
            return False, "Formula has mismatched parentheses."
    if balance != 0:
        return False, "Formula has mismatched parentheses."

    if _OPERATOR_RUN.search(re.sub(r"\s+", "", expression)):
        return False, "Formula has invalid operator sequence."

    return True, ""


def tokenize(expression: str) -> List[Tuple[str, str]]:
    """Split into (kind, value) tokens; a leading or post-operator '-' is unary"""
    expression = re.sub(r"\s+", "", expression)
    tokens = []
    i = 0
    while i < len(expression):
        ch = expression[i]
        if ch.isdigit() or ch == ".":
            start = i
            while i < len(expression) and (expression[i].isdigit() or expression[i] == "."):
                i += 1
            tokens.append((NUMBER, expression[start:i]))
            continue

        if ch == "-" and (not tokens or tokens[-1][0] == OPERATOR or tokens[-1] == (PAREN, "(")):
            tokens.append((NEGATE, ch))
        elif ch in "()":
            tokens.append((PAREN, ch))
        elif ch in "+-*/":
            tokens.append((OPERATOR, ch))
        i += 1
    return tokens


def to_postfix(tokens: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """Shunting-yard conversion to reverse Polish notation"""
    output = []
    stack = []
    for kind, value in tokens:
        if kind == NUMBER:
            output.append((kind, value))
        elif kind == NEGATE:
            stack.append((kind, value))
        elif kind == OPERATOR:
            while stack and stack[-1][0] != PAREN and (
                stack[-1][0] == NEGATE
                or PRECEDENCE[stack[-1][1]] >= PRECEDENCE[value]
            ):
                output.append(stack.pop())
            stack.append((kind, value))
        elif value == "(":
            stack.append((kind, value))
        else:
            while stack and stack[-1] != (PAREN, "("):
                output.append(stack.pop())
            if stack:
                stack.pop()

    while stack:
        output.append(stack.pop())
    return output


def evaluate_postfix(postfix: List[Tuple[str, str]]) -> float:
    stack = []
    for kind, value in postfix:
        if kind == NUMBER:
            try:
                stack.append(float(value))
            except ValueError:
                raise FormulaError(f"Invalid number '{value}'")
        elif kind == NEGATE:
            if not stack:
                raise FormulaError("Invalid expression structure")
            stack.append(-stack.pop())
        elif kind == OPERATOR:
            if len(stack) < 2:
                raise FormulaError("Invalid expression structure")
            b = stack.pop()
            a = stack.pop()
            if value == "+":
                stack.append(a + b)
            elif value == "-":
                stack.append(a - b)
            elif value == "*":
                stack.append(a * b)
            else:
                if b == 0:
                    raise FormulaError("Division by zero in formula")
                stack.append(a / b)
        else:
            # unmatched "(" left on the operator stack
            raise FormulaError("Invalid expression structure")

    if len(stack) != 1:
        raise FormulaError("Invalid expression structure")

    result = stack[0]
    if not math.isfinite(result):
        raise FormulaError("Formula evaluation resulted in invalid value (INF or NaN)")
    return result


def substitute_basic(formula: str, basic: float) -> str:
    expression = formula
    for placeholder in BASIC_PLACEHOLDERS:
        # fixed-point so the salary never renders in exponent notation
        expression = expression.replace(placeholder, f"{float(basic):f}")
    return expression


def evaluate_formula(formula: str, basic: float) -> float:
    """Evaluate a formula with `basic` / `{basic}` bound to the salary.

    Raises:
        FormulaError: invalid characters, unbalanced parentheses, bad
            operator sequence, division by zero or a non-finite result.
    """
    expression = substitute_basic(formula, basic)

    ok, error = validate_formula(expression)
    if not ok:
        raise FormulaError(error, formula)

    try:
        return evaluate_postfix(to_postfix(tokenize(expression)))
    except FormulaError as e:
        logger.debug("Formula %r failed for basic=%s: %s", formula, basic, e.message)
        raise FormulaError(e.message, formula) from e
