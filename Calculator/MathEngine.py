# MathEngine.py
"""
Core calculation engine of the calculator.

Pipeline
--------
1) Preprocessor: rewrites every unary minus into the negation marker '~'.
2) Tokenizer: scans the normalized string left to right and yields typed tokens,
   inserting '*' where two values stand next to each other (e.g. '2PI', ')(').
3) Evaluator: a shunting-yard pass over an operand stack and an operator stack.
   Tokens are consumed while they are produced, so scanning and reducing happen
   in one pass. Functions and brackets are resolved at their closing ')'.
4) Rounding: the single remaining operand is rounded half away from zero.

All state of one calculation lives in an `Evaluation` object created per call,
so calls never see each other's stacks.
"""

import math
from enum import Enum

from . import config_manager as config_manager
from . import ScientificEngine
from . import error as E
from .log import log, set_debug

NEGATION = "~"

# Supported operators and their precedence (higher binds tighter)
Operations = {
    "+": 2,
    "-": 2,
    "*": 3,
    "/": 4,
    "^": 5,
    "E": 5,
    NEGATION: 6,
}

# A '-' right after one of these (or at position 0) is a negation
UNARY_CONTEXT = "+*/^E("

DIGITS = "0123456789."


# -----------------------------
# Tokens
# -----------------------------

class TokenType(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"
    FACTORIAL = "factorial"
    PERCENT = "percent"
    CONSTANT = "constant"
    FUNCTION = "function"


# Tokens after which a following value means multiplication
VALUE_TOKENS = (
    TokenType.NUMBER,
    TokenType.RPAREN,
    TokenType.CONSTANT,
    TokenType.FACTORIAL,
    TokenType.PERCENT,
)


class Token:
    """One lexeme of the expression with the position it started at."""
    def __init__(self, token_type, value, position, implicit=False):
        self.type = token_type
        self.value = value
        self.position = position
        self.implicit = implicit

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type, self.value, self.implicit) == (other.type, other.value, other.implicit)

    def __repr__(self):
        if self.implicit:
            return f"Token({self.type.name}, {self.value!r}, {self.position}, implicit)"
        return f"Token({self.type.name}, {self.value!r}, {self.position})"


def precedence(operator):
    """Return the rank of an operator-stack entry; '(' and functions rank -1."""
    return Operations.get(operator, -1)


# -----------------------------
# Preprocessor
# -----------------------------

def normalize_minus(problem):
    """Replace every minus that means negation with NEGATION.

    A minus is a negation at position 0 or right after one of UNARY_CONTEXT.
    Every other minus stays a subtraction.
    """
    if NEGATION in problem:
        rest = problem[problem.index(NEGATION):]
        raise E.UnsupportedOperationError(E.ERROR_MESSAGES["2004"] + rest, operation=rest, code="2004")

    normalized = []
    for b, current_char in enumerate(problem):
        if current_char == "-" and (b == 0 or problem[b - 1] in UNARY_CONTEXT):
            normalized.append(NEGATION)
        else:
            normalized.append(current_char)
    return "".join(normalized)


# -----------------------------
# Tokenizer
# -----------------------------

def read_number(problem, b):
    """Return (value, position_after_number) for the digit run starting at b."""
    start = b
    while b < len(problem) and problem[b] in DIGITS:
        b += 1
    str_number = problem[start:b]

    if str_number.count(".") > 1:
        raise E.SyntaxError(E.ERROR_MESSAGES["3008"] + f" {str_number}", code="3008")
    try:
        return float(str_number), b
    except ValueError:
        raise E.SyntaxError(E.ERROR_MESSAGES["3012"] + str_number, code="3012")


def tokenize(problem):
    """Yield the tokens of a normalized expression (see normalize_minus).

    Notes:
    - A number right after ')' or a constant gets an implicit '*' in front.
    - '(', constants and functions get an implicit '*' after any value
      (number, ')', constant, '!' or '%'), never after an operator or '('.
    - 'e' is Euler's number unless the next character is 'x' ("exp(").
    """
    previous = None
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Numbers ---
        if current_char in DIGITS:
            if previous in (TokenType.RPAREN, TokenType.CONSTANT):
                yield Token(TokenType.OPERATOR, "*", b, implicit=True)
            value, end = read_number(problem, b)
            yield Token(TokenType.NUMBER, value, b)
            previous = TokenType.NUMBER
            b = end
            continue

        # --- Operators and grouping ---
        if current_char in Operations:
            yield Token(TokenType.OPERATOR, current_char, b)
            previous = TokenType.OPERATOR
            b += 1

        elif current_char == "(":
            if previous in VALUE_TOKENS:
                yield Token(TokenType.OPERATOR, "*", b, implicit=True)
            yield Token(TokenType.LPAREN, "(", b)
            previous = TokenType.LPAREN
            b += 1

        elif current_char == ")":
            yield Token(TokenType.RPAREN, ")", b)
            previous = TokenType.RPAREN
            b += 1

        # --- Postfix operators ---
        elif current_char == "!":
            yield Token(TokenType.FACTORIAL, "!", b)
            previous = TokenType.FACTORIAL
            b += 1

        elif current_char == "%":
            yield Token(TokenType.PERCENT, "%", b)
            previous = TokenType.PERCENT
            b += 1

        # --- Constants ---
        elif ScientificEngine.isPi(problem, b) or ScientificEngine.isE(problem, b):
            lexeme = "PI" if current_char == "P" else "e"
            if previous in VALUE_TOKENS:
                yield Token(TokenType.OPERATOR, "*", b, implicit=True)
            yield Token(TokenType.CONSTANT, ScientificEngine.CONSTANTS[lexeme], b)
            previous = TokenType.CONSTANT
            b += len(lexeme)

        # --- Functions (fallback) ---
        else:
            if previous in VALUE_TOKENS:
                yield Token(TokenType.OPERATOR, "*", b, implicit=True)
            function = ScientificEngine.match_function(problem, b)
            yield Token(TokenType.FUNCTION, function, b)
            previous = TokenType.FUNCTION
            b += len(function)


# -----------------------------
# Arithmetic
# -----------------------------

def power(base, exponent):
    """Real power via math.pow; complex results and overflow are errors."""
    if base == 0 and exponent < 0:
        raise E.ArithmeticError(E.ERROR_MESSAGES["3003"] + f" {base}^{exponent}", code="3003")
    try:
        return math.pow(base, exponent)
    except ValueError:
        raise E.DomainError(E.ERROR_MESSAGES["3034"] + f" {base}^{exponent}", code="3034")
    except OverflowError:
        raise E.ArithmeticError(E.ERROR_MESSAGES["3026"], code="3026")


def binary_operation(left_value, operator, right_value):
    """Apply a binary operator: left <operator> right."""
    if operator == '+':
        return left_value + right_value
    elif operator == '-':
        return left_value - right_value
    elif operator == '*':
        return left_value * right_value
    elif operator == '/':
        if right_value == 0:
            raise E.ArithmeticError(E.ERROR_MESSAGES["3003"], code="3003")
        return left_value / right_value
    elif operator == '^':
        return power(left_value, right_value)
    elif operator == 'E':
        # Scientific notation: left * 10^right
        return left_value * power(10.0, right_value)
    else:
        raise E.SyntaxError(E.ERROR_MESSAGES["3004"] + operator, code="3004")


def factorial(number):
    """Return number! for a non-negative integral float, computed iteratively."""
    ergebnis = 1.0
    for factor in range(2, int(number) + 1):
        ergebnis *= factor
        if math.isinf(ergebnis):
            raise E.ArithmeticError(E.ERROR_MESSAGES["3026"], code="3026")
    return ergebnis


def round_half_away(value, precision=3):
    """Round to `precision` decimal places, halves away from zero.

    Negative precision rounds to tens, hundreds, ... A negative zero
    result is returned as 0.0.
    """
    if not math.isfinite(value):
        raise E.ArithmeticError(E.ERROR_MESSAGES["3026"], code="3026")

    try:
        corrector = 10.0 ** precision
    except OverflowError:
        # More decimals than a float can hold
        return value + 0.0
    if corrector == 0:
        return 0.0

    scaled = value * corrector
    if not math.isfinite(scaled):
        return value + 0.0

    # magnitude - ganzzahl is exact, unlike magnitude + 0.5
    magnitude = abs(scaled)
    ganzzahl = math.floor(magnitude)
    if magnitude - ganzzahl >= 0.5:
        ganzzahl += 1

    gerundet = math.copysign(ganzzahl / corrector, value)
    if gerundet == 0:
        return 0.0
    return gerundet


# -----------------------------
# Evaluator (shunting yard)
# -----------------------------

class Evaluation:
    """Operand and operator stacks of a single evaluate() call."""
    def __init__(self):
        self.operands = []
        self.operators = []

    def pop_operand(self):
        if not self.operands:
            raise E.SyntaxError(E.ERROR_MESSAGES["3027"], code="3027")
        return self.operands.pop()

    def feed(self, token):
        """Drive the stacks with one token."""
        if token.type in (TokenType.NUMBER, TokenType.CONSTANT):
            self.operands.append(token.value)
        elif token.type == TokenType.OPERATOR:
            self.safe_push(token.value)
        elif token.type == TokenType.LPAREN:
            self.operators.append("(")
        elif token.type == TokenType.FUNCTION:
            self.operators.append(token.value)
        elif token.type == TokenType.RPAREN:
            self.resolve_bracket()
        elif token.type == TokenType.FACTORIAL:
            self.factorial()
        elif token.type == TokenType.PERCENT:
            self.percentage()

    def reduce(self, operator):
        """Pop the operand(s) of `operator`, apply it and push the result."""
        if operator == NEGATION:
            self.operands.append(-self.pop_operand())
            return
        right_value = self.pop_operand()
        left_value = self.pop_operand()
        ergebnis = binary_operation(left_value, operator, right_value)
        log.debug("Reduced %s %s %s = %s", left_value, operator, right_value, ergebnis)
        self.operands.append(ergebnis)

    def safe_push(self, operator):
        """Push an operator, first reducing everything that binds at least as tight.

        - Negation is always pushed as is ('2^-3', '-(-3)').
        - A binary operator without any operand yet is dropped ('*3' is 3).
        - A pending negation is left alone by '^' and 'E', so '-3^2' is -(3^2).
        """
        if operator == NEGATION:
            self.operators.append(operator)
            return

        if not self.operands:
            log.debug("No left operand for '%s', ignored", operator)
            return

        incoming = precedence(operator)
        while self.operators and incoming <= precedence(self.operators[-1]):
            if self.operators[-1] == NEGATION and operator in ("^", "E"):
                break
            self.reduce(self.operators.pop())
        self.operators.append(operator)

    def resolve_bracket(self):
        """Reduce back to the matching '(' or function; apply the function."""
        while True:
            if not self.operators:
                raise E.SyntaxError(E.ERROR_MESSAGES["3000"], code="3000")

            operator = self.operators.pop()
            if operator == "(":
                return
            if ScientificEngine.isFunction(operator):
                ergebnis = ScientificEngine.apply_function(operator, self.pop_operand())
                log.debug("Function %s) = %s", operator, ergebnis)
                self.operands.append(ergebnis)
                return
            self.reduce(operator)

    def factorial(self):
        if not self.operands:
            raise E.DomainError(E.ERROR_MESSAGES["3032"], code="3032")

        number = self.operands.pop()
        if not number.is_integer():
            raise E.DomainError(E.ERROR_MESSAGES["3031"] + str(number), code="3031")

        # Negative integers keep their sign: (-3)! = -(3!)
        ergebnis = factorial(abs(number))
        if number < 0:
            ergebnis = -ergebnis
        self.operands.append(ergebnis)

    def percentage(self):
        if not self.operands:
            raise E.SyntaxError(E.ERROR_MESSAGES["3033"], code="3033")
        self.operands.append(self.operands.pop() / 100)

    def finish(self):
        """Drain the operator stack and return the single remaining operand."""
        while self.operators:
            operator = self.operators.pop()
            if operator == "(" or ScientificEngine.isFunction(operator):
                raise E.SyntaxError(E.ERROR_MESSAGES["3009"] + operator, code="3009")
            self.reduce(operator)

        if len(self.operands) != 1:
            raise E.SyntaxError(E.ERROR_MESSAGES["3012"] + f"{len(self.operands)} values left", code="3012")
        return self.operands.pop()


# -----------------------------
# Public entry point
# -----------------------------

def evaluate(problem, precision=None):
    """Main API: normalize → tokenize + reduce → round.

    Args:
        problem: the expression, e.g. "2PI" or "log100(1000)".
        precision: decimal places of the result; None uses the
            'decimal_places' setting (3 by default).

    Raises:
        MathError subclasses (SyntaxError, DomainError, ArithmeticError,
        UnsupportedOperationError, BaseNotFoundError) with `equation` set.
    """
    settings = config_manager.load_setting_value("all")
    set_debug(settings["debug"])
    if precision is None:
        precision = settings["decimal_places"]

    try:
        normalized = normalize_minus(problem)
        log.debug("Normalized: %s", normalized)

        evaluation = Evaluation()
        for token in tokenize(normalized):
            log.debug("%r", token)
            evaluation.feed(token)
        ergebnis = evaluation.finish()

        result = round_half_away(ergebnis, precision)
        log.debug("Result: %s (unrounded %s)", result, ergebnis)
        return result

    # Re-raise our domain errors after attaching the source equation
    except E.MathError as e:
        e.equation = problem
        log.info("%s %s: %s [%s]", e.code, e.category, e.message, problem)
        raise e
    # Convert unexpected Python exceptions to our unified error type
    except (ValueError, ZeroDivisionError, OverflowError, TypeError) as e:
        raise E.MathError(message=E.ERROR_MESSAGES["9999"] + str(e), code="9999", equation=problem) from e
