# ScientificEngine
import math
import re

from . import error as E


# Constants by lexeme. 'e' only counts as a constant when it is not the start of "exp(".
CONSTANTS = {
    "PI": math.pi,
    "e": math.e,
}

# Fixed function names, tried in this order before the variable-base logarithm.
FUNCTIONS = {
    "sin(": math.sin,
    "cos(": math.cos,
    "tan(": math.tan,
    "asin(": math.asin,
    "acos(": math.acos,
    "atan(": math.atan,
    "sinh(": math.sinh,
    "cosh(": math.cosh,
    "tanh(": math.tanh,
    "log2(": math.log2,
    "log10(": math.log10,
    "ln(": math.log,
    "sqrt(": math.sqrt,
    "exp(": math.exp,
}

LOG_PREFIX = "log"
LOG_BASE = re.compile(r"log[0-9.]+\(")


def isPi(problem, index):
    """Return True if the two-character constant PI starts at index."""
    return problem.startswith("PI", index)


def isE(problem, index):
    """Return True if Euler's number starts at index (an 'e' not followed by 'x')."""
    if problem[index] != "e":
        return False
    return index + 1 == len(problem) or problem[index + 1] != "x"


def match_function(problem, index):
    """Return the function lexeme (e.g. 'sin(' or 'log100(') starting at index.

    Raises:
        BaseNotFoundError: 'log' prefix that is not followed by a base and '('.
        UnsupportedOperationError: nothing in the table starts here.
    """
    for name in FUNCTIONS:
        if problem.startswith(name, index):
            return name

    if problem.startswith(LOG_PREFIX, index):
        found = LOG_BASE.match(problem, index)
        if found is None:
            raise E.BaseNotFoundError(E.ERROR_MESSAGES["2001"] + problem[index:], code="2001")
        return found.group()

    rest = problem[index:]
    raise E.UnsupportedOperationError(E.ERROR_MESSAGES["2004"] + rest, operation=rest, code="2004")


def log_base(function):
    """Parse the base out of a variable-base logarithm lexeme ('log2.5(' -> 2.5)."""
    try:
        return float(function[len(LOG_PREFIX):-1])
    except ValueError:
        raise E.BaseNotFoundError(E.ERROR_MESSAGES["2002"] + f" {function}", code="2002")


def isFunction(token):
    """Return True if the operator-stack entry is a function lexeme."""
    return token in FUNCTIONS or LOG_BASE.fullmatch(token) is not None


def apply_function(function, value):
    """Evaluate a function lexeme on one argument (radians for all angles)."""
    try:
        if function in FUNCTIONS:
            return FUNCTIONS[function](value)
        return math.log(value, log_base(function))

    except ValueError:
        raise E.DomainError(E.ERROR_MESSAGES["2003"] + f"{function}{value})", code="2003")
    except (OverflowError, ZeroDivisionError):
        raise E.ArithmeticError(E.ERROR_MESSAGES["2005"] + f"{function}{value})", code="2005")
