class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

    @property
    def category(self):
        """Main error group of the code (first digit), e.g. "Calculator Error"."""
        return Error_Dictionary.get(self.code[:1], Error_Dictionary["9"])

class SyntaxError(MathError):
    pass

class DomainError(MathError):
    pass

class ArithmeticError(MathError):
    pass

class UnsupportedOperationError(MathError):
    def __init__(self, message, operation="", code="2004", equation=None):
        super().__init__(message, code=code, equation=equation)
        self.operation = operation

class BaseNotFoundError(MathError):
    pass



Error_Dictionary= {

    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "5" : "Configuration Error",
    "9" : "Unexpected Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2001" : "Logarithm base not found: ", # + Given token
    "2002" : "Invalid Number or Base in Logarithm.",
    "2003" : "Math domain error in function: ", # + function
    "2004" : "Unsupported Operation at: ", # + Rest of the problem
    "2005" : "Function result too large: ", # + function


    "3000" : "Missing Opening Bracket.",
    "3003" : "Division by Zero",
    "3004" : "Invalid Operator: ", # + operator
    "3008" : "More than one '.' in one number.",
    "3009" : "Missing ')'. ",
    "3012" : "Invalid expression: ", # + Expression
    "3026" : "Number too big.",
    "3027" : "Missing Number.",
    "3031" : "Factorial of a non-integer: ", # + Number
    "3032" : "Missing Number before '!'.",
    "3033" : "Missing Number before '%'.",
    "3034" : "Power outside of the real domain.",


    "5000" : "Configuration could not be read: ", # + path


    "9999" : "Unexpected Error: " #+error
}
