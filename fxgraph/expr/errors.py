"""
Expression Errors

Error types raised while building and evaluating expressions.
"""


class ExprError(Exception):
    """Base class for all expression errors"""


class GraphEvalError(ExprError):
    """
    A graph node or graph could not be evaluated.

    Raised for arity mismatches between the inputs a node declares and the
    inputs it was given, and for graphs that cannot be ordered for evaluation.
    The message describes what was expected and what was found.
    """


class InvalidExprHandleError(ExprError):
    """A handle does not reference an expression of the module it was used with"""
