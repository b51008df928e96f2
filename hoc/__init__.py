"""
HOC: higher-order contracts with blame
"""

from .core.config import VERSION
from .core import (
    Blame,
    ContractChecker,
    ConfigurationError,
    ContractedFunction,
    ContractSyntaxError,
    ContractViolation,
    FlatContract,
    FunctionContract,
    PredicateFailure,
    WellFormednessError,
    ArityMismatch,
    attach,
    check,
    wrap,
)
from .combinators import and_c, arrow, as_contract, between_c, eq_c, flat, gt_c, lt_c, not_c, or_c
from .predicates import (
    PredicateRegistry,
    any_c,
    default_registry,
    even_c,
    integer_c,
    none_c,
    number_c,
    odd_c,
    positive_c,
)
from .parser import parse_contract
from .decorators import contract, contracted_functions

__version__ = VERSION
__all__ = [
    "ArityMismatch",
    "Blame",
    "ConfigurationError",
    "ContractChecker",
    "ContractSyntaxError",
    "ContractViolation",
    "ContractedFunction",
    "FlatContract",
    "FunctionContract",
    "PredicateFailure",
    "PredicateRegistry",
    "WellFormednessError",
    "and_c",
    "any_c",
    "arrow",
    "as_contract",
    "attach",
    "between_c",
    "check",
    "contract",
    "contracted_functions",
    "default_registry",
    "eq_c",
    "even_c",
    "flat",
    "gt_c",
    "integer_c",
    "lt_c",
    "none_c",
    "not_c",
    "number_c",
    "odd_c",
    "or_c",
    "parse_contract",
    "positive_c",
    "wrap",
]
