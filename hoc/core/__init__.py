"""
Contract data model, blame and checking
"""

from .blame import Blame
from .checker import ContractChecker, ContractedFunction, attach, check, default_checker, is_contracted, wrap
from .errors import (
    ArityMismatch,
    ContractSyntaxError,
    ContractViolation,
    ConfigurationError,
    HocError,
    PredicateFailure,
    WellFormednessError,
)
from .models import (
    ApplicationRecord,
    ApplicationState,
    Contract,
    FlatContract,
    FunctionContract,
    Party,
    Polarity,
    Position,
    Role,
    SourceLocation,
)

__all__ = [
    "ApplicationRecord",
    "ApplicationState",
    "ArityMismatch",
    "Blame",
    "Contract",
    "ContractChecker",
    "ContractSyntaxError",
    "ConfigurationError",
    "ContractViolation",
    "ContractedFunction",
    "FlatContract",
    "FunctionContract",
    "HocError",
    "Party",
    "Polarity",
    "Position",
    "PredicateFailure",
    "Role",
    "SourceLocation",
    "WellFormednessError",
    "attach",
    "check",
    "default_checker",
    "is_contracted",
    "wrap",
]
