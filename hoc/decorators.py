"""
Decorators for attaching contracts to function definitions.

Usage:
    @contract("(-> integer? integer? integer?)")
    def add(x, y):
        return x + y

    add(10, 11)      # 21
    add(10.1, 11)    # ContractViolation blaming the call site

Higher-order contracts:
    @contract("(->/c (->/c even? odd?) even? even?)")
    def apply_then_inc(f, x):
        return f(x) + 1
"""

import inspect
from typing import Callable, List, Optional

from .combinators import ContractSpec, as_contract
from .core.checker import ContractedFunction, default_checker, is_contracted
from .core.errors import WellFormednessError
from .core.models import FunctionContract, SourceLocation
from .predicates import PredicateRegistry


def contract(spec: ContractSpec,
             name: Optional[str] = None,
             record_history: Optional[bool] = None,
             registry: Optional[PredicateRegistry] = None) -> Callable[[Callable], ContractedFunction]:
    """
    Attach a function contract to the decorated function.

    Args:
        spec: FunctionContract, or notation such as "(-> integer? integer?)"
        name: Name used in violation reports (defaults to the function name)
        record_history: Keep a diagnostic trace of applications
        registry: Predicate names available to the notation

    Raises:
        WellFormednessError: if spec is not a function contract
        ArityMismatch: if the function cannot take the contract's arguments
    """
    function_contract = as_contract(spec, registry)
    if not isinstance(function_contract, FunctionContract):
        raise WellFormednessError(f"@contract needs a function contract, got {function_contract}")

    def decorator(func: Callable) -> ContractedFunction:
        definition_site = SourceLocation.of_callable(func) or SourceLocation.capture(2)
        return default_checker.wrap(
            func,
            function_contract,
            definition_site=definition_site,
            name=name,
            record_history=record_history,
        )
    return decorator


def contracted_functions(module) -> List[ContractedFunction]:
    """
    Find contracted functions defined at the top level of a loaded module.

    Returns:
        ContractedFunctions in name order
    """
    return [obj for _, obj in inspect.getmembers(module, is_contracted)]
