"""
Contract constructors and combinators
"""

from typing import Any, Callable, Optional, Union

from .core.checker import evaluate
from .core.config import AND_SYMBOL, NOT_SYMBOL, OR_SYMBOL
from .core.errors import WellFormednessError
from .core.models import Contract, FlatContract, FunctionContract, is_contract
from .predicates import PredicateRegistry, default_registry, is_real

ContractSpec = Union[Contract, str, Callable[[Any], Any]]


def as_contract(spec: ContractSpec, registry: Optional[PredicateRegistry] = None) -> Contract:
    """
    Coerce a contract-like value into a Contract.

    Contracts pass through, strings are parsed as notation, and bare
    callables become flat contracts named after their registry entry or
    their __name__.
    """
    registry = registry or default_registry
    if is_contract(spec):
        return spec
    if isinstance(spec, str):
        from .parser import parse_contract
        return parse_contract(spec, registry)
    if callable(spec):
        return FlatContract(spec, registry.name_of(spec) or getattr(spec, "__name__", ""))
    raise WellFormednessError(f"cannot use {spec!r} as a contract")


def flat(predicate: Callable[[Any], Any], name: Optional[str] = None) -> FlatContract:
    """Flat contract from a predicate, optionally named for reports"""
    return FlatContract(predicate, name or "")


def arrow(*parts: ContractSpec) -> FunctionContract:
    """
    Function contract: arrow(arg1, ..., argN, result).

    arrow(integer_c, integer_c, integer_c) is (-> integer? integer? integer?)
    """
    if not parts:
        raise WellFormednessError("an arrow contract needs at least a result contract")
    contracts = [as_contract(p) for p in parts]
    return FunctionContract(tuple(contracts[:-1]), contracts[-1])


def _flats(symbol: str, specs) -> list:
    contracts = [as_contract(s) for s in specs]
    for c in contracts:
        if not isinstance(c, FlatContract):
            raise WellFormednessError(f"{symbol} only combines flat contracts, got {c}")
    return contracts


def _compound_name(symbol: str, contracts) -> str:
    return "(" + " ".join([symbol] + [str(c) for c in contracts]) + ")"


def and_c(*specs: ContractSpec) -> FlatContract:
    """Holds when every component holds; checked left to right"""
    contracts = _flats(AND_SYMBOL, specs)
    return FlatContract(
        lambda value: all(evaluate(c, value) for c in contracts),
        _compound_name(AND_SYMBOL, contracts),
    )


def or_c(*specs: ContractSpec) -> FlatContract:
    """Holds when any component holds"""
    contracts = _flats(OR_SYMBOL, specs)
    return FlatContract(
        lambda value: any(evaluate(c, value) for c in contracts),
        _compound_name(OR_SYMBOL, contracts),
    )


def not_c(spec: ContractSpec) -> FlatContract:
    (contract,) = _flats(NOT_SYMBOL, [spec])
    return FlatContract(
        lambda value: not evaluate(contract, value),
        _compound_name(NOT_SYMBOL, [contract]),
    )


def gt_c(bound) -> FlatContract:
    return FlatContract(lambda v: is_real(v) and v > bound, f"(>/c {bound})")


def lt_c(bound) -> FlatContract:
    return FlatContract(lambda v: is_real(v) and v < bound, f"(</c {bound})")


def eq_c(target) -> FlatContract:
    return FlatContract(lambda v: is_real(v) and v == target, f"(=/c {target})")


def between_c(low, high) -> FlatContract:
    if low > high:
        raise WellFormednessError(f"between/c bounds are reversed: {low} > {high}")
    return FlatContract(lambda v: is_real(v) and low <= v <= high, f"(between/c {low} {high})")
