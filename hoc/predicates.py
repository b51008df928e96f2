"""
Standard predicates and the name registry used by the contract notation.

Names follow the Scheme convention (`integer?`, `even?`, `any/c`) so that
contracts read the same in Python as in the notation:

    registry = PredicateRegistry.standard()
    registry.lookup("even?")        # FlatContract(is_even, "even?")
    registry.register("small?", lambda v: abs(v) < 10)
"""

import numbers
from typing import Any, Callable, Dict, List, Optional

from .core.models import FlatContract


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """Exact integers only: 2 passes, 2.0 and True do not"""
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def is_real(value: Any) -> bool:
    return _is_real(value)


def is_even(value: Any) -> bool:
    return is_integer(value) and value % 2 == 0


def is_odd(value: Any) -> bool:
    return is_integer(value) and value % 2 == 1


def is_positive(value: Any) -> bool:
    return _is_real(value) and value > 0


def is_negative(value: Any) -> bool:
    return _is_real(value) and value < 0


def is_zero(value: Any) -> bool:
    return is_number(value) and value == 0


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_procedure(value: Any) -> bool:
    return callable(value)


def is_list(value: Any) -> bool:
    return isinstance(value, list)


def is_null(value: Any) -> bool:
    return value is None or (isinstance(value, list) and not value)


def accept_any(value: Any) -> bool:
    return True


def accept_none(value: Any) -> bool:
    return False


STANDARD_PREDICATES: Dict[str, Callable[[Any], bool]] = {
    "integer?": is_integer,
    "number?": is_number,
    "real?": is_real,
    "even?": is_even,
    "odd?": is_odd,
    "positive?": is_positive,
    "negative?": is_negative,
    "zero?": is_zero,
    "string?": is_string,
    "boolean?": is_boolean,
    "procedure?": is_procedure,
    "list?": is_list,
    "null?": is_null,
    "any/c": accept_any,
    "none/c": accept_none,
}


class PredicateRegistry:
    """Maps notation names to flat contracts"""

    def __init__(self, predicates: Optional[Dict[str, Callable[[Any], Any]]] = None):
        self._contracts: Dict[str, FlatContract] = {}
        for name, predicate in (predicates or {}).items():
            self.register(name, predicate)

    @classmethod
    def standard(cls) -> "PredicateRegistry":
        return cls(STANDARD_PREDICATES)

    def register(self, name: str, predicate: Callable[[Any], Any]) -> FlatContract:
        """Register (or replace) a named predicate and return its flat contract"""
        contract = FlatContract(predicate, name)
        self._contracts[name] = contract
        return contract

    def lookup(self, name: str) -> Optional[FlatContract]:
        return self._contracts.get(name)

    def name_of(self, predicate: Callable) -> Optional[str]:
        """Registered name of a predicate function, if any"""
        for name, contract in self._contracts.items():
            if contract.predicate is predicate:
                return name
        return None

    def names(self) -> List[str]:
        return sorted(self._contracts)

    def copy(self) -> "PredicateRegistry":
        clone = PredicateRegistry()
        clone._contracts = dict(self._contracts)
        return clone

    def __contains__(self, name: str) -> bool:
        return name in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)


default_registry = PredicateRegistry.standard()

integer_c = default_registry.lookup("integer?")
number_c = default_registry.lookup("number?")
real_c = default_registry.lookup("real?")
even_c = default_registry.lookup("even?")
odd_c = default_registry.lookup("odd?")
positive_c = default_registry.lookup("positive?")
negative_c = default_registry.lookup("negative?")
zero_c = default_registry.lookup("zero?")
string_c = default_registry.lookup("string?")
boolean_c = default_registry.lookup("boolean?")
procedure_c = default_registry.lookup("procedure?")
list_c = default_registry.lookup("list?")
null_c = default_registry.lookup("null?")
any_c = default_registry.lookup("any/c")
none_c = default_registry.lookup("none/c")
