"""
Data models for contracts, parties and application records
"""

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Union

from .config import ARITY_LABEL, ARROW_KEYWORD, RANGE_LABEL, VALUE_LABEL, ordinal
from .errors import WellFormednessError


@dataclass(frozen=True)
class SourceLocation:
    """A file/line pair, optionally naming the enclosing function"""
    filename: str
    lineno: int
    function: Optional[str] = None

    @classmethod
    def capture(cls, depth: int = 1) -> "SourceLocation":
        """
        Location of a frame above the caller.

        Args:
            depth: 1 is the caller of capture(), 2 its caller, and so on
        """
        frame = inspect.currentframe()
        try:
            for _ in range(depth):
                if frame is None or frame.f_back is None:
                    break
                frame = frame.f_back
            if frame is None:
                return cls.unknown()
            return cls(frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name)
        finally:
            del frame

    @classmethod
    def of_callable(cls, fn: Callable) -> Optional["SourceLocation"]:
        """Definition site of a Python function, None for builtins and the like"""
        code = getattr(inspect.unwrap(fn), "__code__", None)
        if code is None:
            return None
        return cls(code.co_filename, code.co_firstlineno, code.co_name)

    @classmethod
    def unknown(cls) -> "SourceLocation":
        return cls("<unknown>", 0)

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"


@dataclass(frozen=True)
class FlatContract:
    """A single predicate check on a non-function value"""
    predicate: Callable[[Any], Any]
    name: str = ""

    def __post_init__(self):
        if not callable(self.predicate):
            raise WellFormednessError(f"flat contract predicate is not callable: {self.predicate!r}")
        if not self.name:
            object.__setattr__(self, "name", getattr(self.predicate, "__name__", repr(self.predicate)))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FunctionContract:
    """Argument contracts (one per position) plus a return contract"""
    argument_contracts: Tuple["Contract", ...]
    return_contract: "Contract"

    def __post_init__(self):
        object.__setattr__(self, "argument_contracts", tuple(self.argument_contracts))
        for part in (*self.argument_contracts, self.return_contract):
            if not is_contract(part):
                raise WellFormednessError(f"not a contract: {part!r}")

    @property
    def arity(self) -> int:
        return len(self.argument_contracts)

    def __str__(self) -> str:
        parts = [str(c) for c in self.argument_contracts] + [str(self.return_contract)]
        return f"({ARROW_KEYWORD} {' '.join(parts)})"


Contract = Union[FlatContract, FunctionContract]


def is_contract(value: Any) -> bool:
    return isinstance(value, (FlatContract, FunctionContract))


def contract_depth(contract: Contract) -> int:
    """Nesting depth of function-typed positions; flat contracts have depth 0"""
    if isinstance(contract, FlatContract):
        return 0
    if isinstance(contract, FunctionContract):
        children = (*contract.argument_contracts, contract.return_contract)
        return 1 + max(contract_depth(c) for c in children)
    raise WellFormednessError(f"not a contract: {contract!r}")


class Role(str, Enum):
    """Which side of a contract boundary a party stands on"""
    CALL_SITE = "call_site"
    DEFINITION_SITE = "definition_site"


class Polarity(str, Enum):
    """Orientation of a wrapper relative to the outermost contract"""
    POSITIVE = "positive"
    NEGATIVE = "negative"

    def flip(self) -> "Polarity":
        return Polarity.NEGATIVE if self is Polarity.POSITIVE else Polarity.POSITIVE


@dataclass(frozen=True)
class Party:
    """One side of a contract boundary"""
    role: Role
    location: SourceLocation
    label: str = ""

    def describe(self) -> str:
        kind = "call site" if self.role is Role.CALL_SITE else "definition"
        name = f" of {self.label}" if self.label else ""
        return f"{kind}{name} at {self.location}"

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "label": self.label,
            "location": str(self.location),
        }


@dataclass(frozen=True)
class Position:
    """Where in a function contract a check happened"""
    kind: str  # "argument", "result", "arity" or "value"
    index: Optional[int] = None  # 1-based, arguments only

    @classmethod
    def argument(cls, index: int) -> "Position":
        return cls("argument", index)

    @classmethod
    def result(cls) -> "Position":
        return cls("result")

    @classmethod
    def arity(cls) -> "Position":
        return cls("arity")

    @classmethod
    def value(cls) -> "Position":
        return cls("value")

    def describe(self) -> str:
        if self.kind == "argument":
            return f"the {ordinal(self.index)} argument"
        if self.kind == "result":
            return RANGE_LABEL
        if self.kind == "arity":
            return ARITY_LABEL
        return VALUE_LABEL


class ApplicationState(str, Enum):
    """Lifecycle of one application of a contracted function"""
    PENDING = "pending"
    CHECKING_ARGS = "checking_args"
    INVOKING = "invoking"
    CHECKING_RETURN = "checking_return"
    DONE = "done"
    VIOLATED = "violated"


@dataclass
class ApplicationRecord:
    """Diagnostic trace of one application"""
    call_site: SourceLocation
    arguments_checked: List[Tuple[Contract, bool]] = field(default_factory=list)
    state: ApplicationState = ApplicationState.PENDING
    result_checked: Optional[bool] = None

    def to_dict(self) -> dict:
        return {
            "call_site": str(self.call_site),
            "arguments_checked": [
                {"contract": str(c), "passed": passed} for c, passed in self.arguments_checked
            ],
            "state": self.state.value,
            "result_checked": self.result_checked,
        }
