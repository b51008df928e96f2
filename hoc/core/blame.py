"""
Blame records and violation reports.

A Blame names exactly one culprit: the positive party of the boundary
(the side that produced the function, blamed for bad results) or the
negative party (the side that applied it, blamed for bad arguments).
Higher-order nesting never reaches this module; it is handled by swapping
the two parties when a function crosses a boundary in argument position.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .models import Contract, Party, Polarity, Position, Role, SourceLocation

MAX_VALUE_REPR = 80


def _short_repr(value: Any) -> str:
    text = repr(value)
    if len(text) > MAX_VALUE_REPR:
        return text[:MAX_VALUE_REPR - 3] + "..."
    return text


@dataclass(frozen=True)
class Blame:
    """Attribution of one failed check"""
    violated_contract: Contract
    culprit: Party
    actual_value: Any
    expected_description: str
    location: SourceLocation
    position: Position
    contract_from: Party
    polarity: Polarity = Polarity.POSITIVE
    function_name: str = ""
    whole_contract: Optional[Contract] = None

    @property
    def blames_call_site(self) -> bool:
        return self.culprit.role is Role.CALL_SITE

    @property
    def blames_definition(self) -> bool:
        return self.culprit.role is Role.DEFINITION_SITE

    @property
    def own_contract(self) -> bool:
        """True when the culprit broke its own promise (a bad result or value)"""
        return self.culprit == self.contract_from

    def report(self) -> str:
        """Human-readable violation report"""
        subject = self.function_name or "value"
        if self.own_contract:
            headline = f"{subject}: broke its own contract"
        else:
            headline = f"{subject}: contract violation"

        lines = [
            headline,
            f"  expected: {self.expected_description}",
            f"  given: {_short_repr(self.actual_value)}",
        ]
        if self.whole_contract is not None and self.position.kind != "value":
            lines.append(f"  in: {self.position.describe()} of")
            lines.append(f"      {self.whole_contract}")
        else:
            lines.append(f"  in: {self.position.describe()}")
        lines.append(f"  contract from: {self.contract_from.describe()}")
        lines.append(f"  blaming: {self.culprit.describe()}")
        lines.append("   (assuming the contract is correct)")
        lines.append(f"  at: {self.location}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "function": self.function_name,
            "culprit": self.culprit.to_dict(),
            "contract_from": self.contract_from.to_dict(),
            "own_contract": self.own_contract,
            "polarity": self.polarity.value,
            "position": self.position.describe(),
            "expected": self.expected_description,
            "actual": _short_repr(self.actual_value),
            "violated_contract": str(self.violated_contract),
            "whole_contract": str(self.whole_contract) if self.whole_contract is not None else None,
            "location": str(self.location),
        }


def blame_for(contract: Contract, value: Any, *,
              culprit: Party,
              contract_from: Party,
              position: Position,
              location: SourceLocation,
              polarity: Polarity = Polarity.POSITIVE,
              function_name: str = "",
              whole_contract: Optional[Contract] = None,
              expected: Optional[str] = None) -> Blame:
    """
    Build the Blame for a failed check.

    Args:
        contract: The contract (leaf or function node) that failed
        value: The offending value
        culprit: Party that supplied the offending value
        contract_from: Positive party of the boundary where the check ran
        position: Argument index, result, arity or bare value
        location: Where the failing application happened
        expected: Override for the expected description (defaults to the contract)
    """
    return Blame(
        violated_contract=contract,
        culprit=culprit,
        actual_value=value,
        expected_description=expected or str(contract),
        location=location,
        position=position,
        contract_from=contract_from,
        polarity=polarity,
        function_name=function_name,
        whole_contract=whole_contract,
    )
