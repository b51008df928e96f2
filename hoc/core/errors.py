"""
Error kinds surfaced by the contract system
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .blame import Blame


class HocError(Exception):
    """Base class for all contract system errors"""


class ContractViolation(HocError):
    """
    A check failed. Carries the Blame describing who broke which promise.

    The message is the full human-readable violation report.
    """

    def __init__(self, blame: "Blame"):
        self.blame = blame
        super().__init__(blame.report())


class WellFormednessError(HocError):
    """A contract or a wrap operation is structurally invalid"""


class ArityMismatch(WellFormednessError):
    """Contract arity does not match the callable it is attached to"""

    def __init__(self, name: str, expected: int, detail: str):
        self.name = name
        self.expected = expected
        self.detail = detail
        super().__init__(
            f"{name}: contract expects {expected} argument(s), but {detail}"
        )


class ContractSyntaxError(WellFormednessError):
    """Contract notation could not be parsed"""


class PredicateFailure(HocError):
    """
    A predicate raised instead of answering.

    The original exception is chained as __cause__.
    """

    def __init__(self, predicate_name: str, value, error: BaseException):
        self.predicate_name = predicate_name
        self.value = value
        self.error = error
        super().__init__(
            f"predicate {predicate_name} failed on {value!r}: "
            f"{type(error).__name__}: {error}"
        )


class ConfigurationError(HocError):
    """An HOC_* environment variable holds an unusable value"""
