"""
Contract checking and wrapping.

Every value crossing a contract boundary goes through ContractChecker.guard:
flat contracts are checked on the spot, function contracts wrap the value in
a ContractedFunction so the check happens when it is applied.

Usage:
    checker = ContractChecker()
    add = checker.wrap(lambda x, y: x + y, arrow(integer_c, integer_c, integer_c))
    add(10, 11)     # 21
    add(10.1, 11)   # ContractViolation blaming the call site
"""

import functools
import inspect
import logging
import threading
from collections import deque
from typing import Any, Callable, Dict, Optional, Tuple

from .blame import Blame, blame_for
from .config import get_settings
from .errors import ArityMismatch, ContractViolation, PredicateFailure, WellFormednessError
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

logger = logging.getLogger(__name__)


def evaluate(contract: FlatContract, value: Any) -> bool:
    """Run a flat contract's predicate; predicate errors become PredicateFailure"""
    try:
        return bool(contract.predicate(value))
    except PredicateFailure:
        raise
    except Exception as e:
        raise PredicateFailure(contract.name, value, e) from e


def arity_problem(fn: Callable, arity: int) -> Optional[str]:
    """
    Describe why fn cannot be applied to `arity` positional arguments.

    Returns:
        None when the call shape is acceptable or cannot be introspected
    """
    if isinstance(fn, ContractedFunction):
        if fn.contract.arity != arity:
            return f"{fn.name} is contracted for {fn.contract.arity}"
        return None

    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    positional_kinds = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    params = list(sig.parameters.values())
    positional = [p for p in params if p.kind in positional_kinds]
    required = [p for p in positional if p.default is inspect.Parameter.empty]
    has_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)

    if any(p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty
           for p in params):
        return "it requires keyword-only arguments"
    if arity < len(required):
        return f"it requires at least {len(required)}"
    if arity > len(positional) and not has_varargs:
        return f"it accepts at most {len(positional)}"
    return None


class Application:
    """
    State of a single application of a contracted function.

    Pending -> CheckingArgs -> Invoking -> CheckingReturn -> Done,
    with Violated reachable from CheckingArgs and CheckingReturn.
    """

    TRANSITIONS = {
        ApplicationState.PENDING: {ApplicationState.CHECKING_ARGS},
        ApplicationState.CHECKING_ARGS: {ApplicationState.INVOKING, ApplicationState.VIOLATED},
        ApplicationState.INVOKING: {ApplicationState.CHECKING_RETURN},
        ApplicationState.CHECKING_RETURN: {ApplicationState.DONE, ApplicationState.VIOLATED},
        ApplicationState.DONE: set(),
        ApplicationState.VIOLATED: set(),
    }

    def __init__(self, call_site: SourceLocation):
        self.record = ApplicationRecord(call_site=call_site)
        self.blame: Optional[Blame] = None

    @property
    def state(self) -> ApplicationState:
        return self.record.state

    def advance(self, state: ApplicationState) -> None:
        if state not in self.TRANSITIONS[self.state]:
            raise RuntimeError(f"illegal application transition {self.state.value} -> {state.value}")
        self.record.state = state

    def violate(self, blame: Blame) -> None:
        self.advance(ApplicationState.VIOLATED)
        self.blame = blame


class ContractedFunction:
    """
    A callable paired with the function contract it must honour.

    The underlying callable is never modified; each boundary crossing
    allocates a new ContractedFunction.
    """

    def __init__(self,
                 underlying: Callable,
                 contract: FunctionContract,
                 definition_site: SourceLocation,
                 positive: Party,
                 negative: Optional[Party] = None,
                 polarity: Polarity = Polarity.POSITIVE,
                 name: Optional[str] = None,
                 checker: Optional["ContractChecker"] = None,
                 record_history: Optional[bool] = None,
                 history_limit: Optional[int] = None,
                 pending_check: Optional[Dict[str, Any]] = None):
        settings = get_settings()
        self.underlying = underlying
        self.contract = contract
        self.definition_site = definition_site
        self.positive = positive
        # None means "whoever applies me": resolved per call
        self.negative = negative
        self.polarity = polarity
        self.name = name or getattr(underlying, "__name__", None) or repr(underlying)
        self.checker = checker or default_checker
        # blame context for a callable/arity check that runs on first application
        self.pending_check = pending_check

        if record_history is None:
            record_history = settings.record_history
        limit = history_limit if history_limit is not None else settings.history_limit
        self.call_history = deque(maxlen=limit) if record_history else None
        self._history_lock = threading.Lock()

        functools.update_wrapper(self, underlying, updated=())

    def __call__(self, *args, **kwargs):
        call_site = SourceLocation.capture(2)
        return self.checker.apply(self, args, kwargs, call_site)

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return functools.partial(self, obj)

    def record(self, record: ApplicationRecord) -> None:
        if self.call_history is None:
            return
        with self._history_lock:
            self.call_history.append(record)

    def history(self) -> list:
        """Snapshot of recorded applications, oldest first"""
        if self.call_history is None:
            return []
        with self._history_lock:
            return list(self.call_history)

    def __repr__(self) -> str:
        return f"<ContractedFunction {self.name} {self.contract} ({self.polarity.value})>"


def is_contracted(value: Any) -> bool:
    return isinstance(value, ContractedFunction)


class ContractChecker:
    """Checks values at contract boundaries and drives contracted applications"""

    def check_flat(self, contract: FlatContract, value: Any, *,
                   culprit: Party,
                   contract_from: Party,
                   position: Position,
                   location: SourceLocation,
                   polarity: Polarity = Polarity.POSITIVE,
                   function_name: str = "",
                   whole_contract: Optional[Contract] = None) -> Optional[Blame]:
        """
        Check a value against a flat contract.

        Returns:
            None if the predicate holds, otherwise the Blame naming `culprit`

        Raises:
            PredicateFailure: if the predicate itself raised
        """
        if evaluate(contract, value):
            return None
        return blame_for(
            contract, value,
            culprit=culprit,
            contract_from=contract_from,
            position=position,
            location=location,
            polarity=polarity,
            function_name=function_name,
            whole_contract=whole_contract,
        )

    def first_order_blame(self, contract: FunctionContract, value: Any, *,
                          culprit: Party,
                          contract_from: Party,
                          position: Position,
                          location: SourceLocation,
                          polarity: Polarity = Polarity.POSITIVE,
                          function_name: str = "",
                          whole_contract: Optional[Contract] = None) -> Optional[Blame]:
        """Blame `culprit` if value is not a procedure of the contract's arity"""
        problem = "it is not callable" if not callable(value) else arity_problem(value, contract.arity)
        if problem is None:
            return None
        return blame_for(
            contract, value,
            culprit=culprit,
            contract_from=contract_from,
            position=position,
            location=location,
            polarity=polarity,
            function_name=function_name,
            whole_contract=whole_contract,
            expected=f"a procedure of {contract.arity} argument(s) satisfying {contract} ({problem})",
        )

    def guard(self, contract: Contract, value: Any, *,
              positive: Party,
              negative: Optional[Party],
              position: Position,
              location: SourceLocation,
              polarity: Polarity = Polarity.POSITIVE,
              contract_from: Optional[Party] = None,
              function_name: str = "",
              whole_contract: Optional[Contract] = None) -> Any:
        """
        Put a value produced by `positive` and consumed by `negative` behind `contract`.

        Flat contracts are checked now and blame `positive`. Function
        contracts wrap the value; the rest is checked when the wrapper is
        applied. The first-order check (callable, arity) runs now for
        arguments and bare values, and on first application for results.

        Returns:
            The value itself, or a ContractedFunction wrapping it

        Raises:
            ContractViolation: if the flat or first-order check fails
        """
        contract_from = contract_from or positive

        if isinstance(contract, FlatContract):
            blame = self.check_flat(
                contract, value,
                culprit=positive,
                contract_from=contract_from,
                position=position,
                location=location,
                polarity=polarity,
                function_name=function_name,
                whole_contract=whole_contract,
            )
            if blame is not None:
                logger.info("contract violation in %s: blaming %s", function_name or "value", blame.culprit.describe())
                raise ContractViolation(blame)
            return value

        if isinstance(contract, FunctionContract):
            context = dict(
                contract_from=contract_from,
                position=position,
                polarity=polarity,
                function_name=function_name,
                whole_contract=whole_contract,
            )
            pending_check = None
            if position.kind == "result":
                pending_check = context
            else:
                blame = self.first_order_blame(contract, value, culprit=positive, location=location, **context)
                if blame is not None:
                    logger.info("first-order contract violation in %s: %s", function_name or "value",
                                blame.expected_description)
                    raise ContractViolation(blame)

            wrapped = ContractedFunction(
                value,
                contract,
                definition_site=SourceLocation.of_callable(value) or location,
                positive=positive,
                negative=negative,
                polarity=polarity,
                checker=self,
                pending_check=pending_check,
            )
            logger.debug("wrapped %s with %s (%s)", wrapped.name, contract, polarity.value)
            return wrapped

        raise WellFormednessError(f"not a contract: {contract!r}")

    def wrap(self, fn: Callable, contract: FunctionContract, *,
             definition_site: Optional[SourceLocation] = None,
             name: Optional[str] = None,
             record_history: Optional[bool] = None,
             history_limit: Optional[int] = None) -> ContractedFunction:
        """
        Attach a function contract to a callable at its definition.

        Raises:
            WellFormednessError: if fn is not callable or contract is not a function contract
            ArityMismatch: if fn cannot accept contract.arity positional arguments
        """
        if not isinstance(contract, FunctionContract):
            raise WellFormednessError(f"wrap needs a function contract, got {contract}")
        if not callable(fn):
            raise WellFormednessError(f"cannot wrap non-callable {fn!r}")

        name = name or getattr(fn, "__name__", None) or repr(fn)
        problem = arity_problem(fn, contract.arity)
        if problem is not None:
            raise ArityMismatch(name, contract.arity, problem)

        definition_site = definition_site or SourceLocation.of_callable(fn) or SourceLocation.capture(2)
        positive = Party(Role.DEFINITION_SITE, definition_site, name)
        wrapped = ContractedFunction(
            fn,
            contract,
            definition_site=definition_site,
            positive=positive,
            name=name,
            checker=self,
            record_history=record_history,
            history_limit=history_limit,
        )
        logger.debug("attached %s to %s defined at %s", contract, name, definition_site)
        return wrapped

    def attach(self, contract: Contract, value: Any, *,
               name: Optional[str] = None,
               definition_site: Optional[SourceLocation] = None) -> Any:
        """
        Attach any contract to a value at its definition.

        Flat contracts are checked immediately and a failure blames the
        definition; function contracts wrap the value.
        """
        definition_site = definition_site or SourceLocation.capture(2)
        if isinstance(contract, FunctionContract):
            return self.wrap(value, contract, definition_site=definition_site, name=name)
        positive = Party(Role.DEFINITION_SITE, definition_site, name or "")
        return self.guard(
            contract, value,
            positive=positive,
            negative=None,
            position=Position.value(),
            location=definition_site,
            function_name=name or "",
        )

    def apply(self, fn: ContractedFunction, args: Tuple, kwargs: Dict[str, Any],
              call_site: SourceLocation) -> Any:
        """
        Apply a contracted function.

        Arguments are checked left to right and the first failure stops the
        application before the underlying callable runs. Host exceptions
        raised by the callable propagate unchanged.
        """
        contract = fn.contract
        positive = fn.positive
        negative = fn.negative or Party(Role.CALL_SITE, call_site, fn.name)
        app = Application(call_site)
        context = dict(
            location=call_site,
            function_name=fn.name,
            whole_contract=contract,
            contract_from=positive,
        )

        try:
            app.advance(ApplicationState.CHECKING_ARGS)

            pending_check = fn.pending_check
            if pending_check is not None:
                # a returned function that was never checked: its producer is at fault
                blame = self.first_order_blame(contract, fn.underlying, culprit=positive,
                                               location=call_site, **pending_check)
                if blame is not None:
                    app.violate(blame)
                    logger.info("first-order contract violation in %s: blaming %s",
                                fn.name, positive.describe())
                    raise ContractViolation(blame)
                fn.pending_check = None

            if kwargs or len(args) != contract.arity:
                given = f"{len(args)} positional" + (f" and {len(kwargs)} keyword" if kwargs else "")
                blame = blame_for(
                    contract, args + tuple(kwargs.values()),
                    culprit=negative,
                    position=Position.arity(),
                    polarity=fn.polarity,
                    expected=f"{contract.arity} positional argument(s), given {given}",
                    **context,
                )
                app.violate(blame)
                logger.info("arity violation in %s: blaming %s", fn.name, negative.describe())
                raise ContractViolation(blame)

            checked_args = []
            for index, (arg, arg_contract) in enumerate(zip(args, contract.argument_contracts), start=1):
                try:
                    # the caller produces arguments, so the parties swap
                    checked = self.guard(
                        arg_contract, arg,
                        positive=negative,
                        negative=positive,
                        position=Position.argument(index),
                        polarity=fn.polarity.flip(),
                        **context,
                    )
                except ContractViolation as e:
                    app.record.arguments_checked.append((arg_contract, False))
                    app.violate(e.blame)
                    raise
                app.record.arguments_checked.append((arg_contract, True))
                checked_args.append(checked)

            app.advance(ApplicationState.INVOKING)
            result = fn.underlying(*checked_args)

            app.advance(ApplicationState.CHECKING_RETURN)
            try:
                checked_result = self.guard(
                    contract.return_contract, result,
                    positive=positive,
                    negative=negative,
                    position=Position.result(),
                    polarity=fn.polarity,
                    **context,
                )
            except ContractViolation as e:
                app.record.result_checked = False
                app.violate(e.blame)
                raise
            app.record.result_checked = True
            app.advance(ApplicationState.DONE)
            return checked_result
        finally:
            fn.record(app.record)


default_checker = ContractChecker()


def wrap(fn: Callable, contract: FunctionContract, *,
         definition_site: Optional[SourceLocation] = None,
         name: Optional[str] = None,
         record_history: Optional[bool] = None,
         history_limit: Optional[int] = None) -> ContractedFunction:
    """Attach a function contract to fn using the default checker"""
    definition_site = definition_site or SourceLocation.of_callable(fn) or SourceLocation.capture(2)
    return default_checker.wrap(fn, contract, definition_site=definition_site,
                                name=name, record_history=record_history,
                                history_limit=history_limit)


def attach(contract: Contract, value: Any, *,
           name: Optional[str] = None,
           definition_site: Optional[SourceLocation] = None) -> Any:
    """Attach a contract to a value using the default checker"""
    definition_site = definition_site or SourceLocation.capture(2)
    return default_checker.attach(contract, value, name=name, definition_site=definition_site)


def check(contract: FlatContract, value: Any, *, name: str = "") -> Optional[Blame]:
    """
    Check a bare value against a flat contract, blaming whoever supplied it.

    Returns:
        None on success, the Blame otherwise
    """
    location = SourceLocation.capture(2)
    supplier = Party(Role.CALL_SITE, location, name)
    checker_site = Party(Role.DEFINITION_SITE, location, name)
    return default_checker.check_flat(
        contract, value,
        culprit=supplier,
        contract_from=checker_site,
        position=Position.value(),
        location=location,
        function_name=name,
    )
