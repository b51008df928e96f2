"""
Parser for the contract notation.

    (-> integer? integer? integer?)
    (->/c (->/c even? odd?) even? even?)
    (and/c integer? (>/c 0))
"""

import re
from typing import List, Optional, Union

from .combinators import and_c, between_c, eq_c, gt_c, lt_c, not_c, or_c
from .core.config import AND_SYMBOL, ARROW_SYMBOLS, NOT_SYMBOL, OR_SYMBOL
from .core.errors import ContractSyntaxError
from .core.models import Contract, FunctionContract
from .predicates import PredicateRegistry, default_registry

TOKEN_RE = re.compile(r"\s*(?:(\()|(\))|([^\s()]+))")
NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

Sexp = Union[str, list]


def tokenize(text: str) -> List[str]:
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise ContractSyntaxError(f"Unexpected character at offset {pos}: {text[pos:pos + 10]!r}")
        tokens.append(match.group(1) or match.group(2) or match.group(3))
        pos = match.end()
    return tokens


def read(text: str) -> Sexp:
    """Read one s-expression; trailing input is an error"""
    tokens = tokenize(text)
    if not tokens:
        raise ContractSyntaxError("Empty contract")
    sexp, rest = _read(tokens, 0)
    if rest != len(tokens):
        raise ContractSyntaxError(f"Unexpected trailing input: {' '.join(tokens[rest:])}")
    return sexp


def _read(tokens: List[str], pos: int):
    if pos >= len(tokens):
        raise ContractSyntaxError("Unbalanced parentheses: missing ')'")
    token = tokens[pos]
    if token == ")":
        raise ContractSyntaxError("Unbalanced parentheses: unexpected ')'")
    if token != "(":
        return token, pos + 1

    items = []
    pos += 1
    while True:
        if pos >= len(tokens):
            raise ContractSyntaxError("Unbalanced parentheses: missing ')'")
        if tokens[pos] == ")":
            return items, pos + 1
        item, pos = _read(tokens, pos)
        items.append(item)


def _number(token: Sexp):
    if not isinstance(token, str) or not NUMBER_RE.match(token):
        raise ContractSyntaxError(f"Expected a number, got {token!r}")
    if any(ch in token for ch in ".eE"):
        return float(token)
    return int(token)


class ContractParser:
    """Turns notation into Contract trees, resolving names through a registry"""

    def __init__(self, registry: Optional[PredicateRegistry] = None):
        self.registry = registry or default_registry

    def parse(self, text: str) -> Contract:
        return self.build(read(text))

    def build(self, sexp: Sexp) -> Contract:
        if isinstance(sexp, str):
            contract = self.registry.lookup(sexp)
            if contract is None:
                raise ContractSyntaxError(f"Unknown predicate: {sexp}")
            return contract

        if not sexp:
            raise ContractSyntaxError("Empty form ()")

        head, *args = sexp
        if not isinstance(head, str):
            raise ContractSyntaxError(f"Form must start with a keyword, got {head!r}")

        if head in ARROW_SYMBOLS:
            if not args:
                raise ContractSyntaxError(f"{head} needs at least a result contract")
            parts = [self.build(a) for a in args]
            return FunctionContract(tuple(parts[:-1]), parts[-1])
        if head == AND_SYMBOL:
            return and_c(*[self.build(a) for a in args])
        if head == OR_SYMBOL:
            return or_c(*[self.build(a) for a in args])
        if head == NOT_SYMBOL:
            if len(args) != 1:
                raise ContractSyntaxError(f"{NOT_SYMBOL} takes exactly one contract")
            return not_c(self.build(args[0]))
        if head in (">/c", "</c", "=/c"):
            if len(args) != 1:
                raise ContractSyntaxError(f"{head} takes exactly one number")
            make = {">/c": gt_c, "</c": lt_c, "=/c": eq_c}[head]
            return make(_number(args[0]))
        if head == "between/c":
            if len(args) != 2:
                raise ContractSyntaxError("between/c takes exactly two numbers")
            return between_c(_number(args[0]), _number(args[1]))

        raise ContractSyntaxError(f"Unknown contract form: {head}")


def parse_contract(text: str, registry: Optional[PredicateRegistry] = None) -> Contract:
    """
    Parse contract notation.

    Raises:
        ContractSyntaxError: on unknown names or malformed input
    """
    return ContractParser(registry).parse(text)


def unparse(contract: Contract, registry: Optional[PredicateRegistry] = None) -> str:
    """
    Render a contract back to notation.

    Raises:
        ContractSyntaxError: if the rendering does not parse back, e.g. a
            flat contract built from an unregistered lambda or an infinite bound
    """
    text = str(contract)
    try:
        ContractParser(registry).parse(text)
    except ContractSyntaxError as e:
        raise ContractSyntaxError(f"{text} has no notation form: {e}") from e
    return text
