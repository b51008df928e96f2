"""
Tests for the contract notation parser
"""

import pytest

from hoc import ContractSyntaxError, FlatContract, FunctionContract, WellFormednessError, arrow, flat, gt_c, parse_contract
from hoc.core.checker import evaluate
from hoc.core.models import contract_depth
from hoc.parser import read, tokenize, unparse
from hoc.predicates import PredicateRegistry


def test_tokenize():
    """Parentheses and symbols become separate tokens"""
    assert tokenize("(-> integer? (>/c 0))") == ["(", "->", "integer?", "(", ">/c", "0", ")", ")"]


def test_read_nested():
    """Nested forms read as nested lists"""
    assert read("(->/c (->/c even? odd?) even? even?)") == ["->/c", ["->/c", "even?", "odd?"], "even?", "even?"]


def test_flat_symbol():
    """A bare name resolves to the registered flat contract"""
    contract = parse_contract("integer?")
    assert isinstance(contract, FlatContract)
    assert contract.name == "integer?"


def test_arrow_contract():
    """(-> a b r) has two argument contracts and a result contract"""
    contract = parse_contract("(-> integer? integer? integer?)")
    assert isinstance(contract, FunctionContract)
    assert contract.arity == 2
    assert str(contract.return_contract) == "integer?"


def test_higher_order_contract_depth():
    """Function-typed positions nest"""
    contract = parse_contract("(->/c (->/c even? odd?) even? even?)")
    assert isinstance(contract.argument_contracts[0], FunctionContract)
    assert contract_depth(contract) == 2


def test_unparse_normalises_arrow():
    """->/c and -> render the same way"""
    contract = parse_contract("(->/c (->/c even? odd?)   even? even?)")
    assert unparse(contract) == "(-> (-> even? odd?) even? even?)"


def test_unparse_rejects_contracts_without_notation():
    """Renderings that would not parse back raise instead of returning bad text"""
    with pytest.raises(ContractSyntaxError, match="no notation form"):
        unparse(gt_c(float("inf")))
    with pytest.raises(ContractSyntaxError, match="Unknown predicate"):
        unparse(arrow(flat(lambda v: v > 0), flat(lambda v: True)))
    assert unparse(gt_c(-1.5)) == "(>/c -1.5)"


def test_thunk_contract():
    """An arrow with only a result contract takes no arguments"""
    assert parse_contract("(-> integer?)").arity == 0


def test_combinators_in_notation():
    """and/c, or/c, not/c and comparison forms build flat contracts"""
    cases = [
        ("(and/c integer? positive?)", 5, True),
        ("(and/c integer? positive?)", -5, False),
        ("(or/c string? integer?)", "s", True),
        ("(or/c string? integer?)", 1.5, False),
        ("(not/c zero?)", 0, False),
        ("(>/c 0)", 1, True),
        ("(</c 10)", 10, False),
        ("(=/c 3)", 3, True),
        ("(between/c 1 10)", 10, True),
        ("(between/c 1.5 2.5)", 3, False),
    ]

    for text, value, expected in cases:
        contract = parse_contract(text)
        assert evaluate(contract, value) is expected, f"Failed for {text} on {value!r}"


def test_compound_names_round_trip():
    """Compound flat contracts keep their notation as their name"""
    assert str(parse_contract("(and/c integer? (>/c 0))")) == "(and/c integer? (>/c 0))"


def test_unknown_predicate_raises():
    """Names missing from the registry are rejected"""
    with pytest.raises(ContractSyntaxError, match="Unknown predicate"):
        parse_contract("(-> prime? integer?)")


def test_unbalanced_parentheses_raise():
    """Missing or extra parentheses are syntax errors"""
    with pytest.raises(ContractSyntaxError, match="Unbalanced"):
        parse_contract("(-> integer? integer?")
    with pytest.raises(ContractSyntaxError):
        parse_contract("(-> integer? integer?))")
    with pytest.raises(ContractSyntaxError, match="Unbalanced"):
        parse_contract(")")


def test_empty_input_raises():
    """Empty text and empty forms are syntax errors"""
    with pytest.raises(ContractSyntaxError, match="Empty"):
        parse_contract("   ")
    with pytest.raises(ContractSyntaxError, match="Empty form"):
        parse_contract("()")
    with pytest.raises(ContractSyntaxError):
        parse_contract("(->)")


def test_unknown_form_raises():
    """Unknown keywords in head position are rejected"""
    with pytest.raises(ContractSyntaxError, match="Unknown contract form"):
        parse_contract("(vector/c integer?)")


def test_bad_numbers_raise():
    """Comparison forms need numeric literals"""
    with pytest.raises(ContractSyntaxError, match="Expected a number"):
        parse_contract("(>/c zero)")
    with pytest.raises(ContractSyntaxError):
        parse_contract("(between/c 1)")


def test_function_contract_inside_and_is_ill_formed():
    """Flat combinators refuse function contracts"""
    with pytest.raises(WellFormednessError):
        parse_contract("(and/c integer? (-> integer? integer?))")


def test_reversed_between_is_ill_formed():
    """between/c bounds must be ordered"""
    with pytest.raises(WellFormednessError, match="reversed"):
        parse_contract("(between/c 10 1)")


def test_custom_registry():
    """Extra predicates are visible through a custom registry only"""
    registry = PredicateRegistry.standard().copy()
    registry.register("small?", lambda v: abs(v) < 10)

    contract = parse_contract("(-> small? small?)", registry)
    assert str(contract) == "(-> small? small?)"
    with pytest.raises(ContractSyntaxError):
        parse_contract("small?")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
