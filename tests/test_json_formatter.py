"""
Tests for the JSON violation formatter
"""

import json

import pytest

from hoc import ContractViolation, arrow, check, wrap
from hoc.output import ViolationJSONFormatter
from hoc.predicates import integer_c


def test_empty_document():
    """A formatter with nothing added still produces the full structure"""
    document = ViolationJSONFormatter(source="nothing").generate()
    assert document["schema_version"] == ViolationJSONFormatter.SCHEMA_VERSION
    assert document["metadata"]["source"] == "nothing"
    assert document["metadata"]["checker_version"].startswith("hoc-")
    assert document["summary"]["violations"] == 0
    assert document["violations"] == []


def test_violations_are_counted_by_culprit():
    """Summary splits blames between call sites and definitions"""
    formatter = ViolationJSONFormatter()
    add = wrap(lambda x, y: x + y, arrow(integer_c, integer_c, integer_c))
    sloppy = wrap(lambda x, y: x + y + 0.1, arrow(integer_c, integer_c, integer_c))

    for thunk in (lambda: add(1.5, 1), lambda: sloppy(1, 1)):
        with pytest.raises(ContractViolation) as info:
            thunk()
        formatter.add_violation(info.value.blame)

    summary = formatter.generate(checked=2)["summary"]
    assert summary == {
        "checked": 2,
        "violations": 2,
        "blamed_call_sites": 1,
        "blamed_definitions": 1,
        "applications": 0,
    }


def test_violation_entries_carry_report():
    """Each violation includes the text report"""
    formatter = ViolationJSONFormatter()
    formatter.add_violation(check(integer_c, "x"))

    (entry,) = formatter.generate()["violations"]
    assert entry["expected"] == "integer?"
    assert entry["actual"] == "'x'"
    assert "expected: integer?" in entry["report"]


def test_history_entries():
    """Recorded applications are exported with their function and contract"""
    add = wrap(lambda x, y: x + y, arrow(integer_c, integer_c, integer_c), name="add", record_history=True)
    add(1, 2)

    formatter = ViolationJSONFormatter()
    formatter.add_history(add)
    (entry,) = formatter.generate()["applications"]
    assert entry["function"] == "add"
    assert entry["contract"] == "(-> integer? integer? integer?)"
    assert entry["state"] == "done"
    assert [a["passed"] for a in entry["arguments_checked"]] == [True, True]


def test_save_to_file(tmp_path):
    """The document is written as JSON, creating parent directories"""
    formatter = ViolationJSONFormatter(source="file")
    formatter.add_violation(check(integer_c, 1.5))

    out = tmp_path / "reports" / "violations.json"
    formatter.save_to_file(str(out), checked=1)

    data = json.loads(out.read_text())
    assert data["summary"]["violations"] == 1
    assert json.loads(formatter.to_json_string())["metadata"]["source"] == "file"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
