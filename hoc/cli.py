#!/usr/bin/env python3
"""
HOC command line.

Usage:
    hoc describe "(-> (-> even? odd?) even? even?)"
    hoc check "(and/c integer? positive?)" 10.1
    hoc check "integer?" 42 --json out/report.json
    hoc inspect mymodule.py
    hoc demo
    hoc serve --port 8000
"""

import argparse
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from hoc.core.checker import check, wrap
from hoc.core.config import get_settings
from hoc.core.errors import ContractViolation, HocError
from hoc.core.models import FlatContract, FunctionContract, contract_depth
from hoc.decorators import contracted_functions
from hoc.output import ViolationJSONFormatter
from hoc.parser import parse_contract


def cmd_describe(args) -> int:
    contract = parse_contract(args.contract)
    print(f"Contract: {contract}")
    if isinstance(contract, FunctionContract):
        print("Kind:     function")
        print(f"Arity:    {contract.arity}")
        for index, arg in enumerate(contract.argument_contracts, start=1):
            print(f"  arg {index}: {arg}")
        print(f"  result: {contract.return_contract}")
    else:
        print("Kind:     flat")
    print(f"Depth:    {contract_depth(contract)}")
    return 0


def cmd_check(args) -> int:
    contract = parse_contract(args.contract)
    if not isinstance(contract, FlatContract):
        print(f"❌ Error: {contract} is a function contract; only flat contracts can check a value")
        return 2

    try:
        value = json.loads(args.value)
    except json.JSONDecodeError:
        # bare words are checked as strings
        value = args.value

    blame = check(contract, value, name=args.name or "")
    formatter = ViolationJSONFormatter(source=f"hoc check {args.contract}")

    if blame is None:
        print(f"✅ {value!r} satisfies {contract}")
    else:
        formatter.add_violation(blame)
        print(f"❌ {blame.report()}")

    if args.json:
        formatter.save_to_file(args.json, checked=1)
        print(f"\n💾 JSON output saved to: {args.json}")

    return 0 if blame is None else 1


def load_module(file_path: str):
    spec = importlib.util.spec_from_file_location(Path(file_path).stem, file_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load {file_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def cmd_inspect(args) -> int:
    if not Path(args.file).exists():
        print(f"❌ Error: File not found: {args.file}")
        return 1

    functions = contracted_functions(load_module(args.file))
    print(f"\n🔍 Found {len(functions)} contracted functions in {args.file}")
    for fn in functions:
        print(f"  {fn.name}: {fn.contract}")
        print(f"      defined at {fn.definition_site}")
    return 0


def _scenarios() -> List[Tuple[str, Callable, Optional[str]]]:
    """(label, thunk, expected culprit role or None for success)"""
    add = wrap(lambda x, y: x + y, parse_contract("(-> integer? integer? integer?)"), name="add")
    sloppy_add = wrap(lambda x, y: x + y + 0.1, parse_contract("(-> integer? integer? integer?)"),
                      name="sloppy-add")
    twice = wrap(lambda f, x: f(x) + 1, parse_contract("(->/c (->/c even? odd?) even? even?)"),
                 name="apply-inc")
    return [
        ("add 10 11", lambda: add(10, 11), None),
        ("add 10.1 11", lambda: add(10.1, 11), "call_site"),
        ("sloppy-add 10 20", lambda: sloppy_add(10, 20), "definition_site"),
        ("apply-inc (λx.x+1) 2", lambda: twice(lambda x: x + 1, 2), None),
        ("apply-inc (λx.x+2) 2", lambda: twice(lambda x: x + 2, 2), "call_site"),
    ]


def cmd_demo(args) -> int:
    print("\n" + "=" * 70)
    print("HOC - higher-order contracts with blame")
    print("=" * 70)

    formatter = ViolationJSONFormatter(source="hoc demo")
    mismatches = 0
    scenarios = _scenarios()

    for label, thunk, expected in scenarios:
        print(f"\n> {label}")
        try:
            result = thunk()
        except ContractViolation as e:
            formatter.add_violation(e.blame)
            outcome = e.blame.culprit.role.value
            print(e.blame.report())
        else:
            outcome = None
            print(f"= {result!r}")
        if outcome != expected:
            mismatches += 1
            print(f"❌ expected {expected or 'success'}, got {outcome or 'success'}")

    if args.json:
        formatter.save_to_file(args.json, checked=len(scenarios))
        print(f"\n💾 JSON output saved to: {args.json}")

    print("\n" + "=" * 70)
    if mismatches:
        print(f"✗ {mismatches} scenario(s) did not behave as expected")
    else:
        print(f"✓ All {len(scenarios)} scenarios behaved as expected")
    print("=" * 70)
    return 1 if mismatches else 0


def cmd_serve(args) -> int:
    from hoc.server.app import run

    run(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoc",
        description="Higher-order contracts with blame",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    hoc describe "(->/c (->/c even? odd?) even? even?)"
    hoc check "integer?" 10.1
    hoc check "(between/c 1 10)" 4 --json out/check.json
    hoc inspect examples.py
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    describe = sub.add_parser("describe", help="Parse and describe a contract")
    describe.add_argument("contract")
    describe.set_defaults(func=cmd_describe)

    check_cmd = sub.add_parser("check", help="Check a JSON value against a flat contract")
    check_cmd.add_argument("contract")
    check_cmd.add_argument("value", help="JSON value (bare words are read as strings)")
    check_cmd.add_argument("--name", help="Name used in the violation report")
    check_cmd.add_argument("--json", help="Write a JSON report to this path")
    check_cmd.set_defaults(func=cmd_check)

    inspect_cmd = sub.add_parser("inspect", help="List contracted functions in a Python file")
    inspect_cmd.add_argument("file")
    inspect_cmd.set_defaults(func=cmd_inspect)

    demo = sub.add_parser("demo", help="Run the blame scenarios")
    demo.add_argument("--json", help="Write a JSON report to this path")
    demo.set_defaults(func=cmd_demo)

    serve = sub.add_parser("serve", help="Start the HTTP server")
    serve.add_argument("--host")
    serve.add_argument("--port", type=int)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        level = logging.DEBUG if args.verbose else get_settings().log_level
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
        return args.func(args)
    except HocError as e:
        print(f"❌ Error: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
