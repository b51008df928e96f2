"""
JSON output formatter for contract violations and application traces.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from hoc.core.blame import Blame
from hoc.core.config import VERSION
from hoc.core.checker import ContractedFunction


class ViolationJSONFormatter:
    """
    Collects blames and application records into one versioned JSON document.
    """

    SCHEMA_VERSION = "1.0.0"

    def __init__(self, source: str = ""):
        """
        Initialize formatter.

        Args:
            source: Free-form label for what was checked (a module, a command line)
        """
        self.source = source
        self.violations: List[Dict[str, Any]] = []
        self.applications: List[Dict[str, Any]] = []

    def add_violation(self, blame: Blame) -> None:
        entry = blame.to_dict()
        entry["report"] = blame.report()
        self.violations.append(entry)

    def add_history(self, fn: ContractedFunction) -> None:
        """Add every recorded application of a contracted function"""
        for record in fn.history():
            entry = record.to_dict()
            entry["function"] = fn.name
            entry["contract"] = str(fn.contract)
            self.applications.append(entry)

    def generate(self, checked: Optional[int] = None) -> Dict[str, Any]:
        """
        Generate the complete JSON output structure.

        Args:
            checked: Number of checks performed, if known
        """
        blamed_call_sites = sum(1 for v in self.violations if v["culprit"]["role"] == "call_site")
        return {
            "schema_version": self.SCHEMA_VERSION,
            "metadata": {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "source": self.source,
                "checker_version": f"hoc-{VERSION}",
            },
            "summary": {
                "checked": checked,
                "violations": len(self.violations),
                "blamed_call_sites": blamed_call_sites,
                "blamed_definitions": len(self.violations) - blamed_call_sites,
                "applications": len(self.applications),
            },
            "violations": self.violations,
            "applications": self.applications,
        }

    def to_json_string(self, indent: int = 2, checked: Optional[int] = None) -> str:
        return json.dumps(self.generate(checked), indent=indent)

    def save_to_file(self, output_path: str, indent: int = 2, checked: Optional[int] = None) -> None:
        """
        Save JSON to file.

        Args:
            output_path: Path to output JSON file
            indent: Number of spaces for indentation
        """
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(self.generate(checked), f, indent=indent)
