"""
HTTP client for the HOC server
"""
from typing import Any, Dict, List, Optional

import requests

from hoc.core.config import get_settings


class HocClient:
    """
    Thin client for the HOC REST API.

    Example usage:
        client = HocClient("http://localhost:8000")
        client.parse("(-> integer? integer?)")["arity"]     # 1
        client.check("integer?", 10.1)["passed"]             # False
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 10.0):
        """
        Args:
            base_url: Server URL (defaults to HOC_HOST/HOC_PORT)
            timeout: Request timeout in seconds
        """
        if base_url is None:
            settings = get_settings()
            base_url = f"http://{settings.host}:{settings.port}"
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str) -> Dict[str, Any]:
        response = requests.get(f"{self.base_url}{path}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = requests.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def health(self) -> Dict[str, Any]:
        return self._get("/")

    def predicates(self) -> List[str]:
        return self._get("/api/predicates")["predicates"]

    def parse(self, contract: str) -> Dict[str, Any]:
        """Parse notation on the server; see ParseResponse"""
        return self._post("/api/parse", {"contract": contract})

    def check(self, contract: str, value: Any, name: str = "") -> Dict[str, Any]:
        """Check a JSON-serialisable value against a flat contract; see CheckResponse"""
        return self._post("/api/check", {"contract": contract, "value": value, "name": name})
