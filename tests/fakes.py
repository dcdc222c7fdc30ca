"""
Framework-shaped stand-ins shared by the test suites.
"""

from typing import Any, Dict


class FakeResponse:
    """Response stand-in exposing status_code and get_headers()."""
    
    def __init__(self, status_code: int = 200, headers: Dict[str, Any] = None):
        self.status_code = status_code
        self._headers = dict(headers or {})
    
    def get_headers(self) -> Dict[str, Any]:
        return self._headers
