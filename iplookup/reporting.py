"""JSON output for lookup results.

Follows the flow JSON output standard:
{
    "success": bool,
    "command": "lookup",
    "data": { ... },
    "message": str
}
"""

import json
from typing import Any, Optional

from .client import LookupResult

COMMAND = "lookup"


class JsonReporter:
    """Generates flow-compatible JSON output for lookups."""

    def generate(
        self,
        server: str,
        result: Optional[LookupResult] = None,
        error: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate an output object for a lookup.

        Args:
            server: Endpoint that was queried.
            result: Lookup result, if it succeeded.
            error: Diagnostic, if it failed.

        Returns:
            Dictionary ready for JSON serialization.
        """
        if result is None:
            return {
                "success": False,
                "command": COMMAND,
                "data": {"server": server},
                "message": error or "Lookup failed",
            }

        return {
            "success": True,
            "command": COMMAND,
            "data": {
                "ip": result.ip,
                "port": result.port,
                "server": result.server,
                "duration_ms": result.duration_ms,
            },
            "message": f"Public address is {result.ip}",
        }

    def to_json_string(self, report: dict[str, Any]) -> str:
        return json.dumps(report, ensure_ascii=False)
