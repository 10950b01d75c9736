from __future__ import annotations

from dataclasses import dataclass
from typing import List

from buzz_browser.core.exceptions import BuzzBrowserError


@dataclass(frozen=True)
class ValidationIssue:
    """
    One problem found in a decoded payload.

    - code: stable machine-readable tag (e.g. "ROW_YEAR")
    - path: where in the payload it was found (e.g. "rawData[3].year"); "" for the root
    - message: human-readable explanation
    """
    code: str
    path: str
    message: str

    def __str__(self) -> str:
        where = self.path or "<root>"
        return f"{self.code} at {where}: {self.message}"


class ValidationError(BuzzBrowserError):
    """Payload rejected as a whole; `issues` lists every problem found."""

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(str(i) for i in issues))

    def paths(self) -> List[str]:
        return [i.path for i in self.issues]
