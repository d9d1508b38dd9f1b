"""
Validation report model — result of checking an installed setup.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

CheckStatus = Literal["pass", "warn", "fail"]


class ValidationCheck(BaseModel):
    check: str
    status: CheckStatus = "pass"
    message: str = ""
    fixable: bool = False


class ValidationReport(BaseModel):
    """Collected check results for one validate run."""

    checks: list[ValidationCheck] = Field(default_factory=list)
    fixed: list[str] = Field(default_factory=list)

    def add(
        self,
        check: str,
        status: CheckStatus = "pass",
        message: str = "",
        *,
        fixable: bool = False,
    ) -> None:
        self.checks.append(
            ValidationCheck(check=check, status=status, message=message, fixable=fixable)
        )

    @property
    def has_errors(self) -> bool:
        return any(c.status == "fail" for c in self.checks)

    @property
    def has_warnings(self) -> bool:
        return any(c.status == "warn" for c in self.checks)

    @property
    def passed(self) -> int:
        return sum(1 for c in self.checks if c.status == "pass")

    @property
    def total(self) -> int:
        return len(self.checks)

    def to_dict(self) -> dict:
        return {
            "valid": not self.has_errors,
            "passed": self.passed,
            "total": self.total,
            "checks": [c.model_dump() for c in self.checks],
            "fixed": self.fixed,
        }
