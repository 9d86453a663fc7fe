# notification_doctor/models/check_result.py
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel


class CheckStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"
    INFO = "info"
    SKIP = "skip"


class ErrorKind(str, Enum):
    MISSING_IDENTITY = "missing-identity"
    ACCESS_DENIED = "access-denied"
    MISSING_INDEX = "missing-index"
    OTHER = "other-backend-error"


class CheckResult(BaseModel):
    name: str
    status: CheckStatus
    passed: bool
    count: Optional[int] = None
    notification_id: Optional[str] = None
    error: Optional[ErrorKind] = None


CHECK_ORDER = ("identity", "existence", "unread", "subscription", "mutation")


class RunReport(BaseModel):
    """Resultado de la corrida completa, un CheckResult por check."""

    results: Dict[str, CheckResult] = {}
    aborted: bool = False

    def record(self, result: CheckResult) -> CheckResult:
        self.results[result.name] = result
        return result

    def passed(self, name: str) -> bool:
        result = self.results.get(name)
        return bool(result and result.passed)

    def summary(self) -> Dict[str, bool]:
        return {name: self.passed(name) for name in CHECK_ORDER}

    @property
    def overall(self) -> bool:
        # solo identidad y listener deciden el resultado global
        return self.passed("identity") and self.passed("subscription")
