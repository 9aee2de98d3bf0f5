"""
Decision Data Models

후보별 리마인더 판단 결과
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SkipReason(Enum):
    """리마인더를 보내지 않는 이유"""
    NOT_PULL_REQUEST = "not_pull_request"
    BASE_MISMATCH = "base_mismatch"
    NO_LABEL_EVENT = "no_label_event"
    LABEL_TOO_RECENT = "label_too_recent"
    RECENTLY_REMINDED = "recently_reminded"


@dataclass(frozen=True)
class ReminderDecision:
    """리마인더 판단 결과 (저장하지 않고 매 실행마다 다시 계산)"""
    number: int
    due: bool
    reason: Optional[SkipReason] = None
    age_units: Optional[int] = None
    units_since_reminder: Optional[int] = None
    message: str = ""

    def __post_init__(self):
        """데이터 검증"""
        if self.due and self.reason is not None:
            raise ValueError("A due decision cannot carry a skip reason")
        if not self.due and self.reason is None:
            raise ValueError("A skip decision needs a reason")

    @classmethod
    def skip(cls, number: int, reason: SkipReason, message: str,
             age_units: Optional[int] = None,
             units_since_reminder: Optional[int] = None) -> "ReminderDecision":
        return cls(
            number=number,
            due=False,
            reason=reason,
            age_units=age_units,
            units_since_reminder=units_since_reminder,
            message=message,
        )

    @classmethod
    def remind(cls, number: int, age_units: int,
               units_since_reminder: Optional[int] = None) -> "ReminderDecision":
        return cls(
            number=number,
            due=True,
            age_units=age_units,
            units_since_reminder=units_since_reminder,
            message=f"label age {age_units}d, reminder due",
        )

    def describe(self) -> str:
        """로그 한 줄 형식"""
        return f"#{self.number}: {self.message}"
