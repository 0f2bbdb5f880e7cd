"""
License state evaluation.

Maps (license, today, required feature) to a LicenseState. Rules, first
match wins:

    1. no license                                 -> MISSING
    2. required feature not granted               -> FEATURE_MISSING
    3. start or expiration date missing           -> DATE_MISSING
    4. today < start date                         -> INACTIVE
    5. today <= expiration date                   -> ACTIVE
    6. today <= max(expiration + 1 month,
                    deactivation date)            -> GRACE_PERIOD
    7. otherwise                                  -> INACTIVE
"""

import calendar
from datetime import date, datetime, timezone
from typing import Callable, Optional

from config import STREAMING_FEATURE

from .model import License, LicenseState

GRACE_PERIOD_MONTHS = 1

Clock = Callable[[], date]


def utc_today() -> date:
    """Current calendar day in UTC."""
    return datetime.now(timezone.utc).date()


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def grace_period_end(license: License) -> date:
    candidate = add_months(license.expiration_date, GRACE_PERIOD_MONTHS)
    if license.deactivation_date is None:
        return candidate
    return max(candidate, license.deactivation_date)


def evaluate(license: Optional[License], now: date, required_feature: str = STREAMING_FEATURE) -> LicenseState:
    """Pure state evaluation; ``now`` is supplied by the caller."""
    if license is None:
        return LicenseState.MISSING

    if not license.has_feature(required_feature):
        return LicenseState.FEATURE_MISSING

    if license.start_date is None or license.expiration_date is None:
        return LicenseState.DATE_MISSING

    if now < license.start_date:
        return LicenseState.INACTIVE

    if now <= license.expiration_date:
        return LicenseState.ACTIVE

    if now <= grace_period_end(license):
        return LicenseState.GRACE_PERIOD

    return LicenseState.INACTIVE


class LicenseStateEvaluator:
    """
    Evaluates licenses against an injected clock.

    Usage:
        evaluator = LicenseStateEvaluator(clock=lambda: date(2024, 2, 3))
        state = evaluator.check_license_state(license)
    """

    def __init__(self, clock: Clock = utc_today, required_feature: str = STREAMING_FEATURE):
        self.clock = clock
        self.required_feature = required_feature

    def check_license_state(self, license: Optional[License]) -> LicenseState:
        return evaluate(license, self.clock(), self.required_feature)
