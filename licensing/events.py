"""
Diagnostic events for non-nominal license states.

Every LicenseState maps to how it is reported: ACTIVE is silent, every
other state is logged and published as one Warning event. The mapping must
name every state; a state without an entry fails at import.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from config import (
    EVENT_ACTION,
    EVENT_CONTROLLER,
    EVENT_TYPE,
    LICENSE_ANNOTATION_KEY,
    STREAMING_FEATURE,
)

from .model import LicenseState


@dataclass(frozen=True)
class StateReport:
    """How a license state is logged and described in its event."""
    level: int
    reason: str
    note: str

    def render(self, feature: str = STREAMING_FEATURE) -> "StateReport":
        """Fill in the feature name used by FEATURE_MISSING."""
        return StateReport(self.level, self.reason.format(feature=feature), self.note)

    @property
    def message(self) -> str:
        return f"{self.reason} {self.note}"


STATE_REPORTS: Dict[LicenseState, Optional[StateReport]] = {
    LicenseState.ACTIVE: None,
    LicenseState.GRACE_PERIOD: StateReport(
        logging.WARNING,
        "License is in grace period.",
        "Please provide a newer License in the License secret.",
    ),
    LicenseState.MISSING: StateReport(
        logging.ERROR,
        "No License found.",
        "Please provide a valid License in the License secret.",
    ),
    LicenseState.FEATURE_MISSING: StateReport(
        logging.ERROR,
        "License has no streaming feature ({feature}).",
        "Please provide a License with streaming feature.",
    ),
    LicenseState.DATE_MISSING: StateReport(
        logging.ERROR,
        "License has no start/expiration date.",
        "Please provide a valid License with proper dates.",
    ),
    LicenseState.INACTIVE: StateReport(
        logging.ERROR,
        "License is inactive.",
        "Please provide a valid License in the License secret.",
    ),
}

_unmapped = set(LicenseState) - set(STATE_REPORTS)
if _unmapped:
    raise RuntimeError(f"No report defined for license states: {sorted(s.name for s in _unmapped)}")

# Reports for failures that happen before a state can be evaluated
NO_LICENSE_REPORT = StateReport(
    logging.ERROR,
    "No license found.",
    "Please provide a valid license in the license secret.",
)
VERIFICATION_FAILED_REPORT = StateReport(
    logging.ERROR,
    "License verification failed.",
    "Please provide a valid license in the license secret.",
)


def format_micro_time(moment: datetime) -> str:
    """Kubernetes MicroTime: RFC 3339 in UTC with microseconds."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


@dataclass(frozen=True)
class ObjectReference:
    kind: str
    namespace: str
    name: str

    def to_dict(self) -> dict:
        return {"kind": self.kind, "namespace": self.namespace, "name": self.name}


@dataclass(frozen=True)
class LicenseEvent:
    """One diagnostic event (events.k8s.io/v1 Event)."""
    state: LicenseState
    reason: str
    note: str
    regarding: ObjectReference
    event_time: str
    action: str = EVENT_ACTION
    type: str = EVENT_TYPE
    reporting_controller: str = EVENT_CONTROLLER
    reporting_instance: str = ""
    generate_name: str = field(default_factory=lambda: f"license-event-{uuid.uuid4()}")

    @property
    def annotations(self) -> Dict[str, str]:
        return {LICENSE_ANNOTATION_KEY: str(self.state)}

    def to_dict(self) -> dict:
        return {
            "apiVersion": "events.k8s.io/v1",
            "kind": "Event",
            "metadata": {
                "generateName": self.generate_name,
                "annotations": self.annotations,
            },
            "action": self.action,
            "type": self.type,
            "reason": self.reason,
            "note": self.note,
            "regarding": self.regarding.to_dict(),
            "reportingController": self.reporting_controller,
            "reportingInstance": self.reporting_instance,
            "eventTime": self.event_time,
        }


def build_event(
    state: LicenseState,
    report: StateReport,
    namespace: str,
    deployment_name: str,
    now: Optional[datetime] = None,
) -> LicenseEvent:
    """Create the event describing ``state`` for the owning deployment."""
    if now is None:
        now = datetime.now(timezone.utc)
    return LicenseEvent(
        state=state,
        reason=report.reason,
        note=report.note,
        regarding=ObjectReference(kind="Deployment", namespace=namespace, name=deployment_name),
        event_time=format_micro_time(now),
        reporting_instance=deployment_name,
    )
