"""
Tests for licensing/events.py - state reports and event bodies.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from licensing.events import (
    NO_LICENSE_REPORT,
    STATE_REPORTS,
    VERIFICATION_FAILED_REPORT,
    LicenseEvent,
    ObjectReference,
    build_event,
    format_micro_time,
)
from licensing.model import LicenseState

MOMENT = datetime(2024, 2, 3, 10, 20, 30, 123456, tzinfo=timezone.utc)


class TestStateReports:

    def test_every_state_is_mapped(self):
        assert set(STATE_REPORTS) == set(LicenseState)

    def test_active_is_silent(self):
        assert STATE_REPORTS[LicenseState.ACTIVE] is None

    @pytest.mark.parametrize("state", [
        LicenseState.MISSING,
        LicenseState.FEATURE_MISSING,
        LicenseState.DATE_MISSING,
        LicenseState.INACTIVE,
    ])
    def test_failures_are_errors(self, state):
        assert STATE_REPORTS[state].level == logging.ERROR

    def test_grace_period_is_warning(self):
        report = STATE_REPORTS[LicenseState.GRACE_PERIOD]

        assert report.level == logging.WARNING
        assert report.message == (
            "License is in grace period. Please provide a newer License in the License secret."
        )

    def test_feature_name_rendered(self):
        report = STATE_REPORTS[LicenseState.FEATURE_MISSING].render("K8S_STREAM_CCU")
        assert report.reason == "License has no streaming feature (K8S_STREAM_CCU)."

    def test_render_without_placeholder(self):
        report = STATE_REPORTS[LicenseState.INACTIVE]
        assert report.render("ANY") == report

    def test_pre_evaluation_reports(self):
        assert NO_LICENSE_REPORT.reason == "No license found."
        assert VERIFICATION_FAILED_REPORT.reason == "License verification failed."


class TestFormatMicroTime:

    def test_utc(self):
        assert format_micro_time(MOMENT) == "2024-02-03T10:20:30.123456Z"

    def test_converts_to_utc(self):
        local = MOMENT.astimezone(timezone(timedelta(hours=2)))
        assert format_micro_time(local) == "2024-02-03T10:20:30.123456Z"

    def test_zero_microseconds_kept(self):
        assert format_micro_time(MOMENT.replace(microsecond=0)).endswith(".000000Z")


class TestLicenseEvent:

    def build(self, state=LicenseState.INACTIVE):
        return build_event(state, STATE_REPORTS[LicenseState.INACTIVE], "kafka", "cluster-operator", now=MOMENT)

    def test_fields(self):
        event = self.build()

        assert event.state == LicenseState.INACTIVE
        assert event.action == "LicenseCheck"
        assert event.type == "Warning"
        assert event.reason == "License is inactive."
        assert event.note == "Please provide a valid License in the License secret."
        assert event.regarding == ObjectReference("Deployment", "kafka", "cluster-operator")
        assert event.event_time == "2024-02-03T10:20:30.123456Z"
        assert event.reporting_instance == "cluster-operator"

    def test_annotation_carries_state(self):
        assert self.build(LicenseState.MISSING).annotations == {"csm/license-state": "MISSING"}

    def test_unique_names(self):
        assert self.build().generate_name != self.build().generate_name
        assert self.build().generate_name.startswith("license-event-")

    def test_to_dict(self):
        event = self.build(LicenseState.DATE_MISSING)

        body = event.to_dict()

        assert body["apiVersion"] == "events.k8s.io/v1"
        assert body["kind"] == "Event"
        assert body["metadata"] == {
            "generateName": event.generate_name,
            "annotations": {"csm/license-state": "DATE_MISSING"},
        }
        assert body["regarding"] == {"kind": "Deployment", "namespace": "kafka", "name": "cluster-operator"}
        assert body["reportingController"] == "strimzi.io/cluster-operator"
        assert body["eventTime"] == "2024-02-03T10:20:30.123456Z"
        assert body["action"] == "LicenseCheck"
        assert body["type"] == "Warning"

    def test_default_time_is_now(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        event = build_event(LicenseState.MISSING, NO_LICENSE_REPORT, "ns", "dep")

        assert event.event_time >= format_micro_time(before)

    def test_event_is_immutable(self):
        with pytest.raises(AttributeError):
            self.build().reason = "changed"

    def test_direct_construction(self):
        event = LicenseEvent(
            state=LicenseState.GRACE_PERIOD,
            reason="r",
            note="n",
            regarding=ObjectReference("Deployment", "ns", "dep"),
            event_time="t",
        )
        assert event.to_dict()["metadata"]["annotations"] == {"csm/license-state": "GRACE_PERIOD"}
