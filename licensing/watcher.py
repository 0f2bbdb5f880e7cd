"""
License Expiration Watcher

Re-checks the license on a schedule and keeps a single "active" flag that
other parts of the process read to decide whether they may run.

Each check:
    1. reads the license secret (up to 3 attempts, 3s apart)
    2. verifies and decodes the clear-signed license
    3. evaluates its state and updates the flag
    4. logs and publishes one event for every state except ACTIVE

No failure inside a check escapes it; an unreadable or invalid license
simply leaves the product inactive.
"""

import base64
import logging
import threading
from typing import Mapping, Optional, Protocol

from config import LICENSE_SECRET_KEY, LicenseConfig

from .events import (
    NO_LICENSE_REPORT,
    STATE_REPORTS,
    VERIFICATION_FAILED_REPORT,
    StateReport,
    build_event,
)
from .interval_task import CancellableIntervalTask
from .license_checker import LicenseChecker
from .model import LicenseState

logger = logging.getLogger(__name__)


class SecretStore(Protocol):
    def get(self, namespace: str, name: str) -> Optional[Mapping[str, str]]:
        ...


class EventSink(Protocol):
    def publish(self, event) -> None:
        ...


class CheckCancelled(Exception):
    """Check was cancelled while reading the license secret."""
    pass


class ExpirationWatcher:
    """
    Periodic license checker with a thread-safe "active" flag.

    Usage:
        watcher = ExpirationWatcher(secret_store, event_sink, LicenseConfig(namespace="kafka"))
        watcher.start()
        ...
        if watcher.is_active():
            ...
        watcher.stop()
    """

    def __init__(
        self,
        secret_store: SecretStore,
        event_sink: EventSink,
        config: Optional[LicenseConfig] = None,
        checker: Optional[LicenseChecker] = None,
    ):
        self.secret_store = secret_store
        self.event_sink = event_sink
        self.config = config or LicenseConfig()
        self.checker = checker or LicenseChecker(required_feature=self.config.required_feature)
        # Single writer (the check), many readers; rebinding a bool is atomic
        self._active = False
        self._task: Optional[CancellableIntervalTask] = None
        self._lifecycle_lock = threading.Lock()
        self._commit_lock = threading.Lock()

    def is_active(self) -> bool:
        """
        Last committed verdict: True when the license was verified, grants
        the required feature and is started and not expired (grace period
        included).
        """
        return self._active

    @property
    def is_running(self) -> bool:
        return self._task is not None

    # ============================================================
    # Lifecycle
    # ============================================================

    def start(self):
        """Check now, then every check_interval seconds."""
        with self._lifecycle_lock:
            if self._task is not None:
                logger.warning("License checking is already running")
                return
            logger.info("Start license checking")
            self._task = CancellableIntervalTask(
                self._scheduled_check,
                interval=self.config.check_interval,
                name="license-expiration-watcher",
            )
            self._task.start()

    def stop(self):
        """Cancel the schedule and wait up to stop_timeout for the running check."""
        with self._lifecycle_lock:
            if self._task is None:
                return
            logger.info("Stop license checking")
            task, self._task = self._task, None
            with self._commit_lock:
                task.cancel()
            task.stop(self.config.stop_timeout)

    def _scheduled_check(self, cancelled: threading.Event):
        self.check(retry_allowed=True, cancelled=cancelled)

    # ============================================================
    # Check
    # ============================================================

    def check(self, retry_allowed: bool = True, cancelled: Optional[threading.Event] = None):
        """
        Run one license check and update the active flag.

        Args:
            retry_allowed: Read the secret up to retry_attempts times
            cancelled: Aborts the check; once set, the flag is left
                unchanged and no event is published
        """
        cancelled = cancelled or threading.Event()
        try:
            data = self._get_license_secret_data(retry_allowed, cancelled)
        except CheckCancelled:
            logger.info("License check cancelled, keeping previous state")
            return

        if not data:
            self._commit(cancelled, False, LicenseState.MISSING, NO_LICENSE_REPORT)
            return

        try:
            license = self.checker.get_verified_license(base64.b64decode(data, validate=True))
            state = self.checker.check_license_state(license)
        except Exception:
            logger.exception(VERIFICATION_FAILED_REPORT.message)
            self._commit(cancelled, False, LicenseState.MISSING, VERIFICATION_FAILED_REPORT, logged=True)
            return

        report = STATE_REPORTS[state]
        if report is not None:
            report = report.render(self.config.required_feature)
        self._commit(cancelled, state.is_entitled, state, report)

    def _commit(
        self,
        cancelled: threading.Event,
        active: bool,
        state: LicenseState,
        report: Optional[StateReport],
        logged: bool = False,
    ):
        """Store the verdict and report it, unless the check was cancelled."""
        # stop() cancels under the same lock
        with self._commit_lock:
            if cancelled.is_set():
                logger.info("License check cancelled, keeping previous state")
                return
            self._active = active
            if report is None:
                return
            if not logged:
                logger.log(report.level, report.message)
            self._publish_event(state, report)

    def _get_license_secret_data(self, retry_allowed: bool, cancelled: threading.Event) -> Optional[str]:
        """Base64 license value from the secret, or None after all attempts."""
        attempts = self.config.retry_attempts if retry_allowed else 1
        for attempt in range(attempts):
            if attempt > 0 and cancelled.wait(self.config.retry_delay):
                raise CheckCancelled()
            if cancelled.is_set():
                raise CheckCancelled()

            secret_data = self._read_secret()
            if cancelled.is_set():
                raise CheckCancelled()
            if not secret_data or not secret_data.get(LICENSE_SECRET_KEY):
                logger.debug(
                    f"Secret is empty or does not contain key '{LICENSE_SECRET_KEY}' "
                    f"(attempt {attempt + 1}/{attempts})"
                )
                continue
            return secret_data[LICENSE_SECRET_KEY]

        return None

    def _read_secret(self) -> Optional[Mapping[str, str]]:
        try:
            return self.secret_store.get(self.config.namespace, self.config.secret_name)
        except Exception as e:
            logger.debug(
                f"License secret not found in namespace '{self.config.namespace}' "
                f"with name '{self.config.secret_name}': {e}"
            )
            return None

    # ============================================================
    # Reporting
    # ============================================================

    def _publish_event(self, state: LicenseState, report: StateReport):
        event = build_event(state, report, self.config.namespace, self.config.deployment_name)
        try:
            self.event_sink.publish(event)
        except Exception as e:
            logger.error(f"Failed to publish license event ({state}): {e}")
