"""
License validity subsystem.

Verifying a license once:
    from licensing import LicenseChecker

    checker = LicenseChecker()
    state = checker.check_license(raw_bytes)

Watching it continuously:
    from licensing import ExpirationWatcher

    watcher = ExpirationWatcher(secret_store, event_sink, config)
    watcher.start()
    watcher.is_active()
"""

from .clearsign import ClearSignedMessage, decode
from .errors import (
    LicenseDecodeError,
    LicenseError,
    MalformedMessageError,
    VerificationError,
)
from .evaluator import LicenseStateEvaluator, evaluate
from .events import LicenseEvent
from .interval_task import CancellableIntervalTask
from .license_checker import LicenseChecker
from .model import License, LicenseState
from .trust_anchor import default_trust_anchor
from .verifier import TrustAnchor, verify, verify_message
from .watcher import ExpirationWatcher

__all__ = [
    "CancellableIntervalTask",
    "ClearSignedMessage",
    "ExpirationWatcher",
    "License",
    "LicenseChecker",
    "LicenseDecodeError",
    "LicenseError",
    "LicenseEvent",
    "LicenseState",
    "LicenseStateEvaluator",
    "MalformedMessageError",
    "TrustAnchor",
    "VerificationError",
    "decode",
    "default_trust_anchor",
    "evaluate",
    "verify",
    "verify_message",
]
