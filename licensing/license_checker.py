"""
License Checker - verified license decoding and state evaluation.

Runs the full pipeline on raw clear-signed bytes:
    clear-sign decode -> signature check -> JSON decode -> state

Usage:
    from licensing.license_checker import LicenseChecker

    checker = LicenseChecker()
    license = checker.get_verified_license(raw_bytes)
    state = checker.check_license_state(license)

CLI:
    python -m licensing.license_checker license.asc --today 2024-02-03
"""

import logging
import sys
from datetime import date
from typing import Optional

from config import STREAMING_FEATURE

from . import clearsign
from .errors import LicenseError, VerificationError
from .evaluator import Clock, LicenseStateEvaluator, utc_today
from .model import License, LicenseState
from .trust_anchor import default_trust_anchor
from .verifier import TrustAnchor, verify_message

logger = logging.getLogger(__name__)


class LicenseChecker:
    """
    Verifies clear-signed licenses and evaluates their state.
    """

    def __init__(
        self,
        trust_anchor: Optional[TrustAnchor] = None,
        clock: Clock = utc_today,
        required_feature: str = STREAMING_FEATURE,
    ):
        """
        Args:
            trust_anchor: Keys allowed to sign licenses.
                          If None, the embedded key is used.
            clock: Returns "today"; injected for deterministic checks
            required_feature: Feature the license must grant
        """
        self.trust_anchor = trust_anchor if trust_anchor is not None else default_trust_anchor()
        self.evaluator = LicenseStateEvaluator(clock=clock, required_feature=required_feature)

    def get_verified_license(self, license_bytes: bytes) -> License:
        """
        Verify license bytes and decode the signed JSON.

        Raises:
            MalformedMessageError: Clear-sign framing is broken
            VerificationError: Signature missing, unknown or invalid
            LicenseDecodeError: Signed body is not a valid license
        """
        if not license_bytes:
            raise LicenseError("No license key was provided")

        message = clearsign.decode(license_bytes)
        if not verify_message(message, self.trust_anchor):
            raise VerificationError("License signature verification failed.")

        return License.from_json(message.content)

    def check_license_state(self, license: Optional[License]) -> LicenseState:
        return self.evaluator.check_license_state(license)

    def check_license(self, license_bytes: bytes) -> LicenseState:
        """Verify and evaluate in one step; any failure counts as MISSING."""
        try:
            license = self.get_verified_license(license_bytes)
        except LicenseError as e:
            logger.error(f"License verification failed: {e}")
            return LicenseState.MISSING
        return self.check_license_state(license)


# ============================================================
# CLI
# ============================================================

def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Verify a clear-signed license file")
    parser.add_argument("license_file", help="Path to the clear-signed license")
    parser.add_argument("--feature", default=STREAMING_FEATURE,
                        help=f"Required feature (default: {STREAMING_FEATURE})")
    parser.add_argument("--today", type=date.fromisoformat, default=None,
                        help="Evaluate as of this day (YYYY-MM-DD, default: today UTC)")
    parser.add_argument("--key", default=None,
                        help="Armored public key to verify with (default: embedded key)")
    args = parser.parse_args(argv)

    try:
        trust_anchor = None
        if args.key:
            with open(args.key, "rb") as f:
                trust_anchor = TrustAnchor.from_armored(f.read())

        clock = (lambda: args.today) if args.today else utc_today
        checker = LicenseChecker(trust_anchor=trust_anchor, clock=clock, required_feature=args.feature)

        with open(args.license_file, "rb") as f:
            license = checker.get_verified_license(f.read())
        state = checker.check_license_state(license)
    except (OSError, LicenseError) as e:
        print(f"Error: {e}")
        return 1

    print("=" * 50)
    print("LICENSE CHECK RESULT")
    print("=" * 50)
    print(f"  Name: {license.name}")
    print(f"  UUID: {license.uuid}")
    print(f"  Version: {license.version}")
    print(f"  Features: {', '.join(sorted(license.features))}")
    print(f"  Start: {license.start_date}")
    print(f"  Expires: {license.expiration_date}")
    print(f"  Deactivation: {license.deactivation_date}")
    print(f"  State: {state}")
    print("=" * 50)

    return 0 if state.is_entitled else 1


if __name__ == "__main__":
    sys.exit(main())
