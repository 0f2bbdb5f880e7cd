"""
Exceptions raised by the licensing pipeline.
"""


class LicenseError(Exception):
    """Base error for everything license related."""
    pass


class MalformedMessageError(LicenseError):
    """Armor or clear-sign framing is missing, truncated or corrupted."""
    pass


class VerificationError(LicenseError):
    """Signature could not be checked against the trust anchor."""
    pass


class LicenseDecodeError(LicenseError):
    """Verified payload is not a valid license document."""
    pass
