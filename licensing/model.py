"""
License data model.

The signed license body is a JSON document::

    {
      "version"          : 1,
      "name"             : "ACME Corp",
      "uuid"             : "12c8052f-d78f-4a8e-bba4-a55a2d141fc8",
      "features"         : ["K8S_STREAM_CCU:200"],
      "startDate"        : "2024-01-01",
      "expirationDate"   : "2024-12-31",
      "deactivationDate" : "2025-03-31"
    }

Dates may also be written as [year, month, day] arrays. Unknown fields are
ignored.
"""

import json
import uuid as uuid_lib
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import FrozenSet, Optional

from .errors import LicenseDecodeError


class LicenseState(Enum):
    """Lifecycle state of a license on a given day."""
    MISSING = "MISSING"
    FEATURE_MISSING = "FEATURE_MISSING"
    DATE_MISSING = "DATE_MISSING"
    INACTIVE = "INACTIVE"
    ACTIVE = "ACTIVE"
    GRACE_PERIOD = "GRACE_PERIOD"

    def __str__(self) -> str:
        return self.value

    @property
    def is_entitled(self) -> bool:
        """True for the states in which the product may run."""
        return self in (LicenseState.ACTIVE, LicenseState.GRACE_PERIOD)


@dataclass(frozen=True)
class License:
    """Decoded license. Built once per verification, never modified."""
    uuid: Optional[uuid_lib.UUID] = None
    name: Optional[str] = None
    version: int = 0
    features: FrozenSet[str] = field(default_factory=frozenset)
    start_date: Optional[date] = None
    expiration_date: Optional[date] = None
    deactivation_date: Optional[date] = None

    def has_feature(self, feature: str) -> bool:
        """
        Check whether the license grants ``feature``.

        An entry matches when it equals the feature name (case-insensitive)
        or is tagged with a value, e.g. "K8S_STREAM_CCU:200".
        """
        if not feature:
            raise ValueError("Invalid feature.")
        prefix = f"{feature}:"
        wanted = feature.lower()
        return any(
            entry.lower() == wanted or entry.startswith(prefix)
            for entry in self.features
        )

    @classmethod
    def from_dict(cls, data: dict) -> "License":
        if not isinstance(data, dict):
            raise LicenseDecodeError(f"License must be a JSON object, got {type(data).__name__}")

        raw_uuid = data.get("uuid")
        try:
            license_uuid = uuid_lib.UUID(str(raw_uuid)) if raw_uuid is not None else None
        except ValueError:
            raise LicenseDecodeError(f"Invalid license uuid: {raw_uuid!r}")

        version = data.get("version", 0)
        if version is None:
            version = 0
        if isinstance(version, bool) or not isinstance(version, int):
            raise LicenseDecodeError(f"Invalid license version: {version!r}")

        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise LicenseDecodeError(f"Invalid license name: {name!r}")

        features = data.get("features") or []
        if not isinstance(features, list) or not all(isinstance(f, str) for f in features):
            raise LicenseDecodeError(f"Invalid license features: {features!r}")

        return cls(
            uuid=license_uuid,
            name=name,
            version=version,
            features=frozenset(features),
            start_date=parse_license_date(data.get("startDate"), "startDate"),
            expiration_date=parse_license_date(data.get("expirationDate"), "expirationDate"),
            deactivation_date=parse_license_date(data.get("deactivationDate"), "deactivationDate"),
        )

    @classmethod
    def from_json(cls, text) -> "License":
        """Decode the JSON body of a verified license."""
        try:
            data = json.loads(text)
        except ValueError as e:
            raise LicenseDecodeError(f"Failed to decode license after signature verification: {e}")
        return cls.from_dict(data)


def parse_license_date(value, field_name: str = "date") -> Optional[date]:
    """Accept "YYYY-MM-DD", [year, month, day] or null."""
    if value is None:
        return None
    try:
        if isinstance(value, str):
            return date.fromisoformat(value)
        if isinstance(value, list) and len(value) == 3 and all(
            isinstance(part, int) and not isinstance(part, bool) for part in value
        ):
            return date(*value)
    except ValueError as e:
        raise LicenseDecodeError(f"Invalid {field_name}: {value!r} ({e})")
    raise LicenseDecodeError(f"Invalid {field_name}: {value!r}")
