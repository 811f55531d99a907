"""
GUID service for entity identification.

Generates, encodes, decodes and validates the public identifiers used in
URLs, API payloads and view-invalidation tokens. Internal integer keys
never leave the service layer.

GUID Format: {prefix}_{base32_uuid}
- prefix: 3-character entity type identifier (evt, sta, bgi, ...)
- base32_uuid: 26-character Crockford Base32 encoded UUIDv7
"""

import re
import uuid
from typing import Optional, Tuple

import base32_crockford
from uuid_extensions import uuid7

# Persisted entities only; every prefix is exactly three characters.
ENTITY_PREFIXES = {
    "evt": "Event",
    "stf": "Staff",
    "sta": "StaffAssignment",
    "spn": "Sponsor",
    "bgc": "BudgetCategory",
    "bgi": "BudgetItem",
    "ses": "AgendaSession",
    "spk": "Speaker",
}

GUID_PATTERN = re.compile(
    r"^(" + "|".join(ENTITY_PREFIXES) + r")_[0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{26}$",
    re.IGNORECASE
)


class GuidService:
    """
    Static helpers for GUID operations.

    Example:
        >>> guid = GuidService.generate_guid("spn")
        >>> GuidService.validate_guid(guid, "spn")
        True
        >>> GuidService.parse_guid(guid, "sta")
        Traceback (most recent call last):
        ValueError: GUID prefix mismatch. Expected 'sta', got 'spn'
    """

    @staticmethod
    def generate_uuid() -> uuid.UUID:
        """Generate a new time-ordered UUIDv7."""
        return uuid7()

    @staticmethod
    def encode_uuid(uuid_value, prefix: str) -> str:
        """
        Encode a UUID (or its 16 raw bytes) to a GUID string.

        Raises:
            ValueError: If prefix is not a known entity prefix
        """
        if prefix not in ENTITY_PREFIXES:
            raise ValueError(
                f"Invalid prefix '{prefix}'. "
                f"Valid prefixes: {', '.join(ENTITY_PREFIXES.keys())}"
            )

        raw = uuid_value if isinstance(uuid_value, bytes) else uuid_value.bytes
        encoded = base32_crockford.encode(int.from_bytes(raw, "big")).zfill(26)
        return f"{prefix}_{encoded.lower()}"

    @staticmethod
    def generate_guid(prefix: str) -> str:
        """Generate a brand-new GUID with the given prefix."""
        return GuidService.encode_uuid(GuidService.generate_uuid(), prefix)

    @staticmethod
    def decode_guid(guid: str) -> Tuple[str, uuid.UUID]:
        """
        Decode a GUID string to ``(prefix, UUID)``.

        Raises:
            ValueError: If the GUID format is invalid
        """
        if not guid:
            raise ValueError("GUID cannot be empty")

        if not GUID_PATTERN.match(guid):
            raise ValueError(
                f"Invalid GUID format: {guid}. "
                f"Expected format: {{prefix}}_{{26-char base32}}"
            )

        prefix = guid[:3].lower()
        try:
            uuid_int = base32_crockford.decode(guid[4:].upper())
            return prefix, uuid.UUID(bytes=uuid_int.to_bytes(16, "big"))
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid GUID encoding: {e}")

    @staticmethod
    def validate_guid(guid: str, expected_prefix: Optional[str] = None) -> bool:
        """Return True when ``guid`` is well formed (and has the expected prefix)."""
        if not guid or not GUID_PATTERN.match(guid):
            return False
        if expected_prefix:
            return guid[:3].lower() == expected_prefix.lower()
        return True

    @staticmethod
    def get_entity_type(guid: str) -> Optional[str]:
        """Map a GUID to its entity type name, or None if the prefix is unknown."""
        if not guid or len(guid) < 3:
            return None
        return ENTITY_PREFIXES.get(guid[:3].lower())

    @staticmethod
    def parse_guid(guid: str, expected_prefix: str) -> uuid.UUID:
        """
        Parse a GUID string to UUID, validating the prefix.

        Used by every service lookup before querying by ``uuid``.

        Raises:
            ValueError: If the format is invalid or the prefix doesn't match
        """
        if not guid:
            raise ValueError("Identifier cannot be empty")

        if not GUID_PATTERN.match(guid):
            if guid.isdigit():
                raise ValueError(
                    "Numeric IDs are not accepted. "
                    "Please use GUID format ({prefix}_{base32})"
                )
            raise ValueError(
                f"Invalid identifier format: {guid}. "
                f"Expected GUID format ({{prefix}}_{{base32}})"
            )

        prefix = guid[:3].lower()
        if prefix != expected_prefix.lower():
            raise ValueError(
                f"GUID prefix mismatch. "
                f"Expected '{expected_prefix}', got '{prefix}'"
            )

        _prefix, uuid_value = GuidService.decode_guid(guid)
        return uuid_value
