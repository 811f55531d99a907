"""
Unit tests for GuidService.

Tests cover:
- UUID generation
- GUID encoding/decoding
- Format validation
- Identifier parsing and error handling
"""

import uuid

import pytest

from backend.src.services.guid import (
    GuidService,
    ENTITY_PREFIXES,
    GUID_PATTERN,
)


class TestUuidGeneration:
    """Tests for UUID generation."""

    def test_generate_uuid_is_version_7(self):
        """Generated UUIDs are version 7 (time-ordered)."""
        assert GuidService.generate_uuid().version == 7

    def test_generate_uuid_is_unique(self):
        uuids = [GuidService.generate_uuid() for _ in range(100)]
        assert len(set(uuids)) == 100


class TestGuidEncoding:
    """Tests for GUID encoding and decoding."""

    @pytest.mark.parametrize("prefix", sorted(ENTITY_PREFIXES))
    def test_encode_with_every_prefix(self, prefix):
        result = GuidService.encode_uuid(GuidService.generate_uuid(), prefix)
        assert result.startswith(f"{prefix}_")
        assert len(result) == 30  # 3 (prefix) + 1 (_) + 26 (base32)
        assert GUID_PATTERN.match(result)

    def test_encode_is_lowercase(self):
        result = GuidService.generate_guid("sta")
        assert result == result.lower()

    def test_encode_rejects_unknown_prefix(self):
        with pytest.raises(ValueError):
            GuidService.encode_uuid(GuidService.generate_uuid(), "col")

    def test_decode_roundtrip(self):
        original = GuidService.generate_uuid()
        prefix, decoded = GuidService.decode_guid(GuidService.encode_uuid(original, "bgi"))
        assert prefix == "bgi"
        assert decoded == original


class TestGuidValidation:
    """Tests for validation and parsing."""

    def test_validate_checks_prefix(self):
        guid = GuidService.generate_guid("spn")
        assert GuidService.validate_guid(guid, "spn")
        assert not GuidService.validate_guid(guid, "sta")

    @pytest.mark.parametrize("value", ["", "spn_123", "abc_" + "0" * 26, "42"])
    def test_validate_rejects_malformed(self, value):
        assert not GuidService.validate_guid(value)

    def test_get_entity_type(self):
        assert GuidService.get_entity_type(GuidService.generate_guid("ses")) == "AgendaSession"
        assert GuidService.get_entity_type("xyz_abc") is None

    def test_parse_prefix_mismatch(self):
        with pytest.raises(ValueError, match="prefix mismatch"):
            GuidService.parse_guid(GuidService.generate_guid("evt"), "stf")

    def test_parse_rejects_numeric_ids(self):
        with pytest.raises(ValueError, match="Numeric IDs"):
            GuidService.parse_guid("42", "evt")

    def test_parse_returns_uuid(self):
        original = GuidService.generate_uuid()
        guid = GuidService.encode_uuid(original, "evt")
        assert isinstance(GuidService.parse_guid(guid, "evt"), uuid.UUID)
        assert GuidService.parse_guid(guid, "evt") == original
