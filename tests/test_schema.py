"""Tests for the cache snapshot schema."""

from uuid import UUID

import pytest
from pydantic import ValidationError

from cachemigrate.schema import CacheSnapshot


class TestCacheSnapshot:
    """Tests for CacheSnapshot."""

    def test_valid_snapshot(self):
        """Test the documented shape validates."""
        snapshot = CacheSnapshot.model_validate({
            "version": "0.0.28",
            "theme": "dark",
            "tags": [{"name": "python"}],
            "authors": [],
            "postPreviews": [{"title": "Hello"}],
            "user": "0f8fad5b-d9cb-469f-a165-70867728950e",
        })

        assert snapshot.post_previews == [{"title": "Hello"}]
        assert isinstance(snapshot.user, UUID)

    def test_optional_user(self):
        """Test user may be null or absent."""
        snapshot = CacheSnapshot.model_validate({"version": "0.0.36", "theme": "light"})

        assert snapshot.user is None
        assert snapshot.tags == []

    def test_extra_fields_kept(self):
        """Test unknown fields survive a dump."""
        blob = {"version": "0.0.36", "theme": "light", "draft": {"body": "x"}}

        dumped = CacheSnapshot.model_validate(blob).to_blob()

        assert dumped["draft"] == {"body": "x"}
        assert "postPreviews" in dumped

    def test_bad_version(self):
        """Test the version field must parse."""
        with pytest.raises(ValidationError):
            CacheSnapshot.model_validate({"version": "0.28", "theme": "dark"})

    def test_bad_user(self):
        """Test user must be a UUID."""
        with pytest.raises(ValidationError):
            CacheSnapshot.model_validate(
                {"version": "0.0.28", "theme": "dark", "user": "someone"}
            )
