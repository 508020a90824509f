"""Tests for InMemoryProfileRegistry and resource adapters."""

import pytest

from statkit.config import StatKitConfig
from statkit.domain.entities import ProfileConfig
from statkit.domain.exceptions import ConfigurationError, ProfileNotFoundError
from statkit.infrastructure.config.profile_registry import InMemoryProfileRegistry
from statkit.infrastructure.resources import BytesResource, FileResource


class TestInMemoryProfileRegistry:

    def test_get_all_keeps_declaration_order(self, registry):
        assert [p.name for p in registry.get_all()] == ["default", "exposome", "draft"]

    def test_get_by_name(self, registry):
        assert registry.get_by_name("exposome").port == 6312

    def test_unknown_name(self, registry):
        with pytest.raises(ProfileNotFoundError) as exc_info:
            registry.get_by_name("nope")
        assert exc_info.value.__cause__ is None

    def test_duplicate_names_rejected(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            InMemoryProfileRegistry([ProfileConfig(name="a"), ProfileConfig(name="a", port=1)])

    def test_get_all_returns_copy(self, registry):
        registry.get_all().clear()
        assert len(registry.get_all()) == 3

    def test_from_config(self):
        config = StatKitConfig.from_dict({"profiles": [{"name": "default", "image": "img"}]})

        registry = InMemoryProfileRegistry.from_config(config)

        assert registry.get_by_name("default").image == "img"


class TestResources:

    def test_bytes_resource(self):
        resource = BytesResource(b"payload", name="upload.parquet")

        with resource.open() as stream:
            assert stream.read() == b"payload"
        assert resource.name == "upload.parquet"
        assert len(resource) == 7

    def test_bytes_resource_opens_fresh_streams(self):
        resource = BytesResource(b"abc")

        with resource.open() as first:
            first.read()
        with resource.open() as second:
            assert second.read() == b"abc"

    def test_file_resource(self, tmp_path):
        path = tmp_path / "dsBase_6.3.0.tar.gz"
        path.write_bytes(b"\x1f\x8b")

        resource = FileResource(path)

        assert resource.name == "dsBase_6.3.0.tar.gz"
        with resource.open() as stream:
            assert stream.read() == b"\x1f\x8b"
