"""Unit tests for goduino.json handling."""

import json

import pytest

from godotino.config.manifest import (
    MANIFEST_FILENAME,
    Manifest,
    ManifestError,
    find_manifest,
    load_manifest,
)


def write_manifest(directory, data):
    path = directory / MANIFEST_FILENAME
    path.write_text(json.dumps(data))
    return path


class TestLoadManifest:
    """Tests for load_manifest()."""

    def test_full_manifest(self, tmp_path):
        write_manifest(
            tmp_path,
            {
                "name": "blink",
                "version": "1.2.0",
                "board": "esp32",
                "dependencies": [{"name": "servo", "version": "1.0", "kind": "arduino"}],
                "build": {"output_dir": "out", "source_map": True},
            },
        )

        manifest = load_manifest(tmp_path)

        assert manifest.name == "blink"
        assert manifest.board == "esp32"
        assert manifest.version == "1.2.0"
        assert manifest.build.output_dir == "out"
        assert manifest.build.source_map is True
        assert [dep.name for dep in manifest.dependencies] == ["servo"]
        assert manifest.dependencies[0].kind == "arduino"

    def test_defaults(self, tmp_path):
        write_manifest(tmp_path, {"name": "blink"})
        manifest = load_manifest(tmp_path)

        assert manifest.board == ""
        assert manifest.build.output_dir == "build"
        assert manifest.build.source_map is False
        assert manifest.dependencies == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match="No goduino.json"):
            load_manifest(tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / MANIFEST_FILENAME).write_text("{not json")
        with pytest.raises(ManifestError, match="Failed to parse"):
            load_manifest(tmp_path)

    def test_missing_name(self, tmp_path):
        write_manifest(tmp_path, {"board": "uno"})
        with pytest.raises(ManifestError, match="name"):
            load_manifest(tmp_path)

    def test_unknown_build_field(self, tmp_path):
        write_manifest(tmp_path, {"name": "x", "build": {"turbo": True}})
        with pytest.raises(ManifestError, match="Invalid field"):
            load_manifest(tmp_path)

    def test_not_an_object(self):
        with pytest.raises(ManifestError):
            Manifest.from_dict(["name"])


class TestFindManifest:
    """Tests for find_manifest()."""

    def test_searches_upward(self, tmp_path):
        write_manifest(tmp_path, {"name": "robot"})
        nested = tmp_path / "src" / "drivers"
        nested.mkdir(parents=True)

        project_dir, manifest = find_manifest(nested)

        assert project_dir == tmp_path.resolve()
        assert manifest.name == "robot"

    def test_not_found(self, tmp_path):
        with pytest.raises(ManifestError, match="searched from"):
            find_manifest(tmp_path)
