"""Tests for JAR discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from jrekit.exceptions import NoArtifactsError
from jrekit.modules.discovery import USAGE_HINT, discover_artifacts, find_package_artifacts


class TestDiscoverDefaults:
    def test_jars_dir_first(self, tmp_path: Path, make_jar):
        make_jar(tmp_path / "jars" / "b.jar")
        make_jar(tmp_path / "jars" / "a.jar")
        make_jar(tmp_path / "root.jar")

        found = discover_artifacts(None, tmp_path)
        assert [a.name for a in found] == ["a.jar", "b.jar"]

    def test_falls_back_to_work_dir(self, tmp_path: Path, make_jar):
        (tmp_path / "jars").mkdir()
        make_jar(tmp_path / "root.jar", size=300)

        found = discover_artifacts(None, tmp_path)
        assert [a.name for a in found] == ["root.jar"]
        assert found[0].size == 300

    def test_nothing_found(self, tmp_path: Path):
        with pytest.raises(NoArtifactsError) as exc_info:
            discover_artifacts(None, tmp_path)
        assert USAGE_HINT in str(exc_info.value)


class TestDiscoverInput:
    def test_single_jar(self, tmp_path: Path, make_jar):
        jar = make_jar(tmp_path / "libs" / "tool.jar")
        found = discover_artifacts(str(jar), tmp_path)
        assert len(found) == 1
        assert found[0].path == jar
        assert found[0].stem == "tool"

    def test_relative_path_resolved_against_work_dir(self, tmp_path: Path, make_jar):
        make_jar(tmp_path / "libs" / "tool.jar")
        found = discover_artifacts("libs/tool.jar", tmp_path)
        assert found[0].name == "tool.jar"

    def test_directory(self, tmp_path: Path, make_jar):
        make_jar(tmp_path / "libs" / "x.jar")
        make_jar(tmp_path / "libs" / "y.jar")
        (tmp_path / "libs" / "notes.txt").write_text("not a jar")
        found = discover_artifacts(str(tmp_path / "libs"), tmp_path)
        assert [a.name for a in found] == ["x.jar", "y.jar"]

    def test_empty_directory(self, tmp_path: Path):
        (tmp_path / "empty").mkdir()
        with pytest.raises(NoArtifactsError, match="No JAR files found in directory"):
            discover_artifacts(str(tmp_path / "empty"), tmp_path)

    def test_missing_path(self, tmp_path: Path):
        with pytest.raises(NoArtifactsError, match="Path not found"):
            discover_artifacts("missing.jar", tmp_path)

    def test_non_jar_file(self, tmp_path: Path):
        (tmp_path / "app.war").write_bytes(b"PK")
        with pytest.raises(NoArtifactsError):
            discover_artifacts("app.war", tmp_path)


class TestFindPackageArtifacts:
    def test_missing_dir(self, tmp_path: Path):
        assert find_package_artifacts(tmp_path / "jars") == []

    def test_lists_jars(self, tmp_path: Path, make_jar):
        make_jar(tmp_path / "jars" / "main.jar")
        assert [a.name for a in find_package_artifacts(tmp_path / "jars")] == ["main.jar"]
