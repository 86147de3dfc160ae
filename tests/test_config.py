"""Tests for Settings.from_env and JDK version detection."""

from __future__ import annotations

from pathlib import Path

from jrekit.config import Settings, detect_jdk_version


class TestFromEnv:
    def test_defaults(self, tmp_path: Path):
        s = Settings.from_env({}, work_dir=tmp_path)
        assert s.work_dir == tmp_path.resolve()
        assert s.jdk_version == "21"
        assert s.modules_override is None
        assert s.java_home is None
        assert s.app_name == "app"
        assert s.app_version == "1.0.0"

    def test_env_values(self, tmp_path: Path):
        env = {
            "JDK_VERSION": "17",
            "MODULES": "java.base,java.sql",
            "JAVA_HOME": "/opt/jdk",
            "JREKIT_APP_NAME": "tool",
            "JREKIT_APP_VERSION": "2.3.4",
        }
        s = Settings.from_env(env, work_dir=tmp_path)
        assert s.jdk_version == "17"
        assert s.modules_override == "java.base,java.sql"
        assert s.java_home == Path("/opt/jdk")
        assert s.app_name == "tool"
        assert s.app_version == "2.3.4"

    def test_blank_modules_is_absent(self, tmp_path: Path):
        s = Settings.from_env({"MODULES": "   "}, work_dir=tmp_path)
        assert s.modules_override is None

    def test_version_detected_from_downloads(self, tmp_path: Path):
        (tmp_path / "jdk-downloads" / "jdk-17-linux-x64").mkdir(parents=True)
        s = Settings.from_env({}, work_dir=tmp_path)
        assert s.jdk_version == "17"

    def test_explicit_version_wins_over_detection(self, tmp_path: Path):
        (tmp_path / "jdk-downloads" / "jdk-17-linux-x64").mkdir(parents=True)
        s = Settings.from_env({"JDK_VERSION": "21"}, work_dir=tmp_path)
        assert s.jdk_version == "21"

    def test_directories(self, tmp_path: Path):
        s = Settings(work_dir=tmp_path)
        assert s.downloads_dir == tmp_path / "jdk-downloads"
        assert s.builds_dir == tmp_path / "jre-builds"
        assert s.releases_dir == tmp_path / "portable-releases"
        assert s.jars_dir == tmp_path / "jars"


class TestDetectJdkVersion:
    def test_missing_dir(self, tmp_path: Path):
        assert detect_jdk_version(tmp_path / "nope") is None

    def test_highest_wins(self, tmp_path: Path):
        for name in ("jdk-11-linux-x64", "jdk-21-macos-arm64", "jdk-17-windows-x64"):
            (tmp_path / name).mkdir()
        assert detect_jdk_version(tmp_path) == "21"

    def test_ignores_files_and_other_names(self, tmp_path: Path):
        (tmp_path / "jdk-25-linux-x64.tar.gz").write_bytes(b"x")
        (tmp_path / "openjdk-19").mkdir()
        assert detect_jdk_version(tmp_path) is None
