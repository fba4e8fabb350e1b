"""Tests for the process-wide secure filesystem facade."""

import stat
from pathlib import Path

import pytest

from pathgate import secure_fs
from pathgate.core.config import Config
from pathgate.core.errors import (
    AbsolutePathRejected,
    EmptyPathError,
    InvalidPatternError,
    PathEscapeError,
    PatternMismatchError,
    PolicyNotInitializedError,
)
from pathgate.policy.patterns import DEFAULT_PATTERN, ValidationMode
from pathgate.policy.store import PolicyStore


class TestUninitialized:
    """Nothing resolves before the sandbox is configured."""

    def test_resolve_requires_initialize(self, fresh_secure_fs: PolicyStore):
        with pytest.raises(PolicyNotInitializedError):
            secure_fs.resolve("reports/q1.csv")

    def test_list_directory_requires_initialize(self, fresh_secure_fs: PolicyStore):
        with pytest.raises(PolicyNotInitializedError):
            secure_fs.list_directory(".")

    def test_empty_path_reported_first(self, fresh_secure_fs: PolicyStore):
        with pytest.raises(EmptyPathError):
            secure_fs.resolve("")


class TestFacade:
    def test_initialize_and_resolve(self, fresh_secure_fs: PolicyStore):
        policy = secure_fs.initialize("/srv/data")
        assert policy.base_directory == Path("/srv/data")
        assert secure_fs.get_store() is fresh_secure_fs
        assert secure_fs.resolve("reports/q1.csv") == Path("/srv/data/reports/q1.csv")

    def test_absolute_rejected(self, fresh_secure_fs: PolicyStore):
        secure_fs.initialize("/srv/data")
        with pytest.raises(AbsolutePathRejected):
            secure_fs.resolve("/etc/passwd")

    def test_traversal_rejected(self, fresh_secure_fs: PolicyStore):
        secure_fs.initialize("/srv/data")
        with pytest.raises(PathEscapeError):
            secure_fs.resolve("../../etc/passwd")

    def test_allow_relative_scenario(self, fresh_secure_fs: PolicyStore):
        secure_fs.initialize("/srv/data", ValidationMode.ALLOW_RELATIVE)
        assert secure_fs.resolve("./a/../b") == Path("/srv/data/b")

    def test_empty_pattern_keeps_prior(self, fresh_secure_fs: PolicyStore):
        secure_fs.initialize("/srv/data")
        with pytest.raises(InvalidPatternError):
            secure_fs.set_whitelist_pattern("")
        assert fresh_secure_fs.policy.whitelist_pattern.pattern == DEFAULT_PATTERN

    def test_set_pattern_applies_when_enforced(self, fresh_secure_fs: PolicyStore):
        secure_fs.initialize("/srv/data", enforce_whitelist=True)
        secure_fs.set_whitelist_pattern(r"^[a-z]+\.csv$")
        assert secure_fs.resolve("report.csv") == Path("/srv/data/report.csv")
        with pytest.raises(PatternMismatchError):
            secure_fs.resolve("reports/q1")

    def test_reinitialize_moves_base(self, fresh_secure_fs: PolicyStore):
        secure_fs.initialize("/srv/data")
        secure_fs.initialize("/srv/other")
        assert secure_fs.resolve("x") == Path("/srv/other/x")

    def test_list_directory(self, fresh_secure_fs: PolicyStore, tmp_path: Path):
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "readme.md").write_text("hi")
        secure_fs.initialize(tmp_path)
        entries = secure_fs.list_directory("docs")
        assert [e.name for e in entries] == ["readme.md"]

    def test_list_directory_propagates_os_error(self, fresh_secure_fs: PolicyStore, tmp_path: Path):
        secure_fs.initialize(tmp_path)
        with pytest.raises(FileNotFoundError):
            secure_fs.list_directory("missing")

    def test_check_directory_permissions(self, tmp_path: Path):
        tmp_path.chmod(0o755)
        assert secure_fs.check_directory_permissions(tmp_path, stat.S_IRWXU) is True
        assert secure_fs.check_directory_permissions(tmp_path / "missing", stat.S_IRUSR) is False


class TestInitializeFromConfig:
    def test_applies_policy_settings(self, fresh_secure_fs: PolicyStore, tmp_path: Path):
        config = Config(
            policy={
                "base_directory": str(tmp_path),
                "mode": "strict",
                "whitelist_pattern": r"^[a-z/]+$",
                "enforce_whitelist": True,
            },
            timezone="Europe/London",
        )
        policy = secure_fs.initialize_from_config(config)

        assert policy.base_directory == tmp_path
        assert policy.mode is ValidationMode.STRICT
        assert policy.whitelist_pattern.pattern == r"^[a-z/]+$"
        assert fresh_secure_fs.policy is policy
        assert secure_fs._timezone == "Europe/London"
        with pytest.raises(PatternMismatchError):
            secure_fs.resolve("Upper")

    def test_mode_default_pattern_without_override(self, fresh_secure_fs: PolicyStore):
        config = Config(policy={"base_directory": "/srv/data"})
        policy = secure_fs.initialize_from_config(config)
        assert policy.whitelist_pattern.pattern == DEFAULT_PATTERN
        assert policy.enforce_whitelist is False

    def test_pattern_override_published_in_one_snapshot(
        self, fresh_secure_fs: PolicyStore, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        published: list[str] = []
        original_initialize = fresh_secure_fs.initialize

        def recording_initialize(*args, **kwargs):
            policy = original_initialize(*args, **kwargs)
            published.append(policy.whitelist_pattern.pattern)
            return policy

        def no_second_swap(pattern: str) -> None:
            raise AssertionError("whitelist override must not be applied as a separate swap")

        monkeypatch.setattr(fresh_secure_fs, "initialize", recording_initialize)
        monkeypatch.setattr(fresh_secure_fs, "set_whitelist_pattern", no_second_swap)

        config = Config(
            policy={"base_directory": str(tmp_path), "whitelist_pattern": r"^[a-z]+$", "enforce_whitelist": True}
        )
        policy = secure_fs.initialize_from_config(config)

        assert published == [r"^[a-z]+$"]
        assert fresh_secure_fs.policy is policy

    def test_invalid_override_keeps_previous_policy(self, fresh_secure_fs: PolicyStore, tmp_path: Path):
        previous = secure_fs.initialize(tmp_path)
        with pytest.raises(InvalidPatternError):
            secure_fs.initialize(tmp_path / "other", whitelist_pattern="(")
        assert fresh_secure_fs.policy is previous
