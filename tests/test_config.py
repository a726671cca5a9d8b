"""
tests/test_config.py

Unit tests for planner configuration loading.
"""

import pytest

from blockarm_config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    PlannerConfig,
    load_config,
)
from blockarm_exceptions import InvalidConfigError


class TestPlannerConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        config = PlannerConfig()

        assert config.timeout_seconds == 10.0
        assert config.max_expansions is None
        assert config.heuristic == "stack_penalty"
        assert config.height_penalty == 5
        assert config.parallel_workers == 1
        assert config.strict_state_checks is False

    @pytest.mark.parametrize(
        "field, value",
        [
            ("timeout_seconds", -1),
            ("max_expansions", -5),
            ("height_penalty", -0.5),
            ("parallel_workers", 0),
            ("oracle_cache_size", 0),
            ("heuristic", "nope"),
        ],
    )
    def test_rejects_out_of_range_values(self, field, value):
        with pytest.raises(InvalidConfigError):
            PlannerConfig(**{field: value})

    def test_from_dict_ignores_unknown_keys(self):
        config = PlannerConfig.from_dict({"timeout_seconds": 2.5, "colour": "blue"})

        assert config.timeout_seconds == 2.5
        assert "colour" not in config.to_dict()


class TestLoadConfig:
    """Test reading planner settings from YAML."""

    def test_bundled_config(self):
        assert DEFAULT_CONFIG_PATH.exists()
        assert load_config(DEFAULT_CONFIG_PATH) == PlannerConfig()

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == PlannerConfig()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "planner.yaml"
        path.write_text(
            "planner:\n  heuristic: zero\n  max_expansions: 500\n", encoding="utf-8"
        )

        config = load_config(path)

        assert config.heuristic == "zero"
        assert config.max_expansions == 500
        assert config.timeout_seconds == 10.0

    def test_empty_section(self, tmp_path):
        path = tmp_path / "planner.yaml"
        path.write_text("planner:\n", encoding="utf-8")

        assert load_config(path) == PlannerConfig()

    def test_environment_override(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("planner:\n  parallel_workers: 4\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_config().parallel_workers == 4

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("planner: [unclosed\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(path)

        assert exc_info.value.context["path"] == str(path)

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("planner:\n  - 1\n  - 2\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError):
            load_config(path)

    def test_unknown_heuristic(self, tmp_path):
        path = tmp_path / "heuristic.yaml"
        path.write_text("planner:\n  heuristic: bogus\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(path)

        assert "stack_penalty" in exc_info.value.context["available"]

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "negative.yaml"
        path.write_text("planner:\n  timeout_seconds: -3\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError):
            load_config(path)
