"""Tests for YAML and environment configuration."""

import pytest

from akshara.config import Config, load_config, parse_config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.setattr("akshara.config.load_dotenv", lambda: False)
    for name in ("AKSHARA_DB_PATH", "AKSHARA_CONTENT_URL", "AKSHARA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestParseConfig:
    """Building a Config from a parsed YAML mapping."""

    def test_empty_mapping_uses_defaults(self):
        config = parse_config({})

        assert config.mastery.accuracy_weight == 0.4
        assert config.mastery.mastered_confidence == 90.0
        assert config.mastery.adaptive_struggle_threshold == 3
        assert config.sequencer.decomposition_threshold == 0.6
        assert config.sequencer.transliteration_threshold == 0.3
        assert config.rewards.stars_per_correct == 3
        assert config.database.path == "data/akshara.db"
        assert config.content.source == "data/graphemes.yaml"
        assert config.log_level == "INFO"

    def test_defaults_match_dataclass_defaults(self):
        assert parse_config({}) == Config()

    def test_partial_sections_override_only_given_keys(self):
        config = parse_config(
            {
                "mastery": {"streak_cap": 20, "proficient_confidence": 75},
                "sequencer": {"difficulty_window": 2},
                "rewards": {"stars_per_correct": 5},
            }
        )

        assert config.mastery.streak_cap == 20
        assert config.mastery.proficient_confidence == 75
        assert config.mastery.streak_points == 5.0
        assert config.sequencer.difficulty_window == 2
        assert config.sequencer.struggling_accuracy == 50.0
        assert config.rewards.stars_per_correct == 5
        assert config.rewards.adaptive_alert_threshold == 3

    def test_null_sections_are_ignored(self):
        config = parse_config({"mastery": None, "database": None})

        assert config.mastery.retention_points == 10.0
        assert config.database.path == "data/akshara.db"

    def test_environment_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("AKSHARA_DB_PATH", "/tmp/learners.db")
        monkeypatch.setenv("AKSHARA_CONTENT_URL", "https://content.example.com/graphemes.yaml")
        monkeypatch.setenv("AKSHARA_LOG_LEVEL", "DEBUG")

        config = parse_config(
            {
                "database": {"path": "data/other.db"},
                "content": {"source": "data/other.yaml"},
                "log_level": "WARNING",
            }
        )

        assert config.database.path == "/tmp/learners.db"
        assert config.content.source == "https://content.example.com/graphemes.yaml"
        assert config.log_level == "DEBUG"


class TestLoadConfig:
    """Reading configuration files from disk."""

    def test_loads_yaml_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "database:\n  path: ':memory:'\ncontent:\n  timeout: 5\n  max_retries: 1\n",
            encoding="utf-8",
        )

        config = load_config(str(config_file))

        assert config.database.path == ":memory:"
        assert config.content.timeout == 5
        assert config.content.max_retries == 1

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("", encoding="utf-8")

        assert load_config(str(config_file)) == Config()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))
