"""Configuration loader for Akshara."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .learning.mastery import MasteryConfig
from .learning.sequencer import SequencerConfig


@dataclass
class RewardsConfig:
    """Star rewards and adaptive practice prompts."""

    stars_per_correct: int = 3
    # Offer adaptive practice once this many graphemes are flagged
    adaptive_alert_threshold: int = 3


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: str = "data/akshara.db"


@dataclass
class ContentConfig:
    """Grapheme dataset configuration."""

    # Local YAML path or http(s) URL
    source: str = "data/graphemes.yaml"
    timeout: int = 30
    max_retries: int = 3


@dataclass
class Config:
    """Main configuration container."""

    mastery: MasteryConfig = field(default_factory=MasteryConfig)
    sequencer: SequencerConfig = field(default_factory=SequencerConfig)
    rewards: RewardsConfig = field(default_factory=RewardsConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    log_level: str = "INFO"


def load_config(config_path: str = "config.yaml") -> Config:
    """Load configuration from YAML file and environment variables."""
    # Load environment variables
    load_dotenv()

    # Read YAML config
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Build a Config from an already-parsed YAML mapping."""
    mastery_data = data.get("mastery", {}) or {}
    sequencer_data = data.get("sequencer", {}) or {}
    rewards_data = data.get("rewards", {}) or {}
    database_data = data.get("database", {}) or {}
    content_data = data.get("content", {}) or {}

    mastery_defaults = MasteryConfig()
    sequencer_defaults = SequencerConfig()

    return Config(
        mastery=MasteryConfig(
            accuracy_weight=mastery_data.get(
                "accuracy_weight", mastery_defaults.accuracy_weight
            ),
            streak_points=mastery_data.get(
                "streak_points", mastery_defaults.streak_points
            ),
            streak_cap=mastery_data.get("streak_cap", mastery_defaults.streak_cap),
            fast_response_ms=mastery_data.get(
                "fast_response_ms", mastery_defaults.fast_response_ms
            ),
            fast_response_points=mastery_data.get(
                "fast_response_points", mastery_defaults.fast_response_points
            ),
            moderate_response_ms=mastery_data.get(
                "moderate_response_ms", mastery_defaults.moderate_response_ms
            ),
            moderate_response_points=mastery_data.get(
                "moderate_response_points", mastery_defaults.moderate_response_points
            ),
            retention_points=mastery_data.get(
                "retention_points", mastery_defaults.retention_points
            ),
            mastered_confidence=mastery_data.get(
                "mastered_confidence", mastery_defaults.mastered_confidence
            ),
            proficient_confidence=mastery_data.get(
                "proficient_confidence", mastery_defaults.proficient_confidence
            ),
            practicing_confidence=mastery_data.get(
                "practicing_confidence", mastery_defaults.practicing_confidence
            ),
            adaptive_struggle_threshold=mastery_data.get(
                "adaptive_struggle_threshold",
                mastery_defaults.adaptive_struggle_threshold,
            ),
        ),
        sequencer=SequencerConfig(
            struggling_accuracy=sequencer_data.get(
                "struggling_accuracy", sequencer_defaults.struggling_accuracy
            ),
            struggling_count=sequencer_data.get(
                "struggling_count", sequencer_defaults.struggling_count
            ),
            decomposition_threshold=sequencer_data.get(
                "decomposition_threshold", sequencer_defaults.decomposition_threshold
            ),
            transliteration_threshold=sequencer_data.get(
                "transliteration_threshold",
                sequencer_defaults.transliteration_threshold,
            ),
            difficulty_window=sequencer_data.get(
                "difficulty_window", sequencer_defaults.difficulty_window
            ),
            adaptive_decomposition_threshold=sequencer_data.get(
                "adaptive_decomposition_threshold",
                sequencer_defaults.adaptive_decomposition_threshold,
            ),
        ),
        rewards=RewardsConfig(
            stars_per_correct=rewards_data.get("stars_per_correct", 3),
            adaptive_alert_threshold=rewards_data.get("adaptive_alert_threshold", 3),
        ),
        database=DatabaseConfig(
            path=os.getenv(
                "AKSHARA_DB_PATH", database_data.get("path", "data/akshara.db")
            ),
        ),
        content=ContentConfig(
            source=os.getenv(
                "AKSHARA_CONTENT_URL",
                content_data.get("source", "data/graphemes.yaml"),
            ),
            timeout=content_data.get("timeout", 30),
            max_retries=content_data.get("max_retries", 3),
        ),
        log_level=os.getenv("AKSHARA_LOG_LEVEL", data.get("log_level", "INFO")),
    )
