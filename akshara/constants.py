"""Constants for the Akshara learning engine."""

# Mastery level string constants
MASTERY_NOT_STARTED = "not_started"
MASTERY_LEARNING = "learning"
MASTERY_PRACTICING = "practicing"
MASTERY_PROFICIENT = "proficient"
MASTERY_MASTERED = "mastered"

MASTERY_LEVELS = (
    MASTERY_NOT_STARTED,
    MASTERY_LEARNING,
    MASTERY_PRACTICING,
    MASTERY_PROFICIENT,
    MASTERY_MASTERED,
)

# Mastery emoji mapping
MASTERY_EMOJI = {
    MASTERY_MASTERED: "🏆",
    MASTERY_PROFICIENT: "⭐",
    MASTERY_PRACTICING: "✏️",
    MASTERY_LEARNING: "📖",
    MASTERY_NOT_STARTED: "🌱",
}

# First-attempt seed confidence
FIRST_ATTEMPT_CONFIDENCE_SUCCESS = 30.0
FIRST_ATTEMPT_CONFIDENCE_FAILURE = 10.0

# Confidence score bounds
CONFIDENCE_MIN = 0.0
CONFIDENCE_MAX = 100.0

# Puzzle answer options (target + distractors)
OPTIONS_PER_PUZZLE = 4

# Progress reporting
MODULE_COMPLETION_CONFIDENCE = 80.0

# Default module for new learners
DEFAULT_MODULE = "hallulu"

