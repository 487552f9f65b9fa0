"""Domain enumerations for graph construction and the step trace."""

import enum


class StepAction(str, enum.Enum):
    INITIALIZE = "initialize"
    SELECT_MIN = "select_min"
    EXPLORE = "explore"
    FOUND_TARGET = "found_target"


class GraphMode(str, enum.Enum):
    STREET = "street"  # explicit street edges
    PROXIMITY = "proximity"  # quadrant-limited nearest neighbours


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
