"""Scoring weight configuration.

Weights can be externalized to a JSON or YAML file and loaded with
``load_weights``.
"""

import json
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator


class ScoringWeights(BaseModel):
    """Weights for the three match dimensions. Must sum to 1.0."""

    turnover: float = 0.40
    sector: float = 0.35
    certification: float = 0.25
    version: str = "1.0"

    @field_validator("turnover", "sector", "certification")
    @classmethod
    def weight_range(cls, v: float) -> float:
        """Ensure weights are between 0 and 1."""
        if not 0 <= v <= 1:
            raise ValueError(f"Weight must be between 0 and 1, got {v}")
        return v

    def model_post_init(self, __context) -> None:
        """Validate that weights sum to 1.0."""
        total = self.turnover + self.sector + self.certification
        if abs(total - 1.0) > 0.001:
            raise ValueError(
                f"Weights must sum to 1.0, got {total:.3f}. "
                f"(T:{self.turnover}, S:{self.sector}, C:{self.certification})"
            )


DEFAULT_WEIGHTS = ScoringWeights()


def load_weights(filepath: Optional[str] = None) -> ScoringWeights:
    """Load scoring weights from file or return defaults.

    Supports JSON and YAML formats.

    Args:
        filepath: Optional path to weights configuration file

    Returns:
        ScoringWeights instance

    Raises:
        FileNotFoundError: If filepath provided but doesn't exist
        ValueError: If weights are invalid or the format is unsupported
    """
    if not filepath:
        return DEFAULT_WEIGHTS

    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Weights file not found: {filepath}")

    if path.suffix == ".json":
        with open(path, "r") as f:
            data = json.load(f)
    elif path.suffix in (".yaml", ".yml"):
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}. Use .json, .yaml, or .yml")

    return ScoringWeights(**data)
