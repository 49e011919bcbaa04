"""
Engine Configuration Module for masstimber.

This module holds the tunable design policy of the sizing engine
(default grade, fire model, load factor, self-weight convergence) and
loads it from environment variables.

Usage:
    config = EngineConfig.from_env()
    context = initialize(config=config)
"""

from dataclasses import dataclass
from typing import Optional
import os
import logging

from .constants import (
    CONVERGENCE_TOLERANCE,
    DEFAULT_CHARRING_RATE,
    DEFAULT_GRADE,
    DESIGN_LOAD_FACTOR,
    MAX_SELF_WEIGHT_ITERATIONS,
    SELF_WEIGHT_ITERATE,
    SELF_WEIGHT_SINGLE,
    ZERO_STRENGTH_LAYER,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Sizing engine configuration.

    Attributes:
        default_grade: Grade used when a request names none or an unknown one
        charring_rate: Notional charring rate in mm/min
        zero_strength_layer: Layer added to the char depth for rated members (mm)
        design_load_factor: Factor applied to aggregated loads before sizing
        self_weight_policy: "single" (one re-run) or "iterate" (to tolerance)
        max_iterations: Iteration cap for the "iterate" policy
        convergence_tolerance_mm: Depth change treated as converged (mm)
    """

    default_grade: str = DEFAULT_GRADE
    charring_rate: float = DEFAULT_CHARRING_RATE
    zero_strength_layer: float = ZERO_STRENGTH_LAYER
    design_load_factor: float = DESIGN_LOAD_FACTOR
    self_weight_policy: str = SELF_WEIGHT_SINGLE
    max_iterations: int = MAX_SELF_WEIGHT_ITERATIONS
    convergence_tolerance_mm: float = CONVERGENCE_TOLERANCE

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.default_grade:
            raise ValueError("Default grade is required")

        if self.charring_rate < 0:
            raise ValueError("Charring rate cannot be negative")

        if self.zero_strength_layer < 0:
            raise ValueError("Zero-strength layer cannot be negative")

        if self.design_load_factor <= 0:
            raise ValueError("Design load factor must be positive")

        if self.self_weight_policy not in (SELF_WEIGHT_SINGLE, SELF_WEIGHT_ITERATE):
            raise ValueError(
                f"Invalid self-weight policy: {self.self_weight_policy}. "
                f"Must be one of: {SELF_WEIGHT_SINGLE}, {SELF_WEIGHT_ITERATE}"
            )

        if self.max_iterations < 1:
            raise ValueError("Max iterations must be at least 1")

        if self.convergence_tolerance_mm <= 0:
            raise ValueError("Convergence tolerance must be positive")

    @property
    def iterate_self_weight(self) -> bool:
        return self.self_weight_policy == SELF_WEIGHT_ITERATE

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineConfig":
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            EngineConfig instance with loaded configuration

        Raises:
            ValueError: If a variable holds an invalid value
            FileNotFoundError: If env_file is specified but doesn't exist

        Environment Variables:
            MASSTIMBER_DEFAULT_GRADE: Fallback timber grade
            MASSTIMBER_CHARRING_RATE: Charring rate in mm/min
            MASSTIMBER_ZERO_STRENGTH_LAYER: Zero-strength layer in mm
            MASSTIMBER_LOAD_FACTOR: Design load factor
            MASSTIMBER_SELF_WEIGHT_POLICY: single or iterate
            MASSTIMBER_MAX_ITERATIONS: Iteration cap for the iterate policy
            MASSTIMBER_CONVERGENCE_TOLERANCE: Convergence tolerance in mm
        """
        if env_file:
            cls._load_env_file(env_file)

        default_grade = os.getenv("MASSTIMBER_DEFAULT_GRADE", DEFAULT_GRADE).strip().upper()
        policy = os.getenv("MASSTIMBER_SELF_WEIGHT_POLICY", SELF_WEIGHT_SINGLE).strip().lower()

        try:
            charring_rate = float(os.getenv("MASSTIMBER_CHARRING_RATE", str(DEFAULT_CHARRING_RATE)))
            zero_strength_layer = float(
                os.getenv("MASSTIMBER_ZERO_STRENGTH_LAYER", str(ZERO_STRENGTH_LAYER))
            )
            design_load_factor = float(os.getenv("MASSTIMBER_LOAD_FACTOR", str(DESIGN_LOAD_FACTOR)))
            max_iterations = int(
                os.getenv("MASSTIMBER_MAX_ITERATIONS", str(MAX_SELF_WEIGHT_ITERATIONS))
            )
            tolerance = float(
                os.getenv("MASSTIMBER_CONVERGENCE_TOLERANCE", str(CONVERGENCE_TOLERANCE))
            )
        except ValueError as exc:
            raise ValueError(f"Invalid numeric MASSTIMBER_* setting: {exc}") from exc

        config = cls(
            default_grade=default_grade,
            charring_rate=charring_rate,
            zero_strength_layer=zero_strength_layer,
            design_load_factor=design_load_factor,
            self_weight_policy=policy,
            max_iterations=max_iterations,
            convergence_tolerance_mm=tolerance,
        )
        logger.info(
            f"Loaded engine config (grade: {config.default_grade}, "
            f"self-weight policy: {config.self_weight_policy})"
        )
        return config

    @staticmethod
    def _load_env_file(env_file: str) -> None:
        """Load environment variables from .env file.

        Args:
            env_file: Path to .env file

        Raises:
            FileNotFoundError: If env_file doesn't exist
        """
        try:
            from dotenv import load_dotenv
        except ImportError:
            raise ImportError(
                "python-dotenv is required for .env file support. "
                "Install with: pip install python-dotenv"
            )
        if not load_dotenv(env_file):
            raise FileNotFoundError(f".env file not found: {env_file}")
