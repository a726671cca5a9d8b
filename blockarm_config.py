"""
blockarm_config.py

Planner configuration loaded from YAML.

The file is optional: missing files and missing keys fall back to the
defaults in common/constants.py. The path defaults to config/planner.yaml
next to this module and can be overridden with BLOCKARM_CONFIG.

Usage:
    from blockarm_config import load_config

    config = load_config()
    planner = ArmPlanner(config)
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from blockarm_exceptions import InvalidConfigError, wrap_exception
from common.constants import (
    DEFAULT_HEURISTIC,
    DEFAULT_MAX_EXPANSIONS,
    DEFAULT_PARALLEL_WORKERS,
    DEFAULT_TIMEOUT_SECONDS,
    HEIGHT_PENALTY,
    HEURISTIC_NAMES,
    ORACLE_CACHE_MAXSIZE,
)
from component_15_logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent / "config" / "planner.yaml"
CONFIG_ENV_VAR = "BLOCKARM_CONFIG"


@dataclass
class PlannerConfig:
    """
    Settings of one ArmPlanner.

    Attributes:
        timeout_seconds: Wall-clock deadline per planning call
        max_expansions: Optional expansion budget per planning call
        heuristic: Heuristic name ("stack_penalty" or "zero")
        height_penalty: Penalty per object stacked above a goal object
        parallel_workers: Worker threads for planning interpretations
        strict_state_checks: Validate every generated successor
        oracle_cache_size: Memoised placement answers per oracle
    """

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_expansions: Optional[int] = DEFAULT_MAX_EXPANSIONS
    heuristic: str = DEFAULT_HEURISTIC
    height_penalty: float = HEIGHT_PENALTY
    parallel_workers: int = DEFAULT_PARALLEL_WORKERS
    strict_state_checks: bool = False
    oracle_cache_size: int = ORACLE_CACHE_MAXSIZE

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Raises:
            InvalidConfigError: If a value is out of range
        """
        if self.timeout_seconds < 0:
            raise InvalidConfigError(
                "timeout_seconds must be >= 0",
                context={"timeout_seconds": self.timeout_seconds},
            )
        if self.heuristic not in HEURISTIC_NAMES:
            raise InvalidConfigError(
                f"Unknown heuristic '{self.heuristic}'",
                context={"available": sorted(HEURISTIC_NAMES)},
            )
        if self.max_expansions is not None and self.max_expansions < 0:
            raise InvalidConfigError(
                "max_expansions must be >= 0 or null",
                context={"max_expansions": self.max_expansions},
            )
        if self.height_penalty < 0:
            raise InvalidConfigError(
                "height_penalty must be >= 0",
                context={"height_penalty": self.height_penalty},
            )
        if self.parallel_workers < 1:
            raise InvalidConfigError(
                "parallel_workers must be >= 1",
                context={"parallel_workers": self.parallel_workers},
            )
        if self.oracle_cache_size < 1:
            raise InvalidConfigError(
                "oracle_cache_size must be >= 1",
                context={"oracle_cache_size": self.oracle_cache_size},
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlannerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Unknown planner settings ignored: {unknown}")
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Optional[Union[str, Path]] = None) -> PlannerConfig:
    """
    Load planner configuration from a YAML file.

    Args:
        path: Path to the YAML file (default: $BLOCKARM_CONFIG or
              config/planner.yaml)

    Returns:
        PlannerConfig; defaults when the file does not exist

    Raises:
        InvalidConfigError: If the file is not valid YAML or holds invalid values
    """
    config_file = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)

    if not config_file.exists():
        logger.warning(f"Config file not found: {config_file}, using defaults")
        return PlannerConfig()

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise wrap_exception(
            e, InvalidConfigError, "Config file is not valid YAML", path=str(config_file)
        ) from e

    section = (data.get("planner") or {}) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise InvalidConfigError(
            "'planner' section must be a mapping", context={"path": str(config_file)}
        )

    try:
        config = PlannerConfig.from_dict(section)
    except TypeError as e:
        raise wrap_exception(
            e, InvalidConfigError, "Invalid planner settings", path=str(config_file)
        ) from e

    logger.info(f"[OK] Configuration loaded from {config_file}", extra=config.to_dict())
    return config
