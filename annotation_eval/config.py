"""
Evaluation settings, loadable from a YAML file.

Example eval.yaml:
    iou_threshold: 0.5
    strategy: greedy      # or "optimal"
    validate: true
    output_dir: evaluation/results/run/
    run_name: Login screens
    plots: true
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, Optional

import yaml

from .evaluator import check_iou_threshold
from .matching import MatchStrategy


@dataclass
class EvalConfig:
    iou_threshold: float = 0.5
    strategy: MatchStrategy = MatchStrategy.GREEDY
    validate: bool = True
    output_dir: str = "evaluation/results/run/"
    run_name: Optional[str] = None
    plots: bool = True

    def __post_init__(self):
        self.iou_threshold = check_iou_threshold(self.iou_threshold)
        try:
            self.strategy = MatchStrategy(self.strategy)
        except ValueError:
            valid = ", ".join(s.value for s in MatchStrategy)
            raise ValueError(
                f"Unknown matching strategy {self.strategy!r} (expected one of: {valid})"
            ) from None

    @classmethod
    def from_dict(cls, data: Dict) -> "EvalConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['strategy'] = self.strategy.value
        return data

    def updated(self, **overrides) -> "EvalConfig":
        """Copy with every override that is not None applied."""
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return EvalConfig.from_dict(data)


def load_config(config_path: str) -> EvalConfig:
    """
    Load evaluation settings from a YAML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the file holds unknown keys or invalid values
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(data).__name__}")

    return EvalConfig.from_dict(data)


def save_config(config: EvalConfig, output_path: str):
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    print(f"✓ Saved config to: {output_path}")
