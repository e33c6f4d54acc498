import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from hotel_analysis.parser import DEFAULT_ENCODING

DEFAULT_CONFIG_PATH = Path("config/analysis.yaml")
DEFAULT_DATASET_PATH = Path("data/sample_bookings.csv")

ENV_DATASET = "HOTEL_ANALYSIS_DATASET"
ENV_LOG_LEVEL = "HOTEL_ANALYSIS_LOG_LEVEL"


@dataclass
class AnalysisConfig:
    dataset_path: Path = DEFAULT_DATASET_PATH
    encoding: str = DEFAULT_ENCODING
    top_n: int = 10
    bottom_n: int = 5
    log_level: str = "INFO"


def load_analysis_config(path: Optional[Path] = None) -> AnalysisConfig:
    """Build the run configuration from YAML and the environment.

    Missing keys (or a missing file) fall back to the defaults above.
    Environment variables, typically loaded from .env by the caller,
    take precedence over the file.

    Example analysis.yaml:
        dataset_path: data/sample_bookings.csv
        encoding: ISO-8859-1
        top_n: 10
        bottom_n: 5
    """
    raw = {}
    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    cfg = AnalysisConfig(
        dataset_path=Path(raw.get("dataset_path", DEFAULT_DATASET_PATH)),
        encoding=str(raw.get("encoding", DEFAULT_ENCODING)),
        top_n=int(raw.get("top_n", 10)),
        bottom_n=int(raw.get("bottom_n", 5)),
        log_level=str(raw.get("log_level", "INFO")).upper(),
    )

    dataset_env = os.environ.get(ENV_DATASET)
    if dataset_env:
        cfg.dataset_path = Path(dataset_env)
    log_level_env = os.environ.get(ENV_LOG_LEVEL)
    if log_level_env:
        cfg.log_level = log_level_env.upper()

    return cfg
