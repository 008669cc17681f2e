"""
Filter configuration.

Loads and validates the JSON configuration describing the flanks, the
content length, the expected anchor window and the optional quality
thresholds.

Example configuration::

    {
        "left_flank": "AGAGAGGC",
        "right_flank": "GCCCAGGC",
        "content_length": 21,
        "expect_begin": 36,
        "tolerance": 8,
        "qual_peak": 20,
        "qual_mean": 30
    }
"""

import json
import logging
from dataclasses import asdict, dataclass
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .constants import MAX_PATTERN_LENGTH

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the filter configuration is missing or invalid."""
    pass


# JSON key -> FilterConfig field
_JSON_KEYS = {
    "left_flank": "left_flank",
    "right_flank": "right_flank",
    "content_length": "content_length",
    "expect_begin": "expected_start",
    "expected_start": "expected_start",
    "tolerance": "tolerance",
    "qual_peak": "min_peak_qual",
    "qual_mean": "min_mean_qual",
    "min_peak_qual": "min_peak_qual",
    "min_mean_qual": "min_mean_qual",
}

_REQUIRED_FIELDS = ("left_flank", "right_flank", "content_length", "expected_start", "tolerance")


@dataclass(frozen=True)
class FilterConfig:
    """
    Parameters of an anchored extraction run.

    Parameters
    ----------
    left_flank : str
        Constant sequence immediately 5' of the content.
    right_flank : str
        Constant sequence immediately 3' of the content.
    content_length : int
        Number of bases between the flanks.
    expected_start : int
        Expected offset of the left flank in the read.
    tolerance : int
        Allowed deviation from ``expected_start`` (both directions).
    min_peak_qual : int, optional
        Reject reads whose lowest content PHRED score is below this.
    min_mean_qual : int, optional
        Reject reads whose (integer) mean content PHRED score is below this.
    """

    left_flank: str
    right_flank: str
    content_length: int
    expected_start: int
    tolerance: int
    min_peak_qual: Optional[int] = None
    min_mean_qual: Optional[int] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError if any field is unusable."""
        for name in ("left_flank", "right_flank"):
            flank = getattr(self, name)
            if not isinstance(flank, str) or not flank:
                raise ConfigError(f"'{name}' must be a non-empty string")
            if len(flank) > MAX_PATTERN_LENGTH:
                raise ConfigError(
                    f"'{name}' has {len(flank)} bases, at most {MAX_PATTERN_LENGTH} are supported"
                )
            if not flank.isascii():
                raise ConfigError(f"'{name}' contains non-ASCII characters")

        for name in ("content_length", "expected_start", "tolerance"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"'{name}' must be a non-negative integer, got {value!r}")
        if self.content_length == 0:
            raise ConfigError("'content_length' must be greater than 0")

        for name in ("min_peak_qual", "min_mean_qual"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ConfigError(f"'{name}' must be an integer in 0..255, got {value!r}")

    @property
    def expected_window(self) -> Tuple[int, int]:
        """Closed range of accepted left flank offsets."""
        begin = max(0, self.expected_start - self.tolerance)
        end = self.expected_start + self.tolerance
        return begin, end

    def filter_regex(self) -> str:
        """Regular expression equivalent to the anchored filter (forward strand)."""
        begin, end = self.expected_window
        return (
            f"^.{{{begin},{end}}}{self.left_flank}"
            f"([ACGT]{{{self.content_length}}}){self.right_flank}.*$"
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterConfig":
        """
        Build a config from a JSON-style mapping.

        Accepts both the ``expect_begin``/``qual_peak``/``qual_mean`` keys
        and the field names themselves.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a JSON object, got {type(data).__name__}")

        kwargs = {}
        for key, value in data.items():
            field = _JSON_KEYS.get(key)
            if field is None:
                logger.warning(f"Ignoring unknown configuration key '{key}'")
                continue
            kwargs[field] = value

        missing = [f for f in _REQUIRED_FIELDS if f not in kwargs]
        if missing:
            raise ConfigError(f"Configuration missing keys: {missing}")

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_json_config(json_path: Union[PathLike, str]) -> FilterConfig:
    """
    Load a FilterConfig from a JSON file.

    Parameters
    ----------
    json_path : PathLike or str
        Path to the JSON configuration.

    Returns
    -------
    FilterConfig
        Validated configuration.

    Raises
    ------
    ConfigError
        If the file is missing, is not valid JSON, or fails validation.
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise ConfigError(f"Config file does not exist: {json_path}")

    try:
        with open(json_path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"While parsing configuration {json_path}: {e}") from e

    config = FilterConfig.from_dict(data)
    logger.info(f"Loaded configuration from {json_path}")
    return config
