"""
Pixelsort -- Sort Settings Models

Pydantic models describing one sorting run. The CLI builds a SortSettings
from its flags; library callers can build one directly.

lower/upper mean different things per interval mode:
    edge      -> Canny hysteresis thresholds (floats)
    random    -> min/max interval width in pixels (integers)
    threshold -> lightness band [lower, upper) (bytes)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


class SettingsError(ValueError):
    """Invalid sort settings."""
    pass


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class IntervalMode(str, Enum):
    """How rows are split into intervals."""
    FULL = "full"            # One interval per row
    EDGE = "edge"            # Canny edges stay sortable
    RANDOM = "random"        # Abutting intervals of random width
    SPLIT = "split"          # Equal parts
    THRESHOLD = "threshold"  # Lightness band stays sortable


class SortMode(str, Enum):
    """Sort key applied inside each interval."""
    LIGHTNESS = "lightness"
    INTENSITY = "intensity"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"


MODES_WITH_BOUNDS = (IntervalMode.EDGE, IntervalMode.RANDOM, IntervalMode.THRESHOLD)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class SortSettings(BaseModel):
    """Everything needed for one pixel sorting run."""
    interval: IntervalMode = Field(
        default=IntervalMode.FULL,
        description="Interval function used to separate the image into intervals.",
    )
    sorting: SortMode = Field(
        default=SortMode.LIGHTNESS,
        description="Function used to order pixels inside an interval.",
    )
    lower: float | None = Field(
        default=None,
        allow_inf_nan=False,
        description="Lower bound used by edge, random and threshold.",
    )
    upper: float | None = Field(
        default=None,
        allow_inf_nan=False,
        description="Upper bound used by edge, random and threshold.",
    )
    rotation: int = Field(
        default=0,
        description="Clockwise rotation applied before sorting. Multiple of 90.",
    )
    num: int | None = Field(
        default=None,
        description="Number of parts for the split interval function.",
    )
    seed: int | None = Field(
        default=None,
        ge=0,
        le=2**32 - 1,
        description="Seed for the random interval function.",
    )
    keep_tail: bool = Field(
        default=False,
        description="Keep a trailing white mask run that has no closing black pixel.",
    )
    mask_path: Path | None = Field(
        default=None,
        description="Gray image; white pixels may be sorted, black pixels may not.",
    )
    output_path: Path | None = Field(
        default=None,
        description="Where to save the result. Derived from the input when omitted.",
    )

    @field_validator("rotation")
    @classmethod
    def normalize_rotation(cls, v: int) -> int:
        angle = v % 360
        if angle not in (0, 90, 180, 270):
            raise ValueError("rotation angle must be a multiple of 90")
        return angle

    @model_validator(mode="after")
    def validate_mode_params(self) -> "SortSettings":
        """Check that the chosen interval mode has the parameters it needs."""
        mode = self.interval
        if mode in MODES_WITH_BOUNDS:
            if self.lower is None or self.upper is None:
                raise ValueError(f"interval '{mode.value}' requires both lower and upper")
        if mode == IntervalMode.THRESHOLD:
            for name, value in (("lower", self.lower), ("upper", self.upper)):
                if value != int(value) or not 0 <= value <= 255:
                    raise ValueError(f"{name} was not a byte integer: {value}")
        if mode == IntervalMode.RANDOM:
            for name, value in (("lower", self.lower), ("upper", self.upper)):
                if value != int(value):
                    raise ValueError(f"{name} was not an integer: {value}")
            if self.upper <= max(self.lower, 1):
                raise ValueError(
                    f"random needs upper > max(lower, 1). Got lower={self.lower}, upper={self.upper}"
                )
        if mode == IntervalMode.EDGE:
            if self.lower < 0 or self.upper < 0:
                raise ValueError("edge thresholds must be non-negative")
        if mode == IntervalMode.SPLIT:
            if self.num is None:
                raise ValueError("interval 'split' requires num")
            if self.num < 1:
                raise ValueError(f"num must be at least 1. Got {self.num}")
        return self

    @classmethod
    def build(cls, **values) -> "SortSettings":
        """Validate ``values``, raising SettingsError with readable messages."""
        try:
            return cls(**values)
        except ValidationError as e:
            messages = []
            for err in e.errors():
                loc = ".".join(str(p) for p in err["loc"])
                msg = err["msg"].removeprefix("Value error, ")
                messages.append(f"{loc}: {msg}" if loc else msg)
            raise SettingsError("; ".join(messages)) from e


def default_output_path(input_path) -> Path:
    """photo.png -> photo.sorted.png (png when the input has no extension)."""
    input_path = Path(input_path)
    extension = input_path.suffix.lstrip(".") or "png"
    return input_path.with_name(f"{input_path.stem}.sorted.{extension}")
