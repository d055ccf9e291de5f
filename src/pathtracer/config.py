# config.py
"""
Render settings and quality presets.
"""
from dataclasses import dataclass, replace
from typing import Optional

# Quality presets: samples per pixel and maximum bounce depth
QUALITY_PRESETS = {
    "preview": {"samples": 8, "bounces": 8},
    "balanced": {"samples": 100, "bounces": 50},
    "final": {"samples": 500, "bounces": 50},
}

DEFAULT_QUALITY = "balanced"


@dataclass
class RenderSettings:
    width: int = 600
    aspect_ratio: float = 3.0 / 2.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    threads: int = 8
    seed: Optional[int] = None
    scene: int = 1

    @property
    def height(self) -> int:
        return int(self.width / self.aspect_ratio)

    @classmethod
    def from_preset(cls, quality: str = DEFAULT_QUALITY, **overrides) -> "RenderSettings":
        """Settings for a named quality preset; keyword arguments that are not None win."""
        if quality not in QUALITY_PRESETS:
            raise ValueError(f"Unknown quality preset {quality!r}, "
                             f"expected one of {', '.join(QUALITY_PRESETS)}")
        preset = QUALITY_PRESETS[quality]
        settings = cls(samples_per_pixel=preset["samples"], max_depth=preset["bounces"])
        return replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> "RenderSettings":
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")
        if self.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.height <= 0:
            raise ValueError(f"width {self.width} at aspect ratio {self.aspect_ratio} gives an empty image")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.threads <= 0:
            raise ValueError(f"threads must be positive, got {self.threads}")
        return self
