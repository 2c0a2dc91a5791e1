# particle.py
"""
Defines the materials a grid cell can hold.

This module defines the closed set of particle kinds, the solidity
capability the movement rules depend on, and the Particle itself: a kind,
a per-frame "already moved" flag and a cosmetic color.
"""
import enum
from typing import Optional, Tuple

import numpy as np
import pygame

from constants import (
    SAND_COLOR, WATER_COLOR, WOOD_COLOR,
    SATURATION_VARIATION, BRIGHTNESS_VARIATION
)

# --- Data Contracts ---
#
# class Particle:
#   - __init__(self, kind: ParticleKind, color: Optional[Tuple[int, int, int]] = None):
#     - Inputs:
#       - kind: the material, immutable for the particle's lifetime.
#       - color: RGB triple; defaults to the kind's base color.
#     - Invariants:
#       - self.ticked is False on creation and only meaningful inside
#         the frame that set it.
#       - Color never influences the simulation.

Color = Tuple[int, int, int]


class ParticleKind(enum.Enum):
    SAND = "sand"
    WATER = "water"
    WOOD = "wood"

    @property
    def is_solid(self) -> bool:
        """Solid kinds block the passage of falling sand."""
        return self is not ParticleKind.WATER

    @property
    def base_color(self) -> Color:
        return _BASE_COLORS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_BASE_COLORS = {
    ParticleKind.SAND: SAND_COLOR,
    ParticleKind.WATER: WATER_COLOR,
    ParticleKind.WOOD: WOOD_COLOR,
}


def vary_color(color: Color, rng: np.random.Generator) -> Color:
    """
    Jitters the saturation and lightness of an RGB color.

    Args:
        color (Color): The base RGB color.
        rng (np.random.Generator): Source of the jitter.

    Returns:
        Color: A nearby RGB color.
    """
    c = pygame.Color(*color)
    h, s, l, a = c.hsla
    s = float(np.clip(s + rng.uniform(-SATURATION_VARIATION, SATURATION_VARIATION), 0.0, 100.0))
    l = float(np.clip(l + rng.uniform(-BRIGHTNESS_VARIATION, BRIGHTNESS_VARIATION), 0.0, 100.0))
    c.hsla = (min(h, 359.0), s, l, a)
    return (c.r, c.g, c.b)


class Particle:
    """A single grain, droplet or block occupying one cell."""
    __slots__ = ("kind", "ticked", "color")

    def __init__(self, kind: ParticleKind, color: Optional[Color] = None):
        self.kind = kind
        self.ticked = False
        self.color = color if color is not None else kind.base_color

    @classmethod
    def create(cls, kind: ParticleKind, rng: np.random.Generator) -> "Particle":
        """Creates a particle with a color varied around its kind's base color."""
        return cls(kind, vary_color(kind.base_color, rng))

    @property
    def is_solid(self) -> bool:
        return self.kind.is_solid

    def __repr__(self) -> str:
        return f"Particle({self.kind.name}, ticked={self.ticked})"
