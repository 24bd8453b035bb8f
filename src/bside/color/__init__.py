"""Perceptual color distance."""

from bside.color.distance import colors_similar, delta_e, rgb_to_lab

__all__ = ["colors_similar", "delta_e", "rgb_to_lab"]
