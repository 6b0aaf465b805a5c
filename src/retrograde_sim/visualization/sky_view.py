"""
Sky-strip and zodiac-ring layout helpers.

Pure geometry, shared by the plotly views. Angles are ecliptic longitudes in
degrees measured from the fixed +x axis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

ZODIAC_ABBREVIATIONS = (
    "Ari", "Tau", "Gem", "Cnc", "Leo", "Vir",
    "Lib", "Sco", "Sgr", "Cap", "Aqr", "Psc",
)

# Labels sit mid-sign: 15, 45, ..., 345 deg
ZODIAC_LABEL_OFFSET_DEG = 15.0
ZODIAC_SIGN_WIDTH_DEG = 30.0


@dataclass(frozen=True)
class ZodiacLabel:
    label: str
    angle_deg: float
    x: float
    y: float


def project_to_sky_view(lambda_deg: float, width: float) -> float:
    """
    Linear map of a longitude onto a strip of the given width:
    0 deg -> 0, 360 deg -> width. Wrap the longitude first if it can leave
    [0, 360].
    """
    return lambda_deg / 360.0 * width


def zodiac_label_positions(
    radius: float,
    center_x: float,
    center_y: float,
    y_axis_down: bool = True,
) -> List[ZodiacLabel]:
    """
    The 12 zodiac abbreviations on a circle of the given radius.

    With y_axis_down (pixel/SVG convention) a positive sine moves the label
    up the screen, i.e. to a smaller y.
    """
    y_sign = -1.0 if y_axis_down else 1.0
    labels = []
    for k, name in enumerate(ZODIAC_ABBREVIATIONS):
        angle_deg = ZODIAC_LABEL_OFFSET_DEG + ZODIAC_SIGN_WIDTH_DEG * k
        angle = math.radians(angle_deg)
        labels.append(ZodiacLabel(
            label=name,
            angle_deg=angle_deg,
            x=center_x + radius * math.cos(angle),
            y=center_y + y_sign * radius * math.sin(angle),
        ))
    return labels
