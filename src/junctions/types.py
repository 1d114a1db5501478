from __future__ import annotations

from typing import TypeAlias

import numpy as np
from jaxtyping import Float

Pt2D: TypeAlias = Float[np.ndarray, "2"]
Pts2D: TypeAlias = Float[np.ndarray, "N 2"]
Ring2D: TypeAlias = Float[np.ndarray, "R 2"]

RoadID: TypeAlias = int
IntersectionID: TypeAlias = int
