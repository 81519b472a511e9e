from typing import Tuple
import numpy as np

class DRNG:
    """Seeded random source shared by every random draw in a battle."""

    def __init__(self, seed: int):
        self.g = np.random.Generator(np.random.PCG64(seed))

    def uniform(self, a: float, b: float) -> float:
        """Return a random float in [a, b)."""
        return float(self.g.uniform(a, b))

    def point(self, x0: float, x1: float, y0: float, y1: float) -> Tuple[float, float]:
        """Return a random point in [x0, x1) x [y0, y1), x drawn first."""
        x = self.uniform(x0, x1)
        y = self.uniform(y0, y1)
        return (x, y)
