"""Particle relaxation of a closed polyline.

Each vertex is a unit particle.  Its two topological neighbours pull it with
a stiff, rest-length-free spring (force grows as ``r**(1 + beta)``) and every
other vertex pushes it away with an inverse-power force ``r**-(2 + alpha)``,
so only nearby non-neighbours matter.  Velocities are damped and capped each
step, which keeps the curve from jumping through itself in a single update.

Vertices are updated one after another within a step, so later vertices
already see the moved positions of earlier ones.  The all-pairs force
evaluation is O(V²) per step.
"""

from __future__ import annotations

import numpy as np
from tqdm import tqdm

from grid_knots.config import RelaxationConfig
from grid_knots.curve.polyline import Polyline


class Knot:
    """Relaxation state for a closed polyline.

    ``positions``, ``velocities``, ``accelerations`` and ``anchors`` are
    ``(V, 3)`` arrays with the same ``V`` as the polyline, fixed for the
    lifetime of the object.
    """

    def __init__(self, path: Polyline, config: RelaxationConfig | None = None):
        self.config = config if config is not None else RelaxationConfig()
        self._path = Polyline(path.get_vertices())

        self._positions = self._path.get_vertices()
        self._anchors = self._positions.copy()
        self._velocities = np.zeros_like(self._positions)
        self._accelerations = np.zeros_like(self._positions)

        n = len(self._positions)
        self._left = np.array(
            [self._path.get_neighboring_indices_wrapped(i)[0] for i in range(n)],
            dtype=np.int64,
        )
        self._right = np.array(
            [self._path.get_neighboring_indices_wrapped(i)[1] for i in range(n)],
            dtype=np.int64,
        )
        self.steps_taken = 0

    # ------------------------------------------------------------------
    # State access (copies)
    # ------------------------------------------------------------------

    @property
    def positions(self) -> np.ndarray:
        return self._positions.copy()

    @property
    def velocities(self) -> np.ndarray:
        return self._velocities.copy()

    @property
    def accelerations(self) -> np.ndarray:
        return self._accelerations.copy()

    @property
    def anchors(self) -> np.ndarray:
        return self._anchors.copy()

    def get_path(self) -> Polyline:
        return self._path

    def get_vertices(self) -> np.ndarray:
        return self._path.get_vertices()

    def __len__(self) -> int:
        return len(self._positions)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _force_on(self, i: int) -> np.ndarray:
        cfg = self.config
        p = self._positions

        delta = p - p[i]                       # vectors i → k
        r = np.linalg.norm(delta, axis=1)

        neighbour = np.zeros(len(p), dtype=bool)
        neighbour[self._left[i]] = True
        neighbour[self._right[i]] = True

        usable = r >= cfg.epsilon
        usable[i] = False
        attract = usable & neighbour
        repel = usable & ~neighbour

        force = np.zeros(3)
        if attract.any():
            ra = r[attract]
            unit = delta[attract] / ra[:, None]
            magnitude = cfg.attraction * ra ** (1.0 + cfg.attraction_exponent)
            force += (magnitude[:, None] * unit).sum(axis=0)
        if repel.any():
            rr = r[repel]
            unit = -delta[repel] / rr[:, None]
            magnitude = cfg.repulsion * rr ** -(2.0 + cfg.repulsion_exponent)
            force += (magnitude[:, None] * unit).sum(axis=0)
        return force

    def _step(self) -> float:
        cfg = self.config
        largest = 0.0
        for i in range(len(self._positions)):
            self._accelerations[i] += self._force_on(i) / cfg.mass

            v = (self._velocities[i] + self._accelerations[i]) * cfg.damping
            self._accelerations[i] = 0.0

            speed = float(np.linalg.norm(v))
            if speed > cfg.max_displacement:
                v = v * (cfg.max_displacement / speed)
                speed = cfg.max_displacement

            self._velocities[i] = v
            self._positions[i] += v
            largest = max(largest, speed)

        self._path.set_vertices(self._positions)
        self.steps_taken += 1
        return largest

    def relax(self, steps: int = 1, verbose: bool = False) -> float:
        """Advance the simulation by ``steps`` steps.

        Returns the largest single-vertex displacement of the last step
        (0.0 when ``steps`` is 0).
        """
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")
        largest = 0.0
        for _ in tqdm(range(steps), desc="Relaxing", disable=not verbose,
                      unit="step", leave=False):
            largest = self._step()
        return largest

    def reset(self) -> None:
        """Restore the anchor positions and zero all motion."""
        self._positions = self._anchors.copy()
        self._velocities[:] = 0.0
        self._accelerations[:] = 0.0
        self._path.set_vertices(self._anchors)
        self.steps_taken = 0

    def is_finite(self) -> bool:
        return bool(np.isfinite(self._positions).all())
