# container.py

import logging
import numba
import numpy as np
import constants
from config import ConfigurationError

logger = logging.getLogger("demon_sim")

@numba.jit(nopython=True)
def _wall_collision_jit(position, velocity, radius, x_min, y_min, y_max, x_max,
                        gate_active, hot_speed, cold_speed):
    """
    Resolves a single particle against the four walls and, when active, the
    demon gate at the vertical midline. Mutates position and velocity in place.
    """
    # Left wall
    if radius >= position[0] - x_min:
        position[0] = x_min + radius
        velocity[0] *= -1.0

    # Right wall
    if radius >= x_max - position[0]:
        position[0] = x_max - radius
        velocity[0] *= -1.0

    # Ceiling
    if radius >= position[1] - y_min:
        position[1] = y_min + radius
        velocity[1] *= -1.0

    # Ground
    if radius >= y_max - position[1]:
        position[1] = y_max - radius
        velocity[1] *= -1.0

    # Demon gate
    if gate_active:
        middle = (x_min + x_max) / 2.0
        if radius >= abs(middle - position[0]):
            speed = np.sqrt(velocity[0] ** 2 + velocity[1] ** 2)
            # Slow leftward movers bounce back to the right.
            if velocity[0] <= 0.0 and speed < hot_speed:
                position[0] += radius
                velocity[0] *= -1.0
            # Fast rightward movers bounce back to the left.
            elif velocity[0] >= 0.0 and speed > cold_speed:
                position[0] -= radius
                velocity[0] *= -1.0

@numba.jit(nopython=True)
def _collide_all_jit(positions, velocities, radii, x_min, y_min, y_max, x_max,
                     gate_active, hot_speed, cold_speed):
    for i in range(positions.shape[0]):
        _wall_collision_jit(positions[i], velocities[i], radii[i], x_min, y_min, y_max, x_max,
                            gate_active, hot_speed, cold_speed)


class BoundaryContainer:
    """
    An axis-aligned box with an optional selective wall ("demon gate") at
    its vertical midline.

    Data Contract:
    - Inputs:
        - x_min, y_min, y_max, x_max (float): Wall coordinates. y_min is the
          ceiling and y_max the ground, in screen coordinates.
        - gate_active (bool): Whether the demon gate is initially closed.
        - hot_speed (float): Leftward movers at or above this speed pass the gate.
        - cold_speed (float): Rightward movers at or below this speed pass the gate.
    - Invariants: x_min < x_max and y_min < y_max.
    """
    def __init__(self, x_min: float, y_min: float, y_max: float, x_max: float, gate_active: bool = False,
                 hot_speed: float = constants.HOT_SPEED, cold_speed: float = constants.COLD_SPEED):
        if not x_min < x_max or not y_min < y_max:
            raise ConfigurationError(
                f"Degenerate container: x=[{x_min}, {x_max}], y=[{y_min}, {y_max}]."
            )
        self.x_min = float(x_min)
        self.y_min = float(y_min)
        self.y_max = float(y_max)
        self.x_max = float(x_max)
        self.gate_active = bool(gate_active)
        self.hot_speed = float(hot_speed)
        self.cold_speed = float(cold_speed)

        logger.info(f"Container created: {self}")

    @classmethod
    def from_size(cls, width: float, height: float, **kwargs):
        """A container with its top-left corner at the origin."""
        return cls(0.0, 0.0, height, width, **kwargs)

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def midline(self) -> float:
        return (self.x_min + self.x_max) / 2.0

    def toggle_gate(self) -> bool:
        self.gate_active = not self.gate_active
        logger.info(f"Demon gate {'closed' if self.gate_active else 'opened'}.")
        return self.gate_active

    def set_gate(self, active: bool):
        if self.gate_active != bool(active):
            self.toggle_gate()

    def contains(self, particle) -> bool:
        """True when the whole particle lies inside the walls."""
        x, y = particle.position
        r = particle.radius
        return (self.x_min + r <= x <= self.x_max - r) and (self.y_min + r <= y <= self.y_max - r)

    def collision(self, particle):
        """
        Reflects a particle off any wall (or the gate) it touches, clamping it
        flush against the wall and negating the perpendicular velocity.
        """
        _wall_collision_jit(
            particle.position, particle.velocity, particle.radius,
            self.x_min, self.y_min, self.y_max, self.x_max,
            self.gate_active, self.hot_speed, self.cold_speed
        )

    def collide_all(self, system):
        """Applies collision() to every particle of a ParticleSystem."""
        _collide_all_jit(
            system.positions, system.velocities, system.radii,
            self.x_min, self.y_min, self.y_max, self.x_max,
            self.gate_active, self.hot_speed, self.cold_speed
        )

    def __repr__(self):
        return (f"BoundaryContainer(x=[{self.x_min}, {self.x_max}], y=[{self.y_min}, {self.y_max}], "
                f"gate_active={self.gate_active})")
