# particle.py

import logging
import numba
import numpy as np
import constants
from config import ConfigurationError

logger = logging.getLogger("demon_sim")

@numba.jit(nopython=True)
def _integrate_jit(position, velocity, force, dt, gravity):
    """
    Semi-implicit (symplectic) Euler step for a single unit-mass particle.
    v_new = v_old + (g + F) * dt
    p_new = p_old + v_new * dt
    """
    velocity[1] += gravity * dt
    velocity[1] += force[1] * dt
    velocity[0] += force[0] * dt
    position[0] += velocity[0] * dt
    position[1] += velocity[1] * dt

def random_velocity(rng: np.random.Generator, min_speed: float, max_speed: float) -> np.ndarray:
    """
    Draws a velocity with a uniform speed in [min_speed, max_speed) and a
    uniform direction in [0, 2*pi).
    """
    if min_speed < 0 or min_speed > max_speed:
        raise ConfigurationError(f"Invalid speed range [{min_speed}, {max_speed}).")
    speed = rng.uniform(min_speed, max_speed)
    angle = rng.uniform(0.0, 2.0 * np.pi)
    return np.array([np.cos(angle) * speed, np.sin(angle) * speed])

class Particle:
    """
    Represents a single unit-mass particle in the simulation.

    Data Contract:
    - Inputs:
        - position (array-like): (x, y) of the particle's center.
        - velocity (array-like): (vx, vy).
        - radius (float): Fixed, strictly positive.
    - Outputs: None. The particle is mutated in place by the interaction
      laws, the integrator and the container.
    - Invariants: radius > 0. The force accumulator is zeroed by the owning
      system at the start of every interaction pass.
    """
    def __init__(self, position, velocity, radius: float):
        if not radius > 0:
            raise ConfigurationError(f"Particle radius must be positive, got {radius}.")

        self.position = np.array(position, dtype=float)
        self.velocity = np.array(velocity, dtype=float)
        self.force = np.zeros(2, dtype=float)
        self.radius = float(radius)
        self.bound = False

        if self.position.shape != (2,) or self.velocity.shape != (2,):
            raise ConfigurationError("Particle position and velocity must be 2D vectors.")

        logger.debug(f"Particle created: radius={self.radius}, pos={self.position}, vel={self.velocity}")

    @classmethod
    def random(cls, container, rng: np.random.Generator, radius: float = constants.PARTICLE_RADIUS,
               min_speed: float = constants.MIN_SPEED, max_speed: float = constants.MAX_SPEED):
        """
        Creates a particle placed uniformly inside the container, inset by
        its radius, with a random speed and direction.
        """
        if not radius > 0:
            raise ConfigurationError(f"Particle radius must be positive, got {radius}.")
        if container.width < 2 * radius or container.height < 2 * radius:
            raise ConfigurationError(
                f"Container {container.width}x{container.height} cannot hold a particle of radius {radius}."
            )

        x = rng.uniform(container.x_min + radius, container.x_max - radius)
        y = rng.uniform(container.y_min + radius, container.y_max - radius)
        velocity = random_velocity(rng, min_speed, max_speed)
        return cls((x, y), velocity, radius)

    def bind(self, position: np.ndarray, velocity: np.ndarray, force: np.ndarray):
        """
        Moves this particle's state into externally owned storage (rows of a
        ParticleSystem's arrays). After binding, the particle and the arrays
        share memory. A particle can be bound only once; use copy() to place
        the same state in another system.
        """
        if self.bound:
            raise ConfigurationError(f"{self} already belongs to a ParticleSystem.")
        position[:] = self.position
        velocity[:] = self.velocity
        force[:] = self.force
        self.position = position
        self.velocity = velocity
        self.force = force
        self.bound = True

    def copy(self):
        """An unbound particle with the same position, velocity and radius."""
        return Particle(self.position, self.velocity, self.radius)

    def reset_force(self):
        self.force.fill(0.0)

    def update(self, dt: float, gravity: float = constants.GRAVITY):
        """
        Advances the particle by one time step. Gravity and the accumulated
        force both act on the velocity before the position is moved.
        """
        _integrate_jit(self.position, self.velocity, self.force, dt, gravity)

    @property
    def speed(self) -> float:
        return float(np.sqrt(self.velocity[0] ** 2 + self.velocity[1] ** 2))

    @property
    def kinetic_energy(self) -> float:
        """KE = 0.5 * m * v^2 with m = 1."""
        return 0.5 * float(self.velocity[0] ** 2 + self.velocity[1] ** 2)

    def __repr__(self):
        return (f"Particle(position=({self.position[0]:.3f}, {self.position[1]:.3f}), "
                f"velocity=({self.velocity[0]:.3f}, {self.velocity[1]:.3f}), radius={self.radius})")
