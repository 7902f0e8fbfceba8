# particle_system.py

import numpy as np
import logging
import numba
import constants
from config import ConfigurationError
from container import BoundaryContainer
from laws import InteractionLaw, build_interaction_law
from particle import Particle, _integrate_jit

logger = logging.getLogger("demon_sim")

@numba.jit(nopython=True)
def _integrate_all_jit(positions, velocities, forces, dt, gravity):
    """Semi-implicit Euler step for every row of the particle arrays."""
    for i in range(positions.shape[0]):
        _integrate_jit(positions[i], velocities[i], forces[i], dt, gravity)


class ParticleSystem:
    """
    Owns the particle population and advances it in discrete time steps.

    Particle state is stored as a Structure of Arrays (positions, velocities,
    forces, radii). Every Particle handed to the system is bound to one row of
    these arrays, so the per-particle API and the compiled kernels mutate the
    same memory.

    Data Contract:
    - Inputs:
        - particles (list of Particle): The fixed population.
        - container (BoundaryContainer): Walls and demon gate.
        - law (InteractionLaw): The pairwise interaction used for the whole run.
        - gravity (float): Downward acceleration applied to every particle
          regardless of the interaction law.
        - substeps (int): Number of equal sub-steps update() splits a frame into.
        - max_frame_dt (float): Longest frame update() will simulate. Longer
          frames are clamped so one sub-step never jumps over the demon gate.
    - Outputs: None. This class modifies its internal state.
    - Invariants: The number of particles is constant throughout the simulation.
      All internal arrays must maintain the same length (num_particles).
    """
    def __init__(self, particles, container: BoundaryContainer, law: InteractionLaw,
                 gravity: float = constants.GRAVITY, substeps: int = constants.SUBSTEPS,
                 max_frame_dt: float = constants.MAX_FRAME_DT):
        if int(substeps) < 1:
            raise ConfigurationError(f"At least one sub-step per frame is required, got {substeps}.")
        if not max_frame_dt > 0:
            raise ConfigurationError(f"The maximum frame length must be positive, got {max_frame_dt}.")

        self.container = container
        self.law = law
        self.gravity = float(gravity)
        self.substeps = int(substeps)
        self.max_frame_dt = float(max_frame_dt)
        self.particles = list(particles)
        self.num_particles = len(self.particles)

        # --- Bookkeeping for diagnostics ---
        self.tick = 0
        self.time = 0.0
        self.last_interaction_count = 0

        # --- Structure of Arrays backing every particle ---
        self.positions = np.zeros((self.num_particles, 2), dtype=float)
        self.velocities = np.zeros((self.num_particles, 2), dtype=float)
        self.forces = np.zeros((self.num_particles, 2), dtype=float)
        self.radii = np.zeros(self.num_particles, dtype=float)

        seen = set()
        for i, particle in enumerate(self.particles):
            if particle.bound or id(particle) in seen:
                raise ConfigurationError(
                    f"Particle {i} already belongs to a ParticleSystem; pass particle.copy() instead."
                )
            seen.add(id(particle))
            if 2 * particle.radius > container.width or 2 * particle.radius > container.height:
                raise ConfigurationError(
                    f"Container {container.width}x{container.height} is smaller than the diameter "
                    f"of particle {i} (radius {particle.radius})."
                )

        for i, particle in enumerate(self.particles):
            self.radii[i] = particle.radius
            particle.bind(self.positions[i], self.velocities[i], self.forces[i])

        logger.info(f"ParticleSystem created for {self.num_particles} particles.")
        logger.info(f"Law: {law}. Gravity: {self.gravity}. Sub-steps per frame: {self.substeps}. "
                    f"Max frame: {self.max_frame_dt}s.")

    @classmethod
    def random(cls, num_particles: int, container: BoundaryContainer, law: InteractionLaw,
               rng: np.random.Generator, radius: float = constants.PARTICLE_RADIUS,
               min_speed: float = constants.MIN_SPEED, max_speed: float = constants.MAX_SPEED,
               gravity: float = constants.GRAVITY, substeps: int = constants.SUBSTEPS,
               max_frame_dt: float = constants.MAX_FRAME_DT):
        """
        Creates num_particles particles drawn from rng, uniformly placed inside
        the container (inset by their radius) with random speeds and directions.
        """
        if num_particles < 0:
            raise ConfigurationError(f"Particle count must be non-negative, got {num_particles}.")
        particles = [
            Particle.random(container, rng, radius=radius, min_speed=min_speed, max_speed=max_speed)
            for _ in range(num_particles)
        ]
        return cls(particles, container, law, gravity=gravity, substeps=substeps, max_frame_dt=max_frame_dt)

    @classmethod
    def from_config(cls, config: dict, rng: np.random.Generator):
        """
        Builds the container, the interaction law and the particles from the
        'simulation' section of config.json (as returned by config.load_config).
        """
        container = BoundaryContainer.from_size(
            config['width'],
            config['height'],
            gate_active=config['demon_active'],
            hot_speed=config['hot_speed'],
            cold_speed=config['cold_speed'],
        )
        law_name = config['interaction_law']
        law = build_interaction_law(law_name, config.get(str(law_name).lower()))
        return cls.random(
            config['particle_count'],
            container,
            law,
            rng,
            radius=config['particle_radius'],
            min_speed=config['min_speed'],
            max_speed=config['max_speed'],
            gravity=config['gravity'],
            substeps=config['substeps'],
            max_frame_dt=config['max_frame_dt'],
        )

    def __len__(self):
        return self.num_particles

    def __iter__(self):
        return iter(self.particles)

    def __getitem__(self, index):
        return self.particles[index]

    def reset_forces(self):
        self.forces.fill(0.0)

    def step(self, dt: float):
        """
        Runs one discrete time step:
        1. Reset every force accumulator.
        2. Resolve every unordered pair once through the active law.
        3. Integrate velocities (gravity + force) and then positions.
        4. Resolve wall and gate collisions on the integrated state.
        """
        self.reset_forces()
        self.last_interaction_count = self.law.resolve_all(self)
        _integrate_all_jit(self.positions, self.velocities, self.forces, dt, self.gravity)
        self.container.collide_all(self)
        self.time += dt

    def update(self, frame_dt: float):
        """
        Advances the simulation by one rendered frame. The frame is split
        into self.substeps equal steps to limit tunneling and energy drift
        between fast particles. Frames longer than self.max_frame_dt (window
        stalls, JIT compilation on the first frame) are clamped.
        """
        if frame_dt > self.max_frame_dt:
            logger.debug(f"Frame of {frame_dt:.3f}s clamped to {self.max_frame_dt:.3f}s at tick {self.tick}.")
            frame_dt = self.max_frame_dt
        sub_dt = frame_dt / self.substeps
        for _ in range(self.substeps):
            self.step(sub_dt)
        self.tick += 1

    # --- Diagnostics ---

    def kinetic_energies(self) -> np.ndarray:
        """Per-particle KE = 0.5 * v^2 (unit mass)."""
        return 0.5 * np.sum(self.velocities**2, axis=1)

    def get_total_kinetic_energy(self) -> float:
        return float(np.sum(self.kinetic_energies()))

    def average_kinetic_energy(self) -> float:
        """
        Mean kinetic energy per particle. An empty system has no meaningful
        mean; 0.0 is returned instead of dividing by zero.
        """
        if self.num_particles == 0:
            return 0.0
        return self.get_total_kinetic_energy() / self.num_particles

    def region_temperatures(self):
        """
        Average kinetic energy of the particles left of the container's
        midline and of those at or right of it, as (left, right). A region
        with no particles reports 0.0.
        """
        energies = self.kinetic_energies()
        left_mask = self.positions[:, 0] < self.container.midline

        left_count = int(np.count_nonzero(left_mask))
        right_count = self.num_particles - left_count

        left_temp = float(np.sum(energies[left_mask])) / left_count if left_count > 0 else 0.0
        right_temp = float(np.sum(energies[~left_mask])) / right_count if right_count > 0 else 0.0
        return left_temp, right_temp
