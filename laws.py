# laws.py

import logging
import numba
import numpy as np
import constants
from config import ConfigurationError

logger = logging.getLogger("demon_sim")

# --- JIT-Compiled Pair Kernels ---
# Each kernel resolves exactly one unordered pair and mutates both sides in
# place. They take plain NumPy rows so the same code serves a standalone
# Particle and a row of a ParticleSystem's arrays.

@numba.jit(nopython=True)
def _coulomb_pair_jit(pos_a, force_a, radius_a, pos_b, force_b, k, charge_product, softening, cutoff):
    """
    Accumulates an inverse-square force into both force buffers.
    The force on b is added and the same force is subtracted from a.
    """
    dx = pos_b[0] - pos_a[0]
    dy = pos_b[1] - pos_a[1]
    distance_sq = dx * dx + dy * dy
    distance_sq += softening * softening
    distance = np.sqrt(distance_sq)

    if distance > cutoff:
        return True
    # Only reachable with zero softening and coincident centers.
    if distance == 0.0:
        return True

    if distance_sq < radius_a * 0.1:
        distance_sq = radius_a * 0.1

    force_magnitude = k * charge_product / distance_sq
    fx = force_magnitude * dx / distance
    fy = force_magnitude * dy / distance

    force_a[0] -= fx
    force_a[1] -= fy
    force_b[0] += fx
    force_b[1] += fy
    return True

@numba.jit(nopython=True)
def _coulomb_all_pairs_jit(positions, forces, radii, k, charge_product, softening, cutoff):
    """Runs the Coulomb kernel over every pair (i, j), i < j, in index order."""
    n = positions.shape[0]
    resolved = 0
    for i in range(n):
        for j in range(i + 1, n):
            if _coulomb_pair_jit(positions[i], forces[i], radii[i], positions[j], forces[j],
                                 k, charge_product, softening, cutoff):
                resolved += 1
    return resolved

@numba.jit(nopython=True)
def _impulse_pair_jit(pos_a, vel_a, radius_a, pos_b, vel_b, radius_b,
                      restitution, correction_factor, penetration_slop, honor_parameters):
    """
    Instantaneous collision for two overlapping unit-mass circles.
    Returns False when the circles do not overlap.
    """
    dx = pos_b[0] - pos_a[0]
    dy = pos_b[1] - pos_a[1]
    distance_sq = dx * dx + dy * dy
    radius_sum = radius_a + radius_b

    if distance_sq >= radius_sum * radius_sum:
        return False

    distance = np.sqrt(distance_sq)
    if distance == 0.0:
        return True

    # Normal from a to b.
    nx = dx / distance
    ny = dy / distance

    # Closing speed along the normal; negative means the pair is separating.
    rvx = vel_a[0] - vel_b[0]
    rvy = vel_a[1] - vel_b[1]
    rel_vel_dot_norm = rvx * nx + rvy * ny
    if rel_vel_dot_norm < 0.0:
        return True

    if honor_parameters:
        impulse = 0.5 * (1.0 + restitution) * rel_vel_dot_norm
        overlap = 0.5 * correction_factor * max(radius_sum - distance - penetration_slop, 0.0)
    else:
        # m1 = m2 = 1, perfectly elastic, full positional correction.
        impulse = rel_vel_dot_norm
        overlap = 0.5 * (radius_sum - distance)

    vel_a[0] -= impulse * nx
    vel_a[1] -= impulse * ny
    vel_b[0] += impulse * nx
    vel_b[1] += impulse * ny

    pos_a[0] -= overlap * nx
    pos_a[1] -= overlap * ny
    pos_b[0] += overlap * nx
    pos_b[1] += overlap * ny
    return True

@numba.jit(nopython=True)
def _impulse_all_pairs_jit(positions, velocities, radii, restitution, correction_factor,
                           penetration_slop, honor_parameters):
    """Runs the impulse kernel over every pair (i, j), i < j, in index order."""
    n = positions.shape[0]
    resolved = 0
    for i in range(n):
        for j in range(i + 1, n):
            if _impulse_pair_jit(positions[i], velocities[i], radii[i],
                                 positions[j], velocities[j], radii[j],
                                 restitution, correction_factor, penetration_slop, honor_parameters):
                resolved += 1
    return resolved


class InteractionLaw:
    """
    A pairwise interaction between two particles.

    Subclasses implement resolve(a, b), which mutates both particles and
    returns True when an effect was computed or deliberately skipped, and
    False when no interaction applies. Both particles must receive equal and
    opposite effects because each unordered pair is visited once per step.
    """
    name = None

    def resolve(self, a, b) -> bool:
        raise NotImplementedError

    def resolve_all(self, system) -> int:
        """
        Resolves every unordered pair of the system's particles exactly once,
        in lexicographic index order. Returns the number of pairs for which
        resolve returned True.
        """
        particles = system.particles
        n = len(particles)
        resolved = 0
        for i in range(n):
            for j in range(i + 1, n):
                if self.resolve(particles[i], particles[j]):
                    resolved += 1
        return resolved


class CoulombLaw(InteractionLaw):
    """
    Inverse-square force between identically charged particles, accumulated
    into the force buffers (not the velocities).

    - k: Coulomb's constant.
    - softening: Added (squared) to the squared distance to avoid a singularity.
    - cutoff: Pairs further apart than this do not interact.
    - charge: The charge carried by every particle.
    """
    name = 'coulomb'

    def __init__(self, k: float = constants.COULOMB_K, softening: float = constants.COULOMB_SOFTENING,
                 cutoff: float = constants.COULOMB_CUTOFF, charge: float = constants.PARTICLE_CHARGE):
        if softening < 0 or cutoff < 0:
            raise ConfigurationError("Coulomb softening and cutoff must be non-negative.")
        self.k = float(k)
        self.softening = float(softening)
        self.cutoff = float(cutoff)
        self.charge = float(charge)

    @property
    def charge_product(self) -> float:
        return self.charge * self.charge

    def resolve(self, a, b) -> bool:
        return bool(_coulomb_pair_jit(
            a.position, a.force, a.radius, b.position, b.force,
            self.k, self.charge_product, self.softening, self.cutoff
        ))

    def resolve_all(self, system) -> int:
        return int(_coulomb_all_pairs_jit(
            system.positions, system.forces, system.radii,
            self.k, self.charge_product, self.softening, self.cutoff
        ))

    def __repr__(self):
        return f"CoulombLaw(k={self.k}, softening={self.softening}, cutoff={self.cutoff}, charge={self.charge})"


class ImpulseCollision(InteractionLaw):
    """
    Impulse-based collision between overlapping equal-mass circles.

    By default the collision is perfectly elastic and the overlap is fully
    corrected, whatever restitution, correction_factor and penetration_slop
    hold. With honor_parameters=True the impulse is scaled by
    (1 + restitution) / 2 and only correction_factor of the penetration
    beyond penetration_slop is corrected.
    """
    name = 'impulse'

    def __init__(self, restitution: float = constants.RESTITUTION,
                 correction_factor: float = constants.CORRECTION_FACTOR,
                 penetration_slop: float = constants.PENETRATION_SLOP,
                 honor_parameters: bool = False):
        if not 0.0 <= restitution <= 1.0:
            raise ConfigurationError(f"Restitution must lie in [0, 1], got {restitution}.")
        if correction_factor < 0 or penetration_slop < 0:
            raise ConfigurationError("Correction factor and penetration slop must be non-negative.")
        self.restitution = float(restitution)
        self.correction_factor = float(correction_factor)
        self.penetration_slop = float(penetration_slop)
        self.honor_parameters = bool(honor_parameters)

    def resolve(self, a, b) -> bool:
        return bool(_impulse_pair_jit(
            a.position, a.velocity, a.radius, b.position, b.velocity, b.radius,
            self.restitution, self.correction_factor, self.penetration_slop, self.honor_parameters
        ))

    def resolve_all(self, system) -> int:
        return int(_impulse_all_pairs_jit(
            system.positions, system.velocities, system.radii,
            self.restitution, self.correction_factor, self.penetration_slop, self.honor_parameters
        ))

    def __repr__(self):
        return (f"ImpulseCollision(restitution={self.restitution}, correction_factor={self.correction_factor}, "
                f"penetration_slop={self.penetration_slop}, honor_parameters={self.honor_parameters})")


LAWS = {
    CoulombLaw.name: CoulombLaw,
    ImpulseCollision.name: ImpulseCollision,
}

def build_interaction_law(name: str, params: dict = None) -> InteractionLaw:
    """
    Creates the interaction law registered under ``name`` ('coulomb' or
    'impulse'). Missing parameters take the defaults from constants.py.
    """
    law_class = LAWS.get(str(name).lower())
    if law_class is None:
        raise ConfigurationError(f"Unknown interaction law '{name}'. Expected one of: {', '.join(LAWS)}.")
    try:
        law = law_class(**(params or {}))
    except TypeError as e:
        raise ConfigurationError(f"Invalid parameters for interaction law '{name}': {e}") from e
    logger.info(f"Interaction law selected: {law}")
    return law
