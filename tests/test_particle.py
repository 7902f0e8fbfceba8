# test_particle.py

import numpy as np
import pytest

from config import ConfigurationError
from container import BoundaryContainer
from particle import Particle, random_velocity


@pytest.mark.parametrize("radius", [0.0, -1.0, float("nan")])
def test_non_positive_radius_is_rejected(radius):
    with pytest.raises(ConfigurationError):
        Particle((0.0, 0.0), (0.0, 0.0), radius)


def test_vectors_must_be_two_dimensional():
    with pytest.raises(ConfigurationError):
        Particle((0.0, 0.0, 0.0), (0.0, 0.0), 1.0)


def test_force_starts_at_zero():
    p = Particle((1.0, 2.0), (3.0, 4.0), 5.0)
    assert p.force.tolist() == [0.0, 0.0]


def test_update_is_semi_implicit_euler():
    p = Particle((0.0, 0.0), (1.0, 2.0), 1.0)
    p.force[:] = (3.0, 4.0)

    p.update(0.5, gravity=10.0)

    # Velocity first: v += (F + g) * dt, then position with the new velocity.
    assert p.velocity == pytest.approx([2.5, 9.0])
    assert p.position == pytest.approx([1.25, 4.5])


def test_gravity_pulls_down_without_force():
    p = Particle((10.0, 10.0), (0.0, 0.0), 1.0)
    p.update(0.1)
    assert p.velocity[0] == 0.0
    assert p.velocity[1] == pytest.approx(0.981)
    assert p.position[1] == pytest.approx(10.0981)


def test_reset_force():
    p = Particle((0.0, 0.0), (0.0, 0.0), 1.0)
    p.force[:] = (7.0, -3.0)
    p.reset_force()
    assert p.force.tolist() == [0.0, 0.0]


def test_speed_and_kinetic_energy():
    p = Particle((0.0, 0.0), (3.0, -4.0), 2.0)
    assert p.speed == pytest.approx(5.0)
    assert p.kinetic_energy == pytest.approx(12.5)


def test_random_particles_lie_inside_the_container(rng):
    container = BoundaryContainer.from_size(200.0, 100.0)
    for _ in range(200):
        p = Particle.random(container, rng, radius=5.0, min_speed=50.0, max_speed=250.0)
        assert container.contains(p)
        assert 50.0 <= p.speed < 250.0


def test_random_particles_are_reproducible():
    container = BoundaryContainer.from_size(200.0, 100.0)
    a = Particle.random(container, np.random.default_rng(7))
    b = Particle.random(container, np.random.default_rng(7))
    assert a.position.tolist() == b.position.tolist()
    assert a.velocity.tolist() == b.velocity.tolist()


def test_random_particle_needs_room(rng):
    container = BoundaryContainer.from_size(8.0, 100.0)
    with pytest.raises(ConfigurationError):
        Particle.random(container, rng, radius=5.0)


@pytest.mark.parametrize("min_speed, max_speed", [(-1.0, 10.0), (20.0, 10.0)])
def test_random_velocity_rejects_bad_ranges(rng, min_speed, max_speed):
    with pytest.raises(ConfigurationError):
        random_velocity(rng, min_speed, max_speed)


def test_bind_shares_memory():
    p = Particle((1.0, 2.0), (3.0, 4.0), 1.0)
    positions = np.zeros((2, 2))
    velocities = np.zeros((2, 2))
    forces = np.zeros((2, 2))

    p.bind(positions[1], velocities[1], forces[1])

    assert positions[1].tolist() == [1.0, 2.0]
    assert velocities[1].tolist() == [3.0, 4.0]

    positions[1, 0] = 42.0
    assert p.position[0] == 42.0

    p.update(1.0, gravity=0.0)
    assert positions[1].tolist() == [45.0, 6.0]


def test_bind_twice_is_rejected():
    p = Particle((1.0, 2.0), (3.0, 4.0), 1.0)
    storage = np.zeros((2, 2))
    p.bind(storage[0], np.zeros(2), np.zeros(2))

    with pytest.raises(ConfigurationError):
        p.bind(storage[1], np.zeros(2), np.zeros(2))

    assert storage[1].tolist() == [0.0, 0.0]
    storage[0, 0] = 9.0
    assert p.position[0] == 9.0


def test_copy_is_unbound_and_independent():
    p = Particle((1.0, 2.0), (3.0, 4.0), 1.5)
    p.bind(np.zeros(2), np.zeros(2), np.zeros(2))

    q = p.copy()

    assert q.bound is False
    assert q.radius == 1.5
    assert q.position.tolist() == [1.0, 2.0]
    assert q.velocity.tolist() == [3.0, 4.0]
    q.position[0] = 100.0
    assert p.position[0] == 1.0
