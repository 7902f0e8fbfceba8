# test_simulation.py

import logging

import pytest

from particle import Particle
from particle_system import ParticleSystem
from simulation import Simulation


@pytest.fixture
def simulation(box, impulse_law):
    particles = [Particle((100.0, 100.0), (10.0, 0.0), 5.0), Particle((700.0, 300.0), (-10.0, 5.0), 5.0)]
    return Simulation(ParticleSystem(particles, box, impulse_law, substeps=2))


def test_advance_runs_one_frame(simulation):
    before = simulation.system.positions.copy()

    assert simulation.advance(0.1) is True

    assert simulation.system.tick == 1
    assert (simulation.system.positions != before).any()


def test_pause_blocks_advance(simulation):
    before = simulation.system.positions.copy()

    assert simulation.pause_play() is True
    assert simulation.advance(0.1) is False

    assert simulation.system.tick == 0
    assert simulation.system.positions.tolist() == before.tolist()


def test_resume_after_pause(simulation):
    simulation.pause_play()
    assert simulation.pause_play() is False
    assert simulation.advance(0.1) is True


def test_single_step_ignores_pause(simulation):
    simulation.pause_play()

    simulation.single_step(0.1)

    assert simulation.system.tick == 1
    assert simulation.paused is True


def test_gate_controls_reach_the_container(simulation):
    assert simulation.gate_active is False
    assert simulation.toggle_gate() is True
    assert simulation.container.gate_active is True
    simulation.set_gate(False)
    assert simulation.gate_active is False


@pytest.mark.parametrize("value, expected", [(-10.0, 0.0), (42.5, 42.5), (250.0, 100.0)])
def test_slider_value_is_clamped(simulation, value, expected):
    assert simulation.set_slider_value(value) == expected
    assert simulation.slider_value == expected


def test_slider_value_does_not_affect_physics(box, impulse_law):
    def run(slider_value):
        particles = [Particle((100.0, 100.0), (10.0, 0.0), 5.0)]
        sim = Simulation(ParticleSystem(particles, box, impulse_law), slider_value=slider_value)
        sim.advance(0.1)
        return sim.system.positions.tolist()

    assert run(0.0) == run(100.0)


def test_energy_is_logged_at_the_configured_interval(box, impulse_law, caplog, monkeypatch):
    logger = logging.getLogger("demon_sim")
    monkeypatch.setattr(logger, "propagate", True)
    sim = Simulation(ParticleSystem([Particle((100.0, 100.0), (10.0, 0.0), 5.0)], box, impulse_law),
                     log_interval=2)

    with caplog.at_level(logging.DEBUG, logger="demon_sim"):
        sim.advance(0.01)
        sim.advance(0.01)

    energy_lines = [r for r in caplog.records if r.message.startswith("Tick=")]
    assert len(energy_lines) == 1
    assert "Tick=2" in energy_lines[0].message
