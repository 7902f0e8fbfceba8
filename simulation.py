# simulation.py

import logging
import constants
from particle_system import ParticleSystem

logger = logging.getLogger("demon_sim")


class Simulation:
    """
    Host-facing wrapper around a ParticleSystem.

    Holds the run controls the window forwards to the physics: pause/resume,
    single-step, the demon gate switch and the sidebar slider value. The
    slider value is stored and clamped to [0, 100] but the physics does not
    read it yet.
    """
    def __init__(self, system: ParticleSystem, paused: bool = False,
                 slider_value: float = constants.SLIDER_DEFAULT,
                 log_interval: int = constants.ENERGY_LOG_INTERVAL):
        self.system = system
        self.paused = paused
        self.slider_value = self._clamp_slider(slider_value)
        self.log_interval = log_interval

    @staticmethod
    def _clamp_slider(value: float) -> float:
        return min(max(float(value), 0.0), 100.0)

    @property
    def container(self):
        return self.system.container

    @property
    def gate_active(self) -> bool:
        return self.system.container.gate_active

    def pause_play(self) -> bool:
        self.paused = not self.paused
        logger.info(f"Simulation {'paused' if self.paused else 'resumed'} at tick {self.system.tick}.")
        return self.paused

    def toggle_gate(self) -> bool:
        return self.system.container.toggle_gate()

    def set_gate(self, active: bool):
        self.system.container.set_gate(active)

    def set_slider_value(self, value: float) -> float:
        self.slider_value = self._clamp_slider(value)
        return self.slider_value

    def advance(self, frame_dt: float) -> bool:
        """
        Advances one frame unless paused. Returns True when the physics ran.
        """
        if self.paused:
            return False
        self._run_frame(frame_dt)
        return True

    def single_step(self, frame_dt: float):
        """Advances one frame regardless of the pause flag."""
        self._run_frame(frame_dt)

    def _run_frame(self, frame_dt: float):
        self.system.update(frame_dt)

        # --- Logging (throttled) ---
        if self.log_interval and self.system.tick % self.log_interval == 0:
            left_temp, right_temp = self.system.region_temperatures()
            logger.debug(
                f"Tick={self.system.tick}, "
                f"Time={self.system.time:.3f}, "
                f"TotalKinetic={self.system.get_total_kinetic_energy():.2f}, "
                f"AverageKinetic={self.system.average_kinetic_energy():.2f}, "
                f"T_left={left_temp:.2f}, "
                f"T_right={right_temp:.2f}, "
                f"Interactions={self.system.last_interaction_count}, "
                f"Gate={'on' if self.gate_active else 'off'}"
            )
