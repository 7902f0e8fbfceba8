# main.py

import pygame
import constants
import logging
import logger_setup
import numpy as np
from config import load_config
from particle_system import ParticleSystem
from rendering import draw_simulation, slider_rect, slider_value_at
from simulation import Simulation

# Get the application's dedicated logger
logger = logging.getLogger("demon_sim")

def handle_event(event, simulation: Simulation) -> bool:
    """
    Routes a single pygame event to the simulation controls.
    Returns False when the application should quit.

    - Space: pause / resume.
    - Right arrow: advance one frame even while paused.
    - Left click: open the demon gate. Right click: close it.
    - Click on the slider: set its value.
    """
    if event.type == pygame.QUIT:
        return False

    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_SPACE:
            simulation.pause_play()
        elif event.key == pygame.K_RIGHT:
            simulation.single_step(1.0 / constants.FPS)

    elif event.type == pygame.MOUSEBUTTONDOWN:
        rect = slider_rect(simulation.container)
        if rect.collidepoint(event.pos):
            simulation.set_slider_value(slider_value_at(event.pos[0], rect))
        elif event.button == 1:
            simulation.set_gate(False)
        elif event.button == 3:
            simulation.set_gate(True)

    return True

def main():
    """
    Main function to initialize and run the demon simulation.
    """
    # --- Setup ---
    logger_setup.setup_logging()

    config = load_config()
    sim_config = config['simulation']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 24)

    simulation = Simulation(ParticleSystem.from_config(sim_config, rng))

    # --- Compile the Numba kernels before the first timed frame ---
    simulation.system.step(0.0)
    clock.tick()
    logger.info("Physics kernels compiled.")

    # --- Loop ---
    running = True
    while running:
        frame_dt = clock.tick(constants.FPS) / 1000.0

        for event in pygame.event.get():
            if not handle_event(event, simulation):
                running = False

        simulation.advance(frame_dt)

        draw_simulation(screen, font, simulation)
        pygame.display.flip()

    logger.info("Application shutting down.")
    pygame.quit()

if __name__ == "__main__":
    main()
