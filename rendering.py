# rendering.py

import pygame
import constants

def _smoothstep(edge0: float, edge1: float, x: float) -> float:
    factor = min(max((x - edge0) / (edge1 - edge0), 0.0), 1.0)
    return factor * factor * (3.0 - 2.0 * factor)

def _interpolate_color(start, end, factor: float):
    return tuple(int(round(s + (e - s) * factor)) for s, e in zip(start, end))

def kinetic_energy_color(kinetic_energy: float, average_kinetic_energy: float):
    """
    Maps a particle's kinetic energy to an RGB color relative to the
    population average. An average particle lands at COLOR_AVERAGE_LEVEL on
    a 0-100 scale, which is then blended through the gradient keyframes.
    """
    if average_kinetic_energy > 0:
        normalized = (kinetic_energy / average_kinetic_energy) * constants.COLOR_AVERAGE_LEVEL
    else:
        normalized = 0.0
    level = min(max(normalized, 0.0), 100.0)

    keyframes = constants.COLOR_GRADIENT_KEYFRAMES
    if level <= keyframes[0][0]:
        return keyframes[0][1]
    for (level1, color1), (level2, color2) in zip(keyframes, keyframes[1:]):
        if level <= level2:
            return _interpolate_color(color1, color2, _smoothstep(level1, level2, level))
    return keyframes[-1][1]

def slider_rect(container) -> pygame.Rect:
    """The slider track, placed in the sidebar to the right of the container."""
    return pygame.Rect(
        int(container.x_max) + constants.SLIDER_OFFSET_X,
        constants.SLIDER_Y,
        constants.SIDEBAR_WIDTH - 2 * constants.SLIDER_OFFSET_X,
        constants.SLIDER_HEIGHT,
    )

def slider_value_at(x: float, rect: pygame.Rect) -> float:
    """Maps a horizontal screen coordinate on the track to a value in [0, 100]."""
    return min(max((x - rect.x) / rect.width * 100.0, 0.0), 100.0)

def slider_label(value: float) -> str:
    return f"Value: {value:.0f}"

def draw_slider(screen: pygame.Surface, rect: pygame.Rect, value: float):
    pygame.draw.rect(screen, constants.SLIDER_TRACK, rect)
    thumb_x = rect.x + (value / 100.0) * rect.width - constants.SLIDER_THUMB_WIDTH / 2
    thumb = pygame.Rect(int(thumb_x), rect.y - 2, constants.SLIDER_THUMB_WIDTH, rect.height + 4)
    pygame.draw.rect(screen, constants.SLIDER_THUMB, thumb)

def draw_simulation(screen: pygame.Surface, font: pygame.font.Font, simulation):
    """
    Draws the container, every particle colored by kinetic energy, and the
    sidebar with the per-half temperatures and the slider.
    """
    system = simulation.system
    container = system.container
    screen.fill(constants.BACKGROUND)

    # --- Container and gate ---
    box = pygame.Rect(int(container.x_min), int(container.y_min), int(container.width), int(container.height))
    pygame.draw.rect(screen, constants.WHITE, box, 2)
    if container.gate_active:
        mid = int(container.midline)
        pygame.draw.line(screen, constants.SLIDER_THUMB, (mid, int(container.y_min)), (mid, int(container.y_max)), 1)

    # --- Particles ---
    average = system.average_kinetic_energy()
    energies = system.kinetic_energies()
    for particle, energy in zip(system, energies):
        pygame.draw.circle(
            screen,
            kinetic_energy_color(float(energy), average),
            (int(particle.position[0]), int(particle.position[1])),
            max(int(particle.radius), 1)
        )

    # --- Sidebar ---
    sidebar = pygame.Rect(int(container.x_max), 0, constants.SIDEBAR_WIDTH, int(container.y_max))
    pygame.draw.rect(screen, constants.SIDEBAR_BACKGROUND, sidebar)

    left_temp, right_temp = system.region_temperatures()
    screen.blit(font.render(f"T_left: {left_temp:.2f}", True, constants.WHITE), (sidebar.x + 10, 10))
    screen.blit(font.render(f"T_right: {right_temp:.2f}", True, constants.WHITE), (sidebar.x + 10, 40))

    rect = slider_rect(container)
    draw_slider(screen, rect, simulation.slider_value)
    label = font.render(slider_label(simulation.slider_value), True, constants.WHITE)
    screen.blit(label, (rect.x, rect.bottom + 5))
