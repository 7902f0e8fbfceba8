# config.py

import copy
import json
import logging

import constants

logger = logging.getLogger("demon_sim")


class ConfigurationError(ValueError):
    """Raised when the simulation is constructed with invalid parameters."""


# Values used for any key missing from the 'simulation' section of config.json.
DEFAULT_SIMULATION_CONFIG = {
    'particle_count': 500,
    'width': constants.WIDTH - constants.SIDEBAR_WIDTH,
    'height': constants.HEIGHT,
    'particle_radius': constants.PARTICLE_RADIUS,
    'min_speed': constants.MIN_SPEED,
    'max_speed': constants.MAX_SPEED,
    'gravity': constants.GRAVITY,
    'substeps': constants.SUBSTEPS,
    'max_frame_dt': constants.MAX_FRAME_DT,
    'demon_active': False,
    'hot_speed': constants.HOT_SPEED,
    'cold_speed': constants.COLD_SPEED,
    'interaction_law': 'impulse',
    'coulomb': {
        'k': constants.COULOMB_K,
        'softening': constants.COULOMB_SOFTENING,
        'cutoff': constants.COULOMB_CUTOFF,
        'charge': constants.PARTICLE_CHARGE,
    },
    'impulse': {
        'restitution': constants.RESTITUTION,
        'correction_factor': constants.CORRECTION_FACTOR,
        'penetration_slop': constants.PENETRATION_SLOP,
        'honor_parameters': False,
    },
}

# Values used for any key missing from the 'logging' section of config.json.
DEFAULT_LOGGING_CONFIG = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'log_dir': 'runs',
    'file_name': 'simulation.log',
    'console': True,
}

REQUIRED_KEYS = ('run_id', 'master_seed', 'logging')


def _merge(defaults: dict, overrides: dict) -> dict:
    """Recursively overlays ``overrides`` onto a copy of ``defaults``."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def simulation_config(overrides: dict = None) -> dict:
    """
    Returns a complete 'simulation' section, with defaults filled in for
    every key that ``overrides`` does not set.
    """
    return _merge(DEFAULT_SIMULATION_CONFIG, overrides or {})


def load_config(config_path='config.json') -> dict:
    """
    Loads the application configuration file.

    Data Contract:
    - Inputs: config_path (str) - Path to the JSON configuration file.
    - Outputs: dict - The parsed configuration. The 'logging' and 'simulation'
      sections are always complete.
    - Side Effects: None.
    - Invariants: The file must define 'run_id', 'master_seed' and 'logging';
      a ConfigurationError is raised otherwise.
    """
    with open(config_path, 'r') as f:
        config = json.load(f)

    missing = [key for key in REQUIRED_KEYS if key not in config]
    if missing:
        raise ConfigurationError(f"{config_path} is missing required keys: {', '.join(missing)}")

    config['logging'] = _merge(DEFAULT_LOGGING_CONFIG, config['logging'])
    config['simulation'] = simulation_config(config.get('simulation'))
    return config
