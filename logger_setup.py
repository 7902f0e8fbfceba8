# logger_setup.py

import logging
import os

from config import load_config

def setup_logging(config_path='config.json'):
    """
    Sets up logging for the application.

    Reads the 'logging' section of the configuration and configures a
    dedicated application logger (not the root logger), so Numba's compiler
    chatter stays out of the simulation log. The log file is written to
    <log_dir>/<run_id>/<file_name>; a console handler is added as well unless
    'console' is false.

    Data Contract:
    - Inputs: config_path (str) - Path to the configuration file.
    - Outputs: logging.Logger - The configured "demon_sim" logger.
    - Side Effects:
        - Replaces (and closes) any handlers already on the "demon_sim" logger.
        - Creates the run's log directory.
    - Invariants: 'run_id' is present; load_config fills in every missing
      'logging' key ('level', 'format', 'log_dir', 'file_name', 'console').
    """
    config = load_config(config_path)

    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger("demon_sim")
    logger.setLevel(log_config['level'])
    logger.propagate = False

    run_dir = os.path.join(log_config['log_dir'], run_id)
    os.makedirs(run_dir, exist_ok=True)
    log_file = os.path.join(run_dir, log_config['file_name'])

    formatter = logging.Formatter(log_config['format'])
    handlers = [logging.FileHandler(log_file)]
    if log_config['console']:
        handlers.append(logging.StreamHandler())

    # Calling this again must not stack handlers.
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return logger
