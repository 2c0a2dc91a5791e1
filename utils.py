# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup and config
loading, that are used across different parts of the application but do
not belong to a specific domain like the grid rules or rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

from constants import (
    GRID_WIDTH, GRID_HEIGHT, CELL_SIZE, DEFAULT_BRUSH_RADIUS, FPS,
    MAX_STEPS, LOG_THROTTLE_STEPS,
    LOG_LEVEL, LOG_FORMAT, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT
)

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler, creating the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError if
#     the file does not hold a JSON object.
#
# validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
#   - Outputs: the same dictionary with every section present and
#     defaults from constants.py filled in.
#   - Raises: ValueError if a size or count is not a positive integer.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Points the root logger at the console and the run's log file.

    Unknown level names fall back to INFO.
    """
    log_config = config.get('logging', {})
    level_name = str(log_config.get('level', LOG_LEVEL)).upper()
    log_level = logging.getLevelName(level_name)
    known_level = isinstance(log_level, int)
    if not known_level:
        log_level = logging.INFO
    log_file_path = log_config.get('log_file', LOG_FILE)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(log_level)
    # Re-running setup (tests, restarts) must not stack handlers.
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_config.get('format', LOG_FORMAT))
    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info(f"Falling Sand logging ready (level {logging.getLevelName(log_level)}, file {log_file_path}).")
    if not known_level:
        logging.warning(f"Unknown log level {level_name!r} in config; using INFO.")

def load_config(path: str) -> Dict[str, Any]:
    """Reads the JSON experiment file; its top level must be an object."""
    logging.info(f"Reading experiment settings from {path}.")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"No experiment settings at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Experiment settings at {path} are not valid JSON: {e}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration error: {path} must hold a JSON object, got {type(config).__name__}."
        logging.critical(msg)
        raise ValueError(msg)
    logging.debug(f"Experiment sections found: {sorted(config)}")
    return config

def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fills in defaults and checks the sizes the simulation depends on.

    Raises:
        ValueError: If a dimension, step count or brush size is not a
            positive integer.
    """
    sim = config.setdefault('simulation_parameters', {})
    sim.setdefault('seed', None)
    sim.setdefault('grid_width', GRID_WIDTH)
    sim.setdefault('grid_height', GRID_HEIGHT)

    run = config.setdefault('run_control', {})
    run.setdefault('max_steps', MAX_STEPS)
    run.setdefault('log_throttle_steps', LOG_THROTTLE_STEPS)

    vis = config.setdefault('visualization', {})
    vis.setdefault('cell_size', CELL_SIZE)
    vis.setdefault('brush_radius', DEFAULT_BRUSH_RADIUS)
    vis.setdefault('fps', FPS)

    checks = [
        ('simulation_parameters.grid_width', sim['grid_width']),
        ('simulation_parameters.grid_height', sim['grid_height']),
        ('run_control.max_steps', run['max_steps']),
        ('run_control.log_throttle_steps', run['log_throttle_steps']),
        ('visualization.cell_size', vis['cell_size']),
        ('visualization.brush_radius', vis['brush_radius']),
        ('visualization.fps', vis['fps']),
    ]
    for name, value in checks:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            msg = f"Configuration error: {name} must be a positive integer, got {value!r}."
            logging.critical(msg)
            raise ValueError(msg)

    seed = sim['seed']
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
        msg = f"Configuration error: simulation_parameters.seed must be a non-negative integer or null, got {seed!r}."
        logging.critical(msg)
        raise ValueError(msg)

    logging.debug(
        f"Configuration validated: grid {sim['grid_width']}x{sim['grid_height']}, "
        f"seed {seed}, cell size {vis['cell_size']}px."
    )
    return config
