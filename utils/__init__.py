"""
Utilities package for Pantrify application.

Contains configuration, logging setup, ingredient name normalization,
and the background task runner.
"""

from .config import Config, get_config, reload_config
from .logger import setup_logging, get_logger, log_remote_call, RemoteCall
from .tasks import LatestTaskRunner
from .ingredient_names import SYNONYMS, normalize_ingredient_name, join_names

__all__ = [
    'Config',
    'get_config',
    'reload_config',
    'setup_logging',
    'get_logger',
    'log_remote_call',
    'RemoteCall',
    'LatestTaskRunner',
    'SYNONYMS',
    'normalize_ingredient_name',
    'join_names'
]
