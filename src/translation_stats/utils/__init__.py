"""Utility modules for Translation Stats."""

from .config_loader import load_config, get_project_root
from .logging import setup_logging, get_logger
from .paths import catalog_file_name, catalog_path, script_json_file_name

__all__ = [
    "load_config",
    "get_project_root",
    "setup_logging",
    "get_logger",
    "catalog_file_name",
    "catalog_path",
    "script_json_file_name",
]
