"""
BlockStage Utils Module

Utility functions and classes for BlockStage.
"""

from .logging import get_logger, setup_logging
from .io import create_output_directory, load_project_file

__all__ = ['get_logger', 'setup_logging', 'create_output_directory', 'load_project_file']
