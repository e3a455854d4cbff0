"""
Utilities module.
"""
from dilemmaarena.utils.file_io import FileIO

__all__ = ['FileIO']
