"""
photo-tool - sort photos into date-based folders

photo-tool reads the EXIF capture date of each image and moves it
into a YYYY-MM-DD directory under the chosen target.
"""

from .core import main

__all__ = ["main"]
