"""
Karu - terminal file browser

Navigate a directory tree, preview files and run basic file operations
from a keyboard/mouse driven panel interface.

Created: 2025-11-12
"""

__version__ = "0.1.0"
__author__ = "Karu contributors"
