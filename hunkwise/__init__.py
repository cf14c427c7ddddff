"""
hunkwise - diff, merge and patch engine for a Git client.
"""

__version__ = "0.3.0"
