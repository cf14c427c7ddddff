"""
Building of unified diff patches for staging and unstaging.
"""

from .patch_builder import build_hunk_patch, build_selective_patch, build_file_header
