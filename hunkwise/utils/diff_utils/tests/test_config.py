"""
Tests for configuration lookups.
"""

import os
import unittest
from unittest import mock

from hunkwise.utils.diff_utils.core import config
from hunkwise.utils.diff_utils.core.utils import clamp


class TestConfig(unittest.TestCase):
    """Test cases for environment overrides."""

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config.get_alpha_threshold(), 10)
            self.assertEqual(config.get_color_threshold(), 10)
            self.assertEqual(config.get_chunk_pixels(), 65536)
            self.assertAlmostEqual(config.get_debounce_seconds(), 0.15)

    def test_overrides(self):
        with mock.patch.dict(os.environ, {config.ENV_ALPHA_THRESHOLD: "32",
                                          config.ENV_DEBOUNCE_MS: "0"}):
            self.assertEqual(config.get_alpha_threshold(), 32)
            self.assertEqual(config.get_debounce_seconds(), 0)

    def test_invalid_values_fall_back(self):
        with mock.patch.dict(os.environ, {config.ENV_CHUNK_PIXELS: "lots",
                                          config.ENV_COLOR_THRESHOLD: "250"}):
            self.assertEqual(config.get_chunk_pixels(), config.DEFAULT_CHUNK_PIXELS)
            self.assertEqual(config.get_color_threshold(), 100)

    def test_clamp_color_threshold(self):
        self.assertEqual(config.clamp_color_threshold(-5), 0)
        self.assertEqual(config.clamp_color_threshold(42), 42)
        self.assertEqual(config.clamp_color_threshold(101.7), 100)

    def test_clamp(self):
        self.assertEqual(clamp(5, 1, 3), 3)
        self.assertEqual(clamp(0, 1, 3), 1)
        self.assertEqual(clamp(2, 1, 3), 2)

    def test_non_positive_chunk(self):
        with mock.patch.dict(os.environ, {config.ENV_CHUNK_PIXELS: "0"}):
            self.assertEqual(config.get_chunk_pixels(), config.DEFAULT_CHUNK_PIXELS)


if __name__ == "__main__":
    unittest.main()
