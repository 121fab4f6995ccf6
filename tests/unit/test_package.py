"""Test the package's public surface."""

import logging

import slide_merge


def test_public_api_is_importable():
    for name in slide_merge.__all__:
        assert getattr(slide_merge, name) is not None


def test_log_level_is_a_valid_level_name():
    assert isinstance(logging.getLevelName(slide_merge.LOG_LEVEL), int)
