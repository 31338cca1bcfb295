"""Test suite for the pytest-arbor package.

This package contains unit and integration tests validating tree
construction, focus selection, repeat expansion, pytest integration,
and the command-line interface.
"""
