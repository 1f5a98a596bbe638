"""Test suite for nanobanana.

Test Structure:
- unit/: Unit tests mirroring packages/nanobanana/core and cli
- conftest.py: Shared image and wire fixtures
"""
