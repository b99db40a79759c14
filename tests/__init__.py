"""
Test suite for fixnum

Contains:
- tests/unit/          : Unit tests for individual modules
"""
