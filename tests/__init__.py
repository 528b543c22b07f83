"""
Test suite for the Beta function library

Contains:
- tests/unit/          : Unit tests for individual modules
"""
