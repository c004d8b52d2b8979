"""Shared fixtures for unit tests: pure functions, no external services."""

import pytest

from opinion_landscape.helpers.geometry import Point2D


@pytest.fixture
def square_with_center():
    """Four corners of a 10x10 square plus an interior point."""
    return [Point2D(0, 0), Point2D(10, 0), Point2D(10, 10), Point2D(0, 10), Point2D(5, 5)]


@pytest.fixture
def scenario_statements():
    """Three groups, two statements, scores already on the -100..+100 scale."""
    return [
        {"statementId": "s1", "groupAgreements": {0: 80, 1: 75, 2: -90}},
        {"statementId": "s2", "groupAgreements": {0: 10, 1: -70, 2: 70}},
    ]
