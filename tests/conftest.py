"""Pytest fixtures for testing"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers bound to streams captured by an earlier test"""
    yield
    logger = logging.getLogger("mortgage_calc")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
