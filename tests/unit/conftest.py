"""
Unit test specific fixtures.

These fixtures are only available to unit tests.
"""

import logging

import pytest

from openrtb_compat.core.schemas import EID, Regs, Source, SupplyChain, User


@pytest.fixture
def schain() -> SupplyChain:
    return SupplyChain(complete=1, nodes=[], ver="2")


@pytest.fixture
def full_source(schain) -> Source:
    return Source(schain=schain)


@pytest.fixture
def full_regs() -> Regs:
    return Regs(gdpr=1, us_privacy="3", gpp="gpp", gpp_sid=[1, 2])


@pytest.fixture
def full_user() -> User:
    return User(consent="1", eids=[EID(source="42")])


@pytest.fixture
def isolated_package_logger():
    """Strip handlers/level from the package logger around a test."""
    logger = logging.getLogger("openrtb_compat")
    original_handlers = list(logger.handlers)
    original_level = logger.level
    logger.handlers = []

    yield logger

    logger.handlers = original_handlers
    logger.setLevel(original_level)
