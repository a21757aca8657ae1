"""Shared fixtures for Splitty tests."""

import pytest

from splitty.models import Participant


@pytest.fixture
def alice():
    return Participant(id=1, name="Alice", iban="NL91ABNA0417164300", bic="ABNANL2A")


@pytest.fixture
def bob():
    return Participant(id=2, name="Bob")


@pytest.fixture
def carol():
    return Participant(id=3, name="Carol")


@pytest.fixture
def dave():
    return Participant(id=4, name="Dave")
