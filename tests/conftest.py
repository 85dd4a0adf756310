import logging

import pytest

from contact_finder.names import NameValidator, load_first_names


@pytest.fixture(scope="session")
def first_names() -> frozenset[str]:
    return load_first_names()


@pytest.fixture
def validator(first_names: frozenset[str]) -> NameValidator:
    return NameValidator(first_names, logger=logging.getLogger("test"))
