import logging

import pytest

from storage import CartRepository

from .fakes import FakePool


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def repo(fake_pool):
    return CartRepository(
        fake_pool,
        table_name="carts",
        logger=logging.getLogger("tests.cart_repo"),
    )
