from collections.abc import Callable

import pytest

from exchange_helpers import MockNetwork


@pytest.fixture
def mock_network() -> Callable[[Callable], MockNetwork]:
    return MockNetwork
