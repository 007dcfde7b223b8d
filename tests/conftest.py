from __future__ import annotations

import pytest

from tests.helpers import StubGateway


@pytest.fixture
def stub_gateway():
    return StubGateway()
