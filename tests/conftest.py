import pytest

import intlang
from tests.fixtures.fakewiki import *


@pytest.fixture(autouse=True)
def disable_rate_limiting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(intlang, "_tests_are_running", True, raising=False)
