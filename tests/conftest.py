from __future__ import annotations

from collections.abc import Iterator

import pytest

from reportrunner.core.converters import set_converter_registry
from reportrunner.core.engine import CONFIG_ENV_VAR, reset_engine
from reportrunner.ui.cli.state import _ACTIVE_STATE


@pytest.fixture(autouse=True)
def _isolated_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_engine()
    set_converter_registry(None)
    token = _ACTIVE_STATE.set(None)
    yield
    _ACTIVE_STATE.reset(token)
    reset_engine()
    set_converter_registry(None)
