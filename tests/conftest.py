"""Shared fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest


@pytest.fixture
def extra_columns():
    """Board configured with one extra lane, ``em-contato``."""
    with patch("salon.scheduling.status.settings") as mock:
        mock.scheduling.extra_columns = ["em-contato"]
        yield mock


@pytest.fixture
def no_events():
    """Silence every event emitter; yields the mocks keyed by module."""
    modules = [
        "salon.scheduling.service",
        "salon.scheduling.optimistic",
        "salon.catalog.crud",
        "salon.catalog.inventory",
        "salon.catalog.finance",
    ]
    mocks: dict[str, MagicMock] = {}
    patchers = [patch(f"{m}.emit", new_callable=AsyncMock) for m in modules]
    for module, patcher in zip(modules, patchers):
        mocks[module] = patcher.start()
    yield mocks
    for patcher in patchers:
        patcher.stop()
