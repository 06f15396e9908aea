# tests/core/test_regions_repository.py
"""
Тесты справочника регионов.
"""

from typing import Any
from unittest.mock import MagicMock

import pytest

from uytop.core.regions.repository import RegionRepository


@pytest.mark.asyncio
async def test_list_all(mock_db: MagicMock, sample_region_data: dict[str, Any]) -> None:
    mock_db.fetch.return_value = [sample_region_data]

    regions = await RegionRepository(mock_db).list_all()

    assert len(regions) == 1
    assert regions[0].localized_name("ru") == "Ташкент"
    assert "ORDER BY name_ru" in mock_db.fetch.call_args[0][0]


@pytest.mark.asyncio
async def test_list_all_offline(offline_db: MagicMock) -> None:
    assert await RegionRepository(offline_db).list_all() == []


@pytest.mark.asyncio
async def test_list_all_on_error(mock_db: MagicMock) -> None:
    mock_db.fetch.side_effect = RuntimeError("boom")

    assert await RegionRepository(mock_db).list_all() == []
