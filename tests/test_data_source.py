import asyncio
import json

import pytest

from campaign_insights import data_source
from campaign_insights.data_source import (
    DataLoadError,
    fetch_marketing_data,
    load_marketing_data,
    require_marketing_data,
)


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "marketing_data.json"
    payload = {
        "campaigns": [
            {
                "id": "c1",
                "name": "Launch",
                "spend": 100,
                "revenue": 300,
                "regional_performance": [{"region": "Dubai", "country": "UAE", "spend": 100, "revenue": 300}],
            }
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_valid_file(data_file):
    result = load_marketing_data(str(data_file), timeout=5)
    assert result.ok
    assert result.error is None
    assert result.data.campaigns[0].name == "Launch"
    assert result.data.campaigns[0].regional_performance[0].region == "Dubai"


def test_fetch_coroutine(data_file):
    data = asyncio.run(fetch_marketing_data(str(data_file)))
    assert len(data.campaigns) == 1


def test_missing_file(tmp_path):
    result = load_marketing_data(str(tmp_path / "nope.json"), timeout=5)
    assert not result.ok
    assert result.data is None
    assert "Missing file" in result.error


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    result = load_marketing_data(str(path), timeout=5)
    assert not result.ok
    assert "not valid JSON" in result.error


def test_payload_without_campaigns(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"rows": []}), encoding="utf-8")
    with pytest.raises(DataLoadError, match="campaigns"):
        asyncio.run(fetch_marketing_data(str(path)))


def test_timeout_reports_error(monkeypatch, data_file):
    async def slow_fetch(path):
        await asyncio.sleep(5)

    monkeypatch.setattr(data_source, "fetch_marketing_data", slow_fetch)
    result = load_marketing_data(str(data_file), timeout=0.01)
    assert not result.ok
    assert result.error == "Timed out loading marketing data after 0.01s"


def test_malformed_nested_collection_still_loads(tmp_path):
    path = tmp_path / "odd.json"
    path.write_text(json.dumps({"campaigns": [{"id": "c1", "device_performance": 5}]}), encoding="utf-8")
    result = load_marketing_data(str(path), timeout=5)
    assert result.ok
    assert result.data.campaigns[0].device_performance == ()


def test_require_raises_then_recovers_once_file_exists(tmp_path):
    path = tmp_path / "late.json"
    with pytest.raises(DataLoadError, match="Missing file"):
        require_marketing_data(str(path), timeout=5)

    path.write_text(json.dumps({"campaigns": [{"id": "c1"}]}), encoding="utf-8")
    data = require_marketing_data(str(path), timeout=5)
    assert [c.id for c in data.campaigns] == ["c1"]
