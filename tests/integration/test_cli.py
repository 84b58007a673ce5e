"""Integration tests for the satnogs-fetch CLI. The client class is mocked."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from satnogs_client.cli import main
from satnogs_client.errors import NetworkError
from satnogs_client.models import TelemetryPage

RECORD = {
    "sat_id": "43770",
    "norad_cat_id": 43770,
    "timestamp": "2023-01-01T00:00:00Z",
    "observation_id": 1,
    "station_id": 1,
}


@pytest.fixture
def fake_client():
    fake = MagicMock()
    with patch("satnogs_client.cli.SatnogsClient") as mock_cls:
        mock_cls.return_value.__enter__.return_value = fake
        fake.cls = mock_cls
        yield fake


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "telemetry" in capsys.readouterr().out


def test_telemetry_prints_records(fake_client, capsys):
    page = TelemetryPage.model_validate({"next": "", "prev": "", "results": [RECORD]})
    fake_client.iter_telemetry_pages.return_value = [page]

    assert main(["--api-key", "k", "telemetry", "43770"]) == 0

    fake_client.cls.assert_called_once_with(api_key="k")
    fake_client.iter_telemetry_pages.assert_called_once_with("43770", max_pages=1)
    records = json.loads(capsys.readouterr().out)
    assert len(records) == 1
    assert records[0]["norad_cat_id"] == 43770
    assert records[0]["timestamp"].startswith("2023-01-01T00:00:00")


def test_telemetry_all_pages(fake_client):
    fake_client.iter_telemetry_pages.return_value = []
    main(["--api-key", "", "telemetry", "43770", "--all"])
    fake_client.iter_telemetry_pages.assert_called_once_with("43770", max_pages=None)


def test_api_key_defaults_to_settings(fake_client):
    fake_client.iter_telemetry_pages.return_value = []
    with patch("satnogs_client.cli.get_settings") as mock_settings:
        mock_settings.return_value = MagicMock(satnogs_api_key="from-env")
        main(["telemetry", "43770"])
    fake_client.cls.assert_called_once_with(api_key="from-env")


def test_api_passes_ordered_params(fake_client, capsys):
    request = httpx.Request("GET", "https://db.satnogs.org/api/satellites/?format=json")
    fake_client.get.return_value = httpx.Response(200, json=[{"norad_cat_id": 43770}], request=request)

    assert main(["--api-key", "", "api", "/satellites/", "--param", "format=json", "--param", "status=alive"]) == 0

    fake_client.get.assert_called_once_with("/satellites/", [("format", "json"), ("status", "alive")])
    assert json.loads(capsys.readouterr().out) == [{"norad_cat_id": 43770}]


def test_client_errors_exit_nonzero(fake_client):
    fake_client.iter_telemetry_pages.side_effect = NetworkError("GET failed: connection refused")
    assert main(["--api-key", "", "telemetry", "43770"]) == 1


@pytest.mark.parametrize("pages", ["0", "-1"])
def test_pages_below_one_rejected(fake_client, pages, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["telemetry", "43770", "--pages", pages])
    assert exc_info.value.code == 2
    assert "must be at least 1" in capsys.readouterr().err
    fake_client.iter_telemetry_pages.assert_not_called()
