"""
Test entry point CLI.
"""

import runpy

import pytest

from address_resolver import __version__
from address_resolver import main as cli

from conftest import FakeGeocoder


@pytest.fixture
def fake_service(monkeypatch, rustaveli_response):
    geocoder = FakeGeocoder(default=rustaveli_response)
    monkeypatch.setattr(cli, "GeocodingService", lambda api_key=None: geocoder)
    return geocoder


class TestMain:
    def test_missing_api_key(self, monkeypatch, capsys):
        monkeypatch.setattr(cli, "API_KEY", "")
        with pytest.raises(SystemExit) as exc:
            cli.main(["reverse", "41.7", "44.8"])
        assert exc.value.code == 1
        assert "API key" in capsys.readouterr().out

    def test_validate_exit_code(self, fake_service, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main([
                "--api-key", "k", "validate",
                "--country", "Georgia", "--city", "Tbilisi",
                "--street", "Rustaveli", "--number", "12", "--lang", "en",
            ])
        assert exc.value.code == 0
        assert "[OK]" in capsys.readouterr().out

    def test_validate_missing_fields(self, fake_service, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--api-key", "k", "validate", "--country", "Georgia", "--lang", "en"])
        assert exc.value.code == 2
        assert "BAD_REQUEST" in capsys.readouterr().out
        assert fake_service.calls == []

    def test_reverse_prints_address(self, fake_service, capsys):
        cli.main(["--api-key", "k", "reverse", "41.7", "44.8", "--lang", "en"])
        out = capsys.readouterr().out
        assert "Rustaveli Avenue" in out
        assert "Tbilisi" in out


class TestModuleEntryPoint:
    def test_python_m_runs_cli(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["address_resolver", "--version"])
        with pytest.raises(SystemExit) as exc:
            runpy.run_module("address_resolver", run_name="__main__")
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_python_m_dispatches_subcommands(self, monkeypatch, fake_service, capsys):
        monkeypatch.setattr("sys.argv", ["address_resolver", "--api-key", "k", "reverse", "41.7", "44.8", "--lang", "en"])
        runpy.run_module("address_resolver", run_name="__main__")
        assert "Rustaveli Avenue" in capsys.readouterr().out
