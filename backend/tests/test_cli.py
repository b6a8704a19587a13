from __future__ import annotations

import io
import json

from backend.app import cli
from web_scraping.scrape.scrape import ScrapeOrchestrator


def _fake_orchestrator(settings, cache):
    return ScrapeOrchestrator(cache=None, fetch=lambda url: "<title>CLI Item</title>")


def test_cli_prints_records(monkeypatch, capsys):
    monkeypatch.setattr(cli, "build_orchestrator", _fake_orchestrator)
    code = cli.main(["--no-cache", "grab https://shop.test/p/1 please"])
    assert code == 0

    out = json.loads(capsys.readouterr().out)
    assert out[0]["url"] == "https://shop.test/p/1"
    assert out[0]["title"] == "CLI Item"
    assert out[0]["price"] == "Check Site"


def test_cli_reads_stdin_and_rejects_empty(monkeypatch, capsys):
    monkeypatch.setattr(cli, "build_orchestrator", _fake_orchestrator)
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert cli.main(["--no-cache"]) == 2
    assert "Invalid input." in capsys.readouterr().err
