"""
Test Suite for the taggg command line
"""

import pytest
from click.testing import CliRunner

from taggg.cli import cli, parse_arg
from taggg.engine import TagEngine


@pytest.fixture
def run(db_url, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    
    def invoke(*args):
        return runner.invoke(cli, ["--db-url", db_url, *args])
    
    result = invoke("init")
    assert result.exit_code == 0, result.output
    return invoke


def test_parse_arg():
    assert parse_arg("-") is None
    assert parse_arg(None) is None
    assert parse_arg("#12") == 12
    assert parse_arg("#x") == "#x"
    assert parse_arg("dc:title") == "dc:title"


def test_write_exists_erase(run):
    result = run("write", "#1", "dc:title", "Hello", "#1")
    assert result.exit_code == 0, result.output
    assert "Tag written" in result.output
    
    assert run("exists", "#1", "dc:title", "Hello", "#1").exit_code == 0
    
    assert run("erase", "#1", "dc:title", "Hello", "#1").exit_code == 0
    
    result = run("exists", "#1", "dc:title", "Hello", "#1")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_write_unknown_id(run):
    result = run("write", "#1", "dc:title", "#999999")
    
    assert result.exit_code == 2
    assert "Write failed" in result.output


def test_engine_closed_when_command_fails(run, monkeypatch):
    closed = []
    monkeypatch.setattr(TagEngine, "close", lambda self: closed.append(self))
    
    result = run("write", "#1", "dc:title", "#999999")
    
    assert result.exit_code == 2
    assert len(closed) == 1


def test_show(run):
    run("write", "uri:http://example.org/", "dc:title", "Example")
    
    result = run("show", "dc:title")
    assert result.exit_code == 0, result.output
    assert "title" in result.output
    
    assert run("show", "dc:missing").exit_code == 1


def test_fetch(run):
    run("write", "#1", "dc:title", "Alpha")
    run("write", "#1", "dc:creator", "Beta")
    
    result = run("fetch", "--filter", "class=dc", "--order", "value:desc")
    assert result.exit_code == 0, result.output
    assert result.output.index("title") < result.output.index("creator")
    
    result = run("fetch", "--filter", "colour=red")
    assert result.exit_code == 2
    
    result = run("fetch", "--filter", "nonsense")
    assert result.exit_code == 2


def test_destroy(run):
    assert run("destroy").exit_code != 0, "aborts without confirmation"
    
    result = run("destroy", "--confirm")
    assert result.exit_code == 0
    assert "dropped" in result.output
    
    assert run("exists", "#1", "x").exit_code == 2


def test_info(run):
    result = run("info")
    
    assert result.exit_code == 0
    assert "Resource table: res" in result.output
