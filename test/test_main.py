from unittest.mock import MagicMock

import pytest

import main
from depgitrepo.maven_utils import ScmNotFound
from depgitrepo.resolver import Resolution

PATH = "/c/files-2.1/com.fasterxml/classmate/1.7.0/abc/classmate-1.7.0.jar!/com/fasterxml/classmate/A.class"


@pytest.fixture
def patched(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda: None)
    client = MagicMock()
    monkeypatch.setattr(main, "HttpClient", lambda: client)
    calls = []

    def install(outcome):
        def fake_resolve(path, http_client):
            calls.append(path)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        monkeypatch.setattr(main, "resolve", fake_resolve)
        return calls, client

    return install


def test_prints_verified_url(patched, capsys):
    calls, client = patched(Resolution("https://github.com/o/r/blob/v1/A.java", True, "github-api"))
    assert main.main([PATH]) == 0
    out, err = capsys.readouterr()
    assert out.strip() == "https://github.com/o/r/blob/v1/A.java"
    assert err == ""
    assert calls == [PATH]
    client.close.assert_called_once()


def test_unverified_url_prints_warning(patched, capsys):
    patched(Resolution("https://github.com/o/r/blob/v1/A.java", False, "guess"))
    assert main.main([PATH]) == 0
    out, err = capsys.readouterr()
    assert out.strip() == "https://github.com/o/r/blob/v1/A.java"
    assert "best guess" in err


def test_resolution_error_exits_non_zero(patched, capsys):
    _, client = patched(ScmNotFound("Cannot obtain SCM info from POM for a:b:1"))
    assert main.main([PATH]) == 1
    out, err = capsys.readouterr()
    assert out == ""
    assert "Cannot obtain SCM info" in err
    client.close.assert_called_once()


def test_falls_back_to_example_environment_variable(patched, monkeypatch, capsys):
    calls, _ = patched(Resolution("https://x/y", True, "web-probe"))
    monkeypatch.setenv("EXAMPLE", PATH)
    assert main.main([]) == 0
    assert calls == [PATH]


def test_falls_back_to_builtin_example(patched, monkeypatch):
    calls, _ = patched(Resolution("https://x/y", True, "web-probe"))
    monkeypatch.delenv("EXAMPLE", raising=False)
    main.main([])
    assert calls == [main.DEFAULT_EXAMPLE]
