from nowplaying_sync import log


def test_debug_hidden_by_default(monkeypatch, capsys):
    monkeypatch.delenv("NOWPLAYING_DEBUG", raising=False)

    log.debug("tick details")

    assert capsys.readouterr().out == ""


def test_debug_follows_environment_set_after_import(monkeypatch, capsys):
    monkeypatch.setenv("NOWPLAYING_DEBUG", "1")

    log.debug("tick details")

    out = capsys.readouterr().out
    assert "DEBUG tick details" in out


def test_warn_and_error_go_to_stderr(capsys):
    log.warn("careful")
    log.error("broken")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "WARN  careful" in captured.err
    assert "ERROR broken" in captured.err
