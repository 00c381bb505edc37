"""
Tests for the Slack status adapter.
"""
from unittest.mock import Mock, patch

import pytest
import requests

from nowplaying_sync.config import Config
from nowplaying_sync.slack import SlackError, SlackSink, build_profile_body, set_status

CFG = Config(LASTFM_API_KEY="key", LASTFM_USERNAME="someone", SLACK_USER_TOKEN="xoxp-token")


def response(payload=None, status=200):
    r = Mock(status_code=status, text="")
    r.json.return_value = payload
    return r


def test_profile_body_never_expires():
    assert build_profile_body("Song A - Band X", ":musical_note:") == {
        "profile": {
            "status_text": "Song A - Band X",
            "status_emoji": ":musical_note:",
            "status_expiration": 0,
        }
    }


@patch("nowplaying_sync.slack.requests.post")
def test_set_status_request(mock_post):
    mock_post.return_value = response({"ok": True})

    set_status("https://slack.example/api/", "xoxp-token", "Song A - Band X", ":headphones:", timeout=7)

    args, kwargs = mock_post.call_args
    assert args[0] == "https://slack.example/api/users.profile.set"
    assert kwargs["headers"]["Authorization"] == "Bearer xoxp-token"
    assert kwargs["json"]["profile"]["status_text"] == "Song A - Band X"
    assert kwargs["json"]["profile"]["status_emoji"] == ":headphones:"
    assert kwargs["timeout"] == 7


@patch("nowplaying_sync.slack.requests.post")
def test_set_status_not_ok(mock_post):
    mock_post.return_value = response({"ok": False, "error": "invalid_auth"})

    with pytest.raises(SlackError) as exc:
        set_status("https://slack.example/api", "t", "x", "")
    assert "invalid_auth" in str(exc.value)


@patch("nowplaying_sync.slack.requests.post")
def test_set_status_http_error(mock_post):
    mock_post.return_value = response(status=500)

    with pytest.raises(SlackError) as exc:
        set_status("https://slack.example/api", "t", "x", "")
    assert exc.value.status_code == 500


@patch("nowplaying_sync.slack.requests.post")
def test_write_success(mock_post):
    mock_post.return_value = response({"ok": True})

    assert SlackSink(CFG).write("Song A - Band X", ":musical_note:") is True


@patch("nowplaying_sync.slack.requests.post")
def test_write_api_failure_is_soft(mock_post, capsys):
    mock_post.return_value = response({"ok": False, "error": "ratelimited"})

    assert SlackSink(CFG).write("", "") is False
    assert "ratelimited" in capsys.readouterr().err


@patch("nowplaying_sync.slack.requests.post")
def test_write_transport_failure_is_soft(mock_post):
    mock_post.side_effect = requests.ConnectionError("boom")

    assert SlackSink(CFG).write("", "") is False


@patch("nowplaying_sync.slack.requests.post")
def test_set_status_invalid_json(mock_post):
    r = Mock(status_code=200, text="<html>" + "x" * 5000)
    r.json.side_effect = ValueError("Expecting value")
    mock_post.return_value = r

    with pytest.raises(SlackError) as exc:
        set_status("https://slack.example/api", "t", "x", "")
    assert "invalid json" in str(exc.value)
    assert len(exc.value.body) == 2000
