import sentry_sdk

from standings.core import sentry as sentry_mod


DSN_ENVS = ("SENTRY_DSN", "STANDINGS_SENTRY_DSN")


def _clear_env(monkeypatch):
    for name in DSN_ENVS + (
        "SENTRY_ENV",
        "SENTRY_ENVIRONMENT",
        "ENV",
        "SENTRY_TRACES_SAMPLE_RATE",
        "SENTRY_PROFILES_SAMPLE_RATE",
        "SENTRY_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


def test_parse_float_env_defaults_and_clamps(monkeypatch):
    monkeypatch.delenv("SENTRY_TRACES_SAMPLE_RATE", raising=False)
    assert sentry_mod._parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.25) == 0.25

    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "")
    assert sentry_mod._parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.25) == 0.25

    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "nope")
    assert sentry_mod._parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.25) == 0.25

    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "-1")
    assert sentry_mod._parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.25) == 0.0

    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "7")
    assert sentry_mod._parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.25) == 1.0

    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "0.5")
    assert sentry_mod._parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.25) == 0.5


def test_init_without_dsn_is_disabled(monkeypatch):
    _clear_env(monkeypatch)
    calls = []
    monkeypatch.setattr(sentry_sdk, "init", lambda **kw: calls.append(kw))
    assert sentry_mod.init_sentry(context="test") is False
    assert calls == []


def test_init_with_invalid_dsn_is_disabled(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("SENTRY_DSN", "not-a-url")
    calls = []
    monkeypatch.setattr(sentry_sdk, "init", lambda **kw: calls.append(kw))
    assert sentry_mod.init_sentry(context="test") is False
    assert calls == []


def test_init_with_dsn(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv(
        "STANDINGS_SENTRY_DSN", '"https://key@o0.ingest.sentry.io/1"'
    )
    monkeypatch.setenv("SENTRY_ENVIRONMENT", "staging")
    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")
    monkeypatch.setenv("SENTRY_DEBUG", "yes")

    init_calls = []
    tags = {}
    monkeypatch.setattr(sentry_sdk, "init", lambda **kw: init_calls.append(kw))
    monkeypatch.setattr(
        sentry_sdk, "set_tag", lambda key, value: tags.__setitem__(key, value)
    )

    assert sentry_mod.init_sentry(context="standings_compute", release="0.1.0")
    (kwargs,) = init_calls
    assert kwargs["dsn"] == "https://key@o0.ingest.sentry.io/1"
    assert kwargs["environment"] == "staging"
    assert kwargs["release"] == "0.1.0"
    assert kwargs["traces_sample_rate"] == 0.1
    assert kwargs["profiles_sample_rate"] == 0.0
    assert kwargs["debug"] is True
    assert len(kwargs["integrations"]) == 1
    assert tags == {"service": "standings_compute"}
