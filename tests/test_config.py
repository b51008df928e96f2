"""
Tests for HOC_* settings and their effect on contracted functions
"""

import pytest

from hoc import ConfigurationError, arrow, wrap
from hoc.cli import main
from hoc.core import config
from hoc.predicates import integer_c

ADD_CONTRACT = arrow(integer_c, integer_c, integer_c)
HOC_VARIABLES = ("HOC_RECORD_HISTORY", "HOC_HISTORY_LIMIT", "HOC_LOG_LEVEL", "HOC_HOST", "HOC_PORT")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in HOC_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


def test_defaults():
    settings = config.get_settings()
    assert settings.record_history is False
    assert settings.history_limit == config.DEFAULT_HISTORY_LIMIT
    assert settings.log_level == "WARNING"
    assert settings.port == config.DEFAULT_PORT


def test_record_history_from_env(monkeypatch):
    """HOC_RECORD_HISTORY=1 turns history on for newly wrapped functions"""
    monkeypatch.setenv("HOC_RECORD_HISTORY", "1")
    config.reset_settings()

    add = wrap(lambda x, y: x + y, ADD_CONTRACT)
    add(1, 2)
    assert len(add.history()) == 1


def test_history_limit_from_env_bounds_history(monkeypatch):
    """HOC_HISTORY_LIMIT keeps only the most recent applications"""
    monkeypatch.setenv("HOC_RECORD_HISTORY", "yes")
    monkeypatch.setenv("HOC_HISTORY_LIMIT", "2")
    config.reset_settings()

    add = wrap(lambda x, y: x + y, ADD_CONTRACT)
    for n in range(5):
        add(n, n)

    assert add.call_history.maxlen == 2
    assert [record.state.value for record in add.history()] == ["done", "done"]


def test_explicit_arguments_override_settings(monkeypatch):
    monkeypatch.setenv("HOC_RECORD_HISTORY", "1")
    config.reset_settings()

    add = wrap(lambda x, y: x + y, ADD_CONTRACT, record_history=False)
    add(1, 2)
    assert add.history() == []


def test_configure_overrides_selected_settings():
    """configure() replaces only the named settings"""
    settings = config.configure(record_history=True, history_limit=3)
    assert settings is config.get_settings()
    assert settings.record_history is True
    assert settings.port == config.DEFAULT_PORT

    add = wrap(lambda x, y: x + y, ADD_CONTRACT)
    add(1, 1)
    assert add.call_history.maxlen == 3
    assert len(add.history()) == 1


def test_invalid_integer_names_the_variable(monkeypatch):
    """A malformed integer raises ConfigurationError, not a bare ValueError"""
    monkeypatch.setenv("HOC_HISTORY_LIMIT", "lots")
    config.reset_settings()

    with pytest.raises(ConfigurationError, match="HOC_HISTORY_LIMIT must be an integer"):
        wrap(lambda x, y: x + y, ADD_CONTRACT)


def test_negative_port_is_rejected(monkeypatch):
    monkeypatch.setenv("HOC_PORT", "-1")
    config.reset_settings()

    with pytest.raises(ConfigurationError, match="HOC_PORT must not be negative"):
        config.get_settings()


def test_empty_integer_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("HOC_PORT", "")
    config.reset_settings()
    assert config.get_settings().port == config.DEFAULT_PORT


def test_cli_reports_bad_settings(monkeypatch, capsys):
    """The command line turns a bad setting into exit status 2"""
    monkeypatch.setenv("HOC_HISTORY_LIMIT", "lots")
    config.reset_settings()

    assert main(["describe", "integer?"]) == 2
    assert "HOC_HISTORY_LIMIT" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
