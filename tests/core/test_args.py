import pytest

from salt_telemetry.core.args import get_log_config, parse_args


def test_parse_backup_defaults(monkeypatch):
    monkeypatch.delenv("SALT_TELEMETRY_LOG_LEVEL", raising=False)
    ns = parse_args(["backup", "logs", "u"])
    assert ns.command == "backup"
    assert ns.start == 1
    assert ns.log_level is None


def test_parse_send_and_reload():
    ns = parse_args(["send", "logs", "u", "3"])
    assert (ns.log_dir, ns.uuid, ns.number) == ("logs", "u", 3)
    ns = parse_args(["reload", "logs", "12.5"])
    assert ns.elapsed == 12.5


def test_visibility_defaults_to_cwd():
    assert parse_args(["visibility"]).workspace == "."
    assert parse_args(["last-fetch", "/repo"]).workspace == "/repo"


def test_invalid_values_rejected():
    with pytest.raises(ValueError):
        parse_args(["backup", "logs", "u", "--start", "0"])
    with pytest.raises(ValueError):
        parse_args(["reload", "logs", "-1"])


def test_command_required():
    with pytest.raises(SystemExit):
        parse_args([])


def test_log_level_env_fallback(monkeypatch):
    """Sem --log-level a variável de ambiente é usada; a CLI tem precedência."""
    monkeypatch.setenv("SALT_TELEMETRY_LOG_LEVEL", "debug")
    assert get_log_config(parse_args(["visibility"]))["level"] == "DEBUG"
    assert get_log_config(parse_args(["--log-level", "error", "visibility"]))["level"] == "ERROR"


def test_log_level_from_verbosity(monkeypatch):
    monkeypatch.delenv("SALT_TELEMETRY_LOG_LEVEL", raising=False)
    assert get_log_config(parse_args(["visibility"]))["level"] == "WARNING"
    assert get_log_config(parse_args(["-v", "visibility"]))["level"] == "INFO"
    assert get_log_config(parse_args(["-vv", "visibility"]))["level"] == "DEBUG"
