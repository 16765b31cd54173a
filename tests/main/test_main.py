import json
import logging

from salt_telemetry import main as main_mod


def test_new_log_and_reload(log_dir, capsys):
    assert main_mod.main(["new-log", str(log_dir), "u-1"]) == 0
    out = capsys.readouterr().out.split()
    assert out == [str(log_dir / "log1.json"), "1"]

    assert main_mod.main(["reload", str(log_dir), "5"]) == 0
    path, number, lines = capsys.readouterr().out.split()
    assert (path, number, lines) == (str(log_dir / "log1.json"), "1", "3")


def test_send_exit_status(log_dir, monkeypatch):
    sent = []

    def fake_send(log_path, uuid, number):
        sent.append((log_path.name, uuid, number))
        return number == 1

    monkeypatch.setattr(main_mod, "send_payload", fake_send)
    assert main_mod.main(["send", str(log_dir), "u", "1"]) == 0
    assert main_mod.main(["send", str(log_dir), "u", "2"]) == 1
    assert sent == [("log1.json", "u", 1), ("log2.json", "u", 2)]


def test_backup_prints_failed_number(log_dir, monkeypatch, capsys):
    monkeypatch.setattr(main_mod, "send_backup", lambda start, d, u: 4 if start == 2 else 0)
    assert main_mod.main(["backup", str(log_dir), "u", "--start", "2"]) == 1
    assert capsys.readouterr().out.strip() == "4"
    assert main_mod.main(["backup", str(log_dir), "u"]) == 0
    assert capsys.readouterr().out.strip() == "0"


def test_visibility_and_last_fetch(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(main_mod, "is_private_repo", lambda ws: False)
    assert main_mod.main(["visibility", str(tmp_path)]) == 0
    assert capsys.readouterr().out.strip() == "public"

    assert main_mod.main(["last-fetch", str(tmp_path)]) == 0
    assert capsys.readouterr().out.strip() == "never"


def test_debug_log_writes_jsonl(tmp_path, monkeypatch):
    """--debug-log instala um handler JSONL no logger root, sem duplicar."""
    root = logging.getLogger()
    before = list(root.handlers)
    debug_path = tmp_path / "debug.jsonl"
    try:
        main_mod._setup_debug_file_handler(str(debug_path))
        main_mod._setup_debug_file_handler(str(debug_path))
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1

        logging.getLogger("salt_telemetry.test").warning("evento %s", 1)
        added[0].flush()
        entry = json.loads(debug_path.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["level"] == "WARNING"
        assert entry["msg"] == "evento 1"
        assert entry["name"] == "salt_telemetry.test"
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
                h.close()


def test_reload_without_logs_exits_with_error(log_dir, capsys, caplog):
    """reload num diretório vazio: código 1, erro registrado, sem log0.json."""
    assert main_mod.main(["reload", str(log_dir), "5"]) == 1
    assert capsys.readouterr().out == ""
    assert any(r.levelno == logging.ERROR and "no log exists" in r.getMessage() for r in caplog.records)
    assert list(log_dir.iterdir()) == []


def test_new_log_missing_dir_exits_with_error(tmp_path):
    assert main_mod.main(["new-log", str(tmp_path / "missing"), "u"]) == 1
