"""Ponto de entrada da CLI de telemetria.

Este módulo faz o parsing de argumentos, configura o logging (console e,
opcionalmente, um ficheiro JSONL de debug) e despacha o sub-comando para as
operações de ``system`` e ``exporter``. A lógica fica nesses pacotes para
facilitar testes e reutilização pela extensão.
"""

import json as _json
import logging as _logging
import sys

from .core.args import get_log_config, parse_args
from .exporter.uploader import send_backup, send_payload
from .system.log_helpers import log_file_path
from .system.logs import open_existing_log, open_new_log
from .system.vcs import is_private_repo, last_fetch


def main(argv: list[str] | None = None) -> int:
    """Executa a CLI e retorna o código de saída.

    Args:
        argv: Lista de argumentos (usada em testes). Quando ``None`` a função
            utiliza os argumentos de linha de comando do processo.

    """
    args = parse_args(argv)
    log_conf = get_log_config(args)

    level = getattr(_logging, log_conf.get("level", "WARNING"), _logging.WARNING)
    _logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if log_conf.get("debug_log"):
        try:
            _setup_debug_file_handler(log_conf["debug_log"])
        except OSError as exc:
            _logging.getLogger(__name__).warning("falha ao configurar debug file handler: %s", exc)

    # erros locais de I/O (diretório ausente, nenhum log para continuar) viram código 1
    try:
        return _dispatch(args)
    except OSError as exc:
        _logging.getLogger(__name__).error("%s falhou: %s", args.command, exc)
        return 1


def _dispatch(args) -> int:
    cmd = args.command
    if cmd == "new-log":
        with open_new_log(args.log_dir, args.uuid) as log:
            print(f"{log.path} {log.log_number}")
        return 0
    if cmd == "reload":
        with open_existing_log(args.log_dir, args.elapsed) as log:
            print(f"{log.path} {log.log_number} {log.line_count}")
        return 0
    if cmd == "send":
        ok = send_payload(log_file_path(args.log_dir, args.number), args.uuid, args.number)
        return 0 if ok else 1
    if cmd == "backup":
        failed = send_backup(args.start, args.log_dir, args.uuid)
        print(failed)
        return 0 if failed == 0 else 1
    if cmd == "visibility":
        print("private" if is_private_repo(args.workspace) else "public")
        return 0
    if cmd == "last-fetch":
        ts = last_fetch(args.workspace)
        print("never" if ts is None else ts)
        return 0
    raise ValueError(f"comando desconhecido: {cmd}")


def _setup_debug_file_handler(path: str) -> None:
    """Instala um handler JSONL (uma linha de JSON por evento) no logger root.

    O handler é "best-effort": falhas no ``emit`` seguem para
    ``handleError`` e nunca chegam à CLI. Evita duplicar o
    handler quando já existe um para o mesmo caminho.
    """
    jfh = _logging.FileHandler(path, encoding="utf-8")
    jfh.setLevel(_logging.DEBUG)
    jfh.setFormatter(_get_json_formatter())

    root = _logging.getLogger()
    if _has_existing_file_handler(root, jfh):
        jfh.close()
        return
    _wrap_emit_safe(jfh)
    root.addHandler(jfh)


def _get_json_formatter():
    class _JSONFormatter(_logging.Formatter):
        def format(self, record):
            obj = {
                "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
                "level": record.levelname,
                "name": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info:
                obj["exc"] = self.formatException(record.exc_info)
            return _json.dumps(obj, ensure_ascii=False)

    return _JSONFormatter()


def _has_existing_file_handler(root, handler):
    base = getattr(handler, "baseFilename", None)
    return any(isinstance(h, _logging.FileHandler) and h.baseFilename == base for h in root.handlers)


def _wrap_emit_safe(handler):
    import types as _types

    orig = handler.emit

    def _emit_safe(self, record):
        try:
            return orig(record)
        except Exception:
            self.handleError(record)

    handler.emit = _types.MethodType(_emit_safe, handler)  # type: ignore[assignment]


if __name__ == "__main__":
    sys.exit(main())
