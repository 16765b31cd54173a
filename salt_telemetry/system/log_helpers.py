"""Helpers de baixo nível para os ficheiros de log da telemetria.

Fornece escrita JSONL com lock e fsync, enumeração dos ficheiros de log
reconhecidos (extensão ``.json``), construção de caminhos e contagem de
linhas.
"""

from pathlib import Path
import os
import logging
import json as _json

import portalocker

from ..config.settings import LOG_EXTENSION, LOG_FILE_PATTERN, get_settings

logger = logging.getLogger(__name__)


# -----------------------
# Escrita segura
# -----------------------
def append_locked(fh, text: str, durable: bool | None = None) -> None:
    """Anexe ``text`` a um handle já aberto em modo append.

    Aplica lock exclusivo via `portalocker` durante a escrita e faz fsync
    quando ``durable`` estiver ativo; com ``None`` vale a setting
    ``durable_writes``, lida a cada chamada. Falhas de lock
    e de fsync são registradas em debug; falhas de escrita propagam.
    """
    if durable is None:
        durable = bool(get_settings()["durable_writes"])
    locked = False
    try:
        try:
            portalocker.lock(fh, portalocker.LOCK_EX)
            locked = True
        except portalocker.exceptions.LockException as exc:
            logger.debug("append_locked: portalocker.lock falhou em %s: %s", getattr(fh, "name", fh), exc)

        fh.write(text)
        fh.flush()

        if durable:
            try:
                os.fsync(fh.fileno())
            except OSError as exc:
                logger.debug("append_locked: fsync falhou em %s: %s", getattr(fh, "name", fh), exc)
    finally:
        if locked:
            try:
                portalocker.unlock(fh)
            except portalocker.exceptions.LockException as exc:
                logger.debug("append_locked: portalocker.unlock falhou: %s", exc)


def write_text(path: Path, text: str) -> None:
    """Anexe texto a `path`, criando o ficheiro se necessário.

    O diretório pai precisa existir: um diretório de logs ausente é erro do
    chamador e o ``OSError`` é registrado e relançado.
    """
    try:
        with Path(path).open("a", encoding="utf-8") as fh:
            append_locked(fh, text)
    except OSError as exc:
        logger.error("write_text: falhou em %s: %s", path, exc, exc_info=True)
        raise


def dumps_record(obj: dict) -> str:
    """Serialize ``obj`` como uma linha JSON compacta terminada em newline."""
    return _json.dumps(obj, ensure_ascii=False, separators=(",", ":")) + "\n"


def write_json(path: Path, obj: dict) -> None:
    """Serialize um objeto como JSONL e anexe ao ficheiro `path`."""
    write_text(path, dumps_record(obj))


# -----------------------
# Enumeração e caminhos
# -----------------------
def is_log_name(name: str) -> bool:
    """True quando ``name`` tem exatamente a extensão de log reconhecida."""
    return Path(name).suffix == LOG_EXTENSION


def list_log_files(log_dir: Path | str) -> list[Path]:
    """Lista as entradas de ``log_dir`` reconhecidas como logs.

    Não interpreta números nos nomes; a ordem é a de ``sorted``. Um
    diretório inexistente levanta ``FileNotFoundError``.
    """
    d = Path(log_dir)
    return sorted(d / name for name in os.listdir(d) if is_log_name(name))


def count_log_files(log_dir: Path | str) -> int:
    """Número de ficheiros de log reconhecidos em ``log_dir``."""
    return len(list_log_files(log_dir))


def log_file_path(log_dir: Path | str, log_number: int) -> Path:
    """Caminho determinístico do log ``log_number`` (``log<N>.json``)."""
    return Path(log_dir) / LOG_FILE_PATTERN.format(int(log_number))


def count_lines(path: Path) -> int:
    """Conta linhas como separadores de newline + 1.

    Um ficheiro terminado em newline conta também o segmento vazio final,
    que é o valor que a extensão espera para o próximo índice de linha.
    """
    text = Path(path).read_text(encoding="utf-8")
    return len(text.split("\n"))
