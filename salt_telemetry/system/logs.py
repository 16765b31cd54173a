"""Ciclo de vida dos ficheiros de log da telemetria.

Cada sessão de estudo escreve registros JSON (um por linha) em
``<log_dir>/log<N>.json``. O número ``N`` vem exclusivamente da contagem de
ficheiros ``.json`` existentes no diretório: ``open_new_log`` conta e
incrementa, ``open_existing_log`` conta e reutiliza o último.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from .log_helpers import (
    append_locked,
    count_lines,
    count_log_files,
    dumps_record,
    log_file_path,
    write_json,
)

logger = logging.getLogger(__name__)


class LogNotFoundError(FileNotFoundError):
    """Nenhum log atual para continuar; ``open_new_log`` deve vir primeiro."""


# ========================
# 1. Handle de log aberto
# ========================


@dataclass
# Resultado de open_new_log/open_existing_log; consumido pela extensão e pelo uploader
class OpenLog:
    """Log aberto para escrita em modo append.

    Desempacota como a tupla ``(path, log_number, line_count, stream)``.
    """

    path: Path
    log_number: int
    line_count: int
    stream: TextIO = field(repr=False)

    def __iter__(self):
        return iter((self.path, self.log_number, self.line_count, self.stream))

    def write_record(self, record: dict) -> None:
        """Anexa ``record`` como uma linha JSON e atualiza ``line_count``."""
        append_locked(self.stream, dumps_record(record))
        self.line_count += 1

    def close(self) -> None:
        if not self.stream.closed:
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def _open_stream(path: Path) -> TextIO:
    return path.open("a", encoding="utf-8")


# ========================
# 2. Criação e continuação
# ========================


def open_new_log(log_dir: str | Path, uuid: str) -> OpenLog:
    """Cria o próximo ficheiro de log e grava o registro de metadados.

    Args:
        log_dir: diretório (já existente) dos logs.
        uuid: identificador do participante.

    Returns:
        ``OpenLog`` com ``line_count == 0`` e stream em modo append.

    Erros de I/O (diretório ausente, permissão) propagam.
    """
    log_count = count_log_files(log_dir) + 1
    log_path = log_file_path(log_dir, log_count)

    write_json(log_path, {"logCount": log_count, "uuid": uuid})
    logger.info("Novo log criado: %s", log_path)

    return OpenLog(log_path, log_count, 0, _open_stream(log_path))


def open_existing_log(log_dir: str | Path, time_since_start: float) -> OpenLog:
    """Continua o log atual registrando um evento de reload.

    Args:
        log_dir: diretório dos logs.
        time_since_start: tempo decorrido desde o início do estudo.

    Returns:
        ``OpenLog`` com a contagem de linhas lida do ficheiro após o append.

    Raises:
        LogNotFoundError: quando não há log para continuar.
    """
    log_count = count_log_files(log_dir)
    if log_count == 0:
        raise LogNotFoundError(f"no log exists in {log_dir}; call open_new_log first")

    log_path = log_file_path(log_dir, log_count)
    if not log_path.exists():
        # contagem aponta para um número que não existe (diretório com lacunas)
        raise LogNotFoundError(f"no log exists at {log_path}")

    write_json(log_path, {"extensionReload": {"timeSinceStart": time_since_start}})
    line_count = count_lines(log_path)
    logger.debug("Log %s retomado com %d linhas", log_path, line_count)

    return OpenLog(log_path, log_count, line_count, _open_stream(log_path))
