"""Envio dos logs de telemetria ao endpoint de coleta via HTTP.

Funções principais:
- send_payload: comprime (zlib/deflate), codifica em base64 e envia um log
  com um único PUT; devolve True/False e nunca levanta exceção.
- send_backup: reenvia em sequência os logs ``start_on..N`` e devolve o
  número do primeiro que falhou (0 = todos enviados).

O endpoint, o nome da tabela e o timeout vêm de ``UploadConfig``, montado a
partir das settings quando não informado.
"""

import base64
import logging
import zlib
from dataclasses import dataclass
from pathlib import Path

import requests  # type: ignore[import-untyped]

from ..config.settings import get_settings
from ..system.log_helpers import count_log_files, log_file_path

logger = logging.getLogger(__name__)


# ========================
# 1. Compressão e payload
# ========================


def compress_data(data: str) -> str:
    """Comprime texto com zlib (deflate) e retorna o resultado em base64."""
    return base64.b64encode(zlib.compress(data.encode("utf-8"))).decode("ascii")


def decompress_data(encoded: str) -> str:
    """Inverso de ``compress_data``."""
    return zlib.decompress(base64.b64decode(encoded)).decode("utf-8")


def build_payload(table: str, uuid: str, log_num: int, data: str) -> dict:
    """Monta o corpo JSON aceito pelo endpoint de coleta."""
    return {"table": table, "uuid": uuid, "logNum": log_num, "data": data}


# ========================
# 2. Uploader
# ========================


@dataclass(frozen=True)
class UploadConfig:
    endpoint: str
    table: str
    timeout: float

    @classmethod
    def from_settings(cls, settings: dict | None = None) -> "UploadConfig":
        s = get_settings(settings)
        return cls(endpoint=s["endpoint"], table=s["table"], timeout=s["upload_timeout"])


class LogUploader:
    """Envia ficheiros de log ao endpoint configurado.

    Parâmetros:
        config: destino e timeout; default a partir das settings.
        session: objeto com método ``put`` compatível com ``requests``
            (default: o próprio módulo ``requests``).
    """

    def __init__(self, config: UploadConfig | None = None, session=None):
        self.config = config or UploadConfig.from_settings()
        self.session = session if session is not None else requests

    def send_payload(self, log_path: str | Path, uuid: str, log_count: int) -> bool:
        """Envia o conteúdo atual de ``log_path``.

        Returns:
            True quando o endpoint responde 2xx; False em qualquer falha
            (leitura, compressão, rede, status HTTP), sempre registrada.
        """
        try:
            data = Path(log_path).read_text(encoding="utf-8")
            compressed = compress_data(data)
            payload = build_payload(self.config.table, uuid, log_count, compressed)
            resp = self.session.put(self.config.endpoint, json=payload, timeout=self.config.timeout)
            resp.raise_for_status()
            logger.info("Log enviado: %s", resp.text)
            return True
        except requests.RequestException as exc:
            logger.warning("Falha ao enviar log %s: %s", log_path, exc)
            return False
        except (OSError, UnicodeError, zlib.error) as exc:
            logger.warning("Falha ao preparar log %s para envio: %s", log_path, exc)
            return False
        except Exception as exc:
            logger.warning("Erro inesperado ao enviar log %s: %s", log_path, exc, exc_info=True)
            return False

    def send_backup(self, start_on: int, log_dir: str | Path, uuid: str) -> int:
        """Reenvia os logs ``start_on`` até o último, em ordem.

        Returns:
            0 se todos foram enviados; caso contrário o número do primeiro
            log que falhou, para retomar a partir dele.
        """
        total = count_log_files(log_dir)
        for i in range(start_on, total + 1):
            if not self.send_payload(log_file_path(log_dir, i), uuid, i):
                logger.warning("send_backup: parou no log %d de %d", i, total)
                return i
        logger.info("send_backup: logs %d..%d enviados", start_on, total)
        return 0


# ========================
# 3. Atalhos com configuração padrão
# ========================


def send_payload(log_path: str | Path, uuid: str, log_count: int, config: UploadConfig | None = None) -> bool:
    """Envia um log usando ``LogUploader`` com a configuração padrão."""
    return LogUploader(config).send_payload(log_path, uuid, log_count)


def send_backup(start_on: int, log_dir: str | Path, uuid: str, config: UploadConfig | None = None) -> int:
    """Executa ``LogUploader.send_backup`` com a configuração padrão."""
    return LogUploader(config).send_backup(start_on, log_dir, uuid)
