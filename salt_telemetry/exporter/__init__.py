"""Pacote exporter: envio dos logs ao endpoint remoto de coleta.

Oferece re-exports para importações como
``from salt_telemetry.exporter import send_backup``.
"""

from .uploader import LogUploader, UploadConfig, send_backup, send_payload

__all__ = ["LogUploader", "UploadConfig", "send_backup", "send_payload"]
