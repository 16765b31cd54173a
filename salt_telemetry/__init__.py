"""Pacote salt_telemetry: logs locais e envio da telemetria do estudo SALT.

Re-exports das operações públicas para ``from salt_telemetry import ...``.
"""

from .system.logs import open_new_log, open_existing_log
from .system.vcs import is_private_repo, last_fetch
from .exporter.uploader import send_payload, send_backup

__all__ = [
    "open_new_log",
    "open_existing_log",
    "send_payload",
    "send_backup",
    "is_private_repo",
    "last_fetch",
]
