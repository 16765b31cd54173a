"""Pacote system: ficheiros de log locais e estado git do workspace.

Inclui criação/continuação de logs, escrita JSONL com lock e consultas ao
repositório (visibilidade e último fetch).
"""

from .logs import LogNotFoundError, OpenLog, open_existing_log, open_new_log
from .vcs import is_private_repo, last_fetch

__all__ = ["LogNotFoundError", "OpenLog", "open_existing_log", "open_new_log", "is_private_repo", "last_fetch"]
