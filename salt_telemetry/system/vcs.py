"""Consultas ao estado git do workspace.

- is_private_repo: classifica o repositório como privado/público a partir
  do primeiro remote e da API do GitHub; qualquer falha conta como privado.
- last_fetch: instante (epoch em segundos) do último fetch, lido do mtime
  de ``.git/FETCH_HEAD``.

Limitação conhecida: owner/repo são os segmentos 3 e 4 de
``url.split("/")``, o formato ``https://host/owner/repo(.git)``. URLs SSH
(``git@host:owner/repo``) não se encaixam e resultam em "privado".
"""

from __future__ import annotations

import logging
import math
import subprocess
from pathlib import Path

import requests  # type: ignore[import-untyped]

from ..config.settings import get_settings

logger = logging.getLogger(__name__)

FETCH_HEAD = Path(".git") / "FETCH_HEAD"


# ========================
# 1. Remotes
# ========================


def _parse_remote_lines(output: str) -> list[tuple[str, str]]:
    """Parseie a saída de ``git remote -v`` em pares (nome, url de fetch).

    Mantém a ordem de listagem e um único par por remote.
    """
    remotes: list[tuple[str, str]] = []
    seen = set()
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 3 or parts[2] != "(fetch)":
            continue
        name, url = parts[0], parts[1]
        if name in seen:
            continue
        seen.add(name)
        remotes.append((name, url))
    return remotes


def list_remotes(workspace_path: str | Path, timeout: float | None = None) -> list[tuple[str, str]]:
    """Lista os remotes git do workspace como pares (nome, url de fetch).

    Executa ``git remote -v`` sem shell. Bytes fora de UTF-8 na saída viram
    U+FFFD. Erros do git (binário ausente, diretório fora de um
    repositório, timeout) propagam.
    """
    if timeout is None:
        timeout = get_settings()["git_timeout"]
    proc = subprocess.run(
        ["git", "remote", "-v"],
        cwd=str(workspace_path),
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        check=True,
    )
    return _parse_remote_lines(proc.stdout or "")


def parse_owner_repo(url: str) -> tuple[str, str]:
    """Extrai (owner, repo) de uma URL ``https://host/owner/repo[.git]``.

    Levanta ``ValueError`` quando a URL não tem o formato esperado.
    """
    parts = url.split("/")
    if len(parts) < 5 or not parts[3] or not parts[4]:
        raise ValueError(f"URL de remote sem owner/repo: {url!r}")
    owner = parts[3]
    repo = parts[4].replace(".git", "", 1)
    if not repo:
        raise ValueError(f"URL de remote sem owner/repo: {url!r}")
    return owner, repo


# ========================
# 2. Visibilidade do repositório
# ========================


def _fetch_private_flag(owner: str, repo: str, settings: dict) -> bool:
    url = f"{settings['github_api']}/repos/{owner}/{repo}"
    resp = requests.get(
        url,
        headers={"Accept": "application/vnd.github+json"},
        timeout=settings["github_timeout"],
    )
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict) or "private" not in data:
        raise ValueError(f"resposta sem campo 'private' para {owner}/{repo}")
    return bool(data["private"])


def is_private_repo(workspace_path: str | Path, settings: dict | None = None) -> bool:
    """Return True se o workspace não puder ser confirmado como repo público.

    Sem remotes, URL fora do formato, erro do git ou da API: privado.
    Nunca levanta exceção.
    """
    settings = get_settings(settings)
    try:
        remotes = list_remotes(workspace_path, timeout=settings["git_timeout"])
    except (OSError, ValueError, subprocess.SubprocessError) as exc:
        logger.info("is_private_repo: git remote falhou em %s: %s", workspace_path, exc)
        logger.info("isPrivate: %s", True)
        return True

    if not remotes:
        logger.info("is_private_repo: nenhum remote em %s", workspace_path)
        return True

    _name, url = remotes[0]
    try:
        owner, repo = parse_owner_repo(url)
        private = _fetch_private_flag(owner, repo, settings)
    except (requests.RequestException, ValueError) as exc:
        logger.info("is_private_repo: verificação falhou para %s: %s", url, exc)
        private = True
    except Exception as exc:
        logger.warning("is_private_repo: erro inesperado para %s: %s", url, exc, exc_info=True)
        private = True

    logger.info("isPrivate: %s", private)
    return private


# ========================
# 3. Último fetch
# ========================


def last_fetch(workspace_path: str | Path) -> int | None:
    """Epoch (segundos inteiros) do último ``git fetch``, ou None."""
    try:
        st = (Path(workspace_path) / FETCH_HEAD).stat()
    except OSError:
        return None
    return int(math.floor(st.st_mtime))
