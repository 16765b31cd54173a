"""Configurações do cliente de telemetria SALT.

Este módulo centraliza o endpoint de coleta, o nome da tabela, timeouts e
nível de logs. Carrega valores a partir de ``DEFAULT_SETTINGS`` e permite
overrides via arquivo ``.env`` ou variáveis de ambiente (prefixo
``SALT_TELEMETRY_*``). As funções públicas principais são:

- ``load_settings()`` -> dicionário com as chaves de ``DEFAULT_SETTINGS``.
- ``validate_settings()`` -> normaliza tipos e valida limites.
- ``get_settings()`` -> settings validados (usado por outros módulos).

Comentários e mensagens de log estão em português.
"""

import os
from pathlib import Path


# ========================
# Constantes e padrões globais
# ========================

ENV_PREFIX = "SALT_TELEMETRY_"

DEFAULT_ENDPOINT = "https://eszhueee2i.execute-api.us-west-1.amazonaws.com"
DEFAULT_TABLE = "SALT-fp-vs-oop"
DEFAULT_GITHUB_API = "https://api.github.com"

LOG_EXTENSION = ".json"
LOG_FILE_PATTERN = "log{}.json"

DEFAULT_SETTINGS = {
    "endpoint": DEFAULT_ENDPOINT,
    "table": DEFAULT_TABLE,
    "upload_timeout": 10.0,
    "github_api": DEFAULT_GITHUB_API,
    "github_timeout": 5.0,
    "git_timeout": 5.0,
    "log_level": "INFO",
    "durable_writes": True,
}

_FLOAT_KEYS = ("upload_timeout", "github_timeout", "git_timeout")
_URL_KEYS = ("endpoint", "github_api")
_TRUE_VALUES = ("1", "true", "yes", "on")


# ========================
# 1. Carregamento das configurações
# ========================


# Função principal do módulo; carrega todas as configurações do ambiente
def load_settings() -> dict:
    """Carrega configurações combinando DEFAULTS + .env + ambiente.

    Cada chave de ``DEFAULT_SETTINGS`` pode ser sobrescrita pela variável
    ``SALT_TELEMETRY_<CHAVE>``; as variáveis em ambiente sobrescrevem
    valores do arquivo `.env`. Os valores devolvidos ainda não foram
    validados; use ``validate_settings`` ou ``get_settings``.
    """
    import logging

    logger = logging.getLogger(__name__)

    settings = DEFAULT_SETTINGS.copy()

    project_root = Path(__file__).resolve().parents[2]
    env_path = Path(os.getenv(f"{ENV_PREFIX}ENV_FILE", project_root / ".env"))

    env_items = _merge_env_items(env_path, logger)
    _apply_overrides(env_items, settings, logger)
    return settings


# ========================
# 2. Funções auxiliares para ambiente e overrides
# ========================


# Auxilia load_settings; criado para centralizar leitura do .env
def _read_env_file(path: Path | str) -> dict:
    """Lê um arquivo `.env` e devolve um dicionário chave->valor.

    Linhas vazias e comentários (começando com '#') são ignorados.
    """
    import logging

    logger = logging.getLogger(__name__)
    result: dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return result
    try:
        with p.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, val = line.split("=", 1)
                result[key.strip()] = val.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Falha ao ler .env em %s: %s", p, exc)
        return {}
    return result


def _merge_env_items(env_path: Path, logger) -> dict:
    """Retorna um mapeamento combinado de `.env` e env vars do processo."""
    env_items = _read_env_file(env_path)
    if env_items == {} and env_path.exists():
        logger.warning("Erro ou ficheiro .env vazio em %s", env_path)
    env_items.update(os.environ)
    return env_items


def _apply_overrides(env_items: dict, settings: dict, logger) -> None:
    """Copia para ``settings`` os valores ``SALT_TELEMETRY_<CHAVE>`` conhecidos."""
    for key, raw_val in env_items.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        if name == "env_file":
            continue
        if name not in settings:
            logger.debug("Ignorando chave de configuração desconhecida: %s", key)
            continue
        settings[name] = raw_val


# ========================
# 3. Validação e normalização
# ========================


def _coerce_timeout(name: str, raw_value) -> float:
    try:
        value = float(raw_value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} deve ser numérico: {raw_value!r}") from exc
    if value <= 0.0:
        raise ValueError(f"{name} deve ser > 0: {value}")
    return value


def _coerce_url(name: str, raw_value) -> str:
    value = str(raw_value or "").strip()
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"{name} deve ser uma URL http(s): {raw_value!r}")
    return value.rstrip("/") if name == "github_api" else value


def _coerce_bool(raw_value) -> bool:
    if isinstance(raw_value, bool):
        return raw_value
    return str(raw_value).strip().lower() in _TRUE_VALUES


# Função principal de validação; normaliza e valida configurações
def validate_settings(settings: dict) -> dict:
    """Normaliza e valida o dicionário de configurações.

    Chaves ausentes recebem o valor padrão. Timeouts precisam ser números
    positivos e URLs precisam usar http(s); caso contrário ``ValueError``.
    """
    import logging

    logger = logging.getLogger(__name__)
    if not isinstance(settings, dict):
        raise TypeError("settings deve ser um dict")

    normalized = DEFAULT_SETTINGS.copy()
    normalized.update({k: v for k, v in settings.items() if v is not None})

    for key in _FLOAT_KEYS:
        normalized[key] = _coerce_timeout(key, normalized[key])
    for key in _URL_KEYS:
        normalized[key] = _coerce_url(key, normalized[key])

    table = str(normalized["table"]).strip()
    if not table:
        raise ValueError("table não pode ser vazio")
    normalized["table"] = table
    normalized["log_level"] = str(normalized["log_level"]).strip().upper() or "INFO"
    normalized["durable_writes"] = _coerce_bool(normalized["durable_writes"])

    logger.debug("Configurações validadas e normalizadas")
    return normalized


# Auxilia outros módulos; retorna settings validados ou padrão em caso de erro
def get_settings(settings: dict | None = None) -> dict:
    """Retorna configurações validadas.

    Em caso de erro, retorna ``DEFAULT_SETTINGS`` e registra aviso.
    """
    import logging

    logger = logging.getLogger(__name__)
    try:
        if settings is None:
            settings = load_settings()
        return validate_settings(settings)
    except (TypeError, ValueError, OSError) as exc:
        logger.warning("Falha ao validar settings; serão usados DEFAULT_SETTINGS: %s", exc)
        return DEFAULT_SETTINGS.copy()
