"""Parser de argumentos da CLI de telemetria.

Docstrings e mensagens em português.

Sub-comandos expostos:
- new-log / reload: criação e continuação de logs
- send / backup: envio de um log ou varredura de recuperação
- visibility / last-fetch: consultas ao repositório git

Opções globais controlam verbosidade (-v), nível de logging e um ficheiro
JSONL opcional de debug.
"""

import argparse
from typing import Sequence

# ========================
# 0. Configuração do parser e argumentos padrão
# ========================


# Função principal do módulo; cria e retorna o ArgumentParser configurado
def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para a CLI de telemetria."""
    parser = argparse.ArgumentParser(
        prog="salt-telemetry",
        description="Logs locais da telemetria SALT: criação, envio e recuperação",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade (-v, -vv)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v",
    )
    parser.add_argument(
        "--debug-log",
        dest="debug_log",
        type=str,
        default=None,
        help="Caminho de um ficheiro JSONL para registrar eventos de logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new-log", help="Cria o próximo log<N>.json")
    p.add_argument("log_dir")
    p.add_argument("uuid")

    p = sub.add_parser("reload", help="Registra reload no log atual")
    p.add_argument("log_dir")
    p.add_argument("elapsed", type=float, help="Tempo decorrido desde o início do estudo")

    p = sub.add_parser("send", help="Envia um único log")
    p.add_argument("log_dir")
    p.add_argument("uuid")
    p.add_argument("number", type=int)

    p = sub.add_parser("backup", help="Reenvia logs a partir de --start")
    p.add_argument("log_dir")
    p.add_argument("uuid")
    p.add_argument("--start", type=int, default=1, help="Primeiro log a reenviar (default: 1)")

    p = sub.add_parser("visibility", help="Indica se o workspace é repo privado")
    p.add_argument("workspace", nargs="?", default=".")

    p = sub.add_parser("last-fetch", help="Epoch do último git fetch")
    p.add_argument("workspace", nargs="?", default=".")

    return parser


# ========================
# 1. Funções auxiliares para análise e validação de argumentos
# ========================


# Auxilia main; criado para analisar argv e validar argumentos
def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Analisa argv e retorna Namespace validado para uso no programa."""
    import os

    parser = configure_argparser()
    ns = parser.parse_args(argv)
    # CLI tem precedência sobre a variável de ambiente
    if not ns.log_level:
        ns.log_level = os.getenv("SALT_TELEMETRY_LOG_LEVEL") or None
    validate_args(ns)
    return ns


# Auxilia parse_args; criado para garantir valores corretos e seguros
def validate_args(args: argparse.Namespace) -> None:
    """Valida números de log e tempo decorrido."""
    number = getattr(args, "number", None)
    if number is not None and number < 0:
        raise ValueError("number deve ser >= 0")
    start = getattr(args, "start", None)
    if start is not None and start < 1:
        raise ValueError("start deve ser >= 1")
    elapsed = getattr(args, "elapsed", None)
    if elapsed is not None and elapsed < 0.0:
        raise ValueError("elapsed deve ser >= 0.0")


# ========================
# 2. Função auxiliar para configuração de logging
# ========================


# Auxilia main; criado para extrair configuração de logging dos argumentos
def get_log_config(args: argparse.Namespace) -> dict:
    """Retorna dict com 'level' e 'debug_log' para configurar o logging."""
    if getattr(args, "log_level", None):
        level = str(args.log_level).upper()
    else:
        v = getattr(args, "verbose", 0) or 0
        if v >= 2:
            level = "DEBUG"
        elif v == 1:
            level = "INFO"
        else:
            level = "WARNING"

    return {"level": level, "debug_log": getattr(args, "debug_log", None)}
