"""Pacote core: parsing de argumentos da CLI de telemetria."""

from .args import parse_args, get_log_config

__all__ = ["parse_args", "get_log_config"]
