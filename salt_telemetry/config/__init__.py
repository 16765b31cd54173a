"""Configuração do pacote salt_telemetry."""
