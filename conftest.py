# conftest.py
# Configuração global para pytest: adiciona a raiz do projeto ao sys.path e
# fornece fixtures compartilhadas pelos testes.
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT_PATH = Path(__file__).parent
if str(ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(ROOT_PATH))


@pytest.fixture
def log_dir(tmp_path):
    """Diretório de logs vazio."""
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture
def fake_response():
    """Fábrica de respostas HTTP simuladas compatíveis com requests.Response."""
    import requests

    def _make(status=200, text="ok", json_data=None):
        def raise_for_status():
            if status >= 400:
                raise requests.HTTPError(f"{status} Error")

        def _json():
            if json_data is None:
                raise requests.exceptions.JSONDecodeError("no json", "", 0)
            return json_data

        return SimpleNamespace(status_code=status, text=text, raise_for_status=raise_for_status, json=_json)

    return _make
