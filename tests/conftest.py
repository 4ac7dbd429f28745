"""
Configurações globais do Pytest para o Helpdesk de Chamados.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.
"""

import pytest
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

FUSO = ZoneInfo("America/Sao_Paulo")


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture
def agora():
    """Instante fixo de referência (relógio congelado)."""
    return datetime(2024, 3, 15, 10, 0, tzinfo=FUSO)


@pytest.fixture
def relogio(agora):
    """Relógio injetável que sempre devolve `agora`."""
    return lambda: agora


@pytest.fixture(autouse=True)
def reset_container():
    """
    Reset do container de DI entre testes.

    Garante que cada teste relê o settings e inicia com estado limpo.
    """
    yield
    from src.config.container import reset_container as _reset
    _reset()

