"""
Fixtures compartilhadas dos testes do Core.

Usa repositórios em memória e um Unit of Work fake: nenhum teste
do Core depende de Django ou banco de dados.
"""

import pytest
from datetime import timedelta
from typing import List

from src.core.chamados.entities import ChamadoEntity, ChamadoStatus, SetorEntity, UsuarioEntity
from src.core.chamados.ports import (
    InMemoryChamadoRepository,
    InMemoryHistoricoRepository,
    InMemorySetorRepository,
    InMemoryUsuarioRepository,
)
from src.core.shared.events import DomainEvent


class FakeUnitOfWork:
    """
    Fake Unit of Work para testes.

    Permite testar:
    - Comportamento de commit/rollback
    - Eventos publicados (somente após commit)
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._published: List[DomainEvent] = []
        self._committed = False
        self._rolled_back = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        self._committed = True
        self._published.extend(self._events)
        self._events.clear()

    def rollback(self):
        self._rolled_back = True
        self._events.clear()

    def publish_event(self, event: DomainEvent):
        self._events.append(event)

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        return list(self._published)


@pytest.fixture
def uow():
    """Fixture para Unit of Work fake."""
    return FakeUnitOfWork()


@pytest.fixture
def chamado_repo():
    return InMemoryChamadoRepository()


@pytest.fixture
def historico_repo():
    return InMemoryHistoricoRepository()


@pytest.fixture
def setor_repo():
    return InMemorySetorRepository([
        SetorEntity(id=1, descricao="Infraestrutura"),
        SetorEntity(id=2, descricao="Sistemas"),
    ])


@pytest.fixture
def usuario_repo():
    """
    Usuários de referência:
    - 1..3: atendentes de Infraestrutura
    - 4: atendente de Sistemas
    - 5: supervisor (cargo 8) de Sistemas
    - 20: solicitante sem setor
    - 2006: usuário do sistema
    """
    return InMemoryUsuarioRepository([
        UsuarioEntity(id=1, nome="Ana", setor_id=1, cargo_id=3),
        UsuarioEntity(id=2, nome="Bruno", setor_id=1, cargo_id=3),
        UsuarioEntity(id=3, nome="Carla", setor_id=1, cargo_id=3),
        UsuarioEntity(id=4, nome="Diego", setor_id=2, cargo_id=3),
        UsuarioEntity(id=5, nome="Elisa", setor_id=2, cargo_id=8),
        UsuarioEntity(id=20, nome="Fernanda", setor_id=None, cargo_id=1),
        UsuarioEntity(id=2006, nome="Sistema", setor_id=1, cargo_id=3),
    ])


@pytest.fixture
def criar_chamado(chamado_repo, agora):
    """Factory: persiste chamado no repositório em memória e o retorna."""

    def _criar(
        titulo: str = "Chamado de teste",
        atendente_id=None,
        status: ChamadoStatus = ChamadoStatus.ABERTO,
        dias: int = 0,
        solicitante_id: int = 20,
        **kwargs
    ) -> ChamadoEntity:
        inicio = agora - timedelta(days=dias)
        chamado = ChamadoEntity(
            titulo=titulo,
            data_inicio=inicio,
            data_fim=agora if status == ChamadoStatus.CONCLUIDO else None,
            status=status,
            solicitante_id=solicitante_id,
            atendente_id=atendente_id,
            **kwargs
        )
        chamado_repo.save(chamado)
        return chamado

    return _criar
