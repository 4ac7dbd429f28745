"""
Ports (Interfaces) do Domínio de Chamados.

Contratos que o armazenamento externo deve cumprir. A triagem e os
casos de uso de consulta dependem apenas destas interfaces.

Ports:
- ChamadoRepository: leitura de chamados e escrita do responsável
- UsuarioRepository: usuários e elegibilidade para triagem
- SetorRepository: setores (dado de referência)
- HistoricoRepository: auditoria append-only

Implementações:
- Django*Repository (src.adapters.django_app.chamados.repositories)
- InMemory*Repository (abaixo, para testes)
"""

from copy import copy
from typing import AbstractSet, Dict, List, Optional, Protocol, runtime_checkable

from .entities import (
    ChamadoEntity,
    ChamadoStatus,
    HistoricoChamadoEntry,
    SetorEntity,
    UsuarioEntity,
)


@runtime_checkable
class ChamadoRepository(Protocol):
    """
    Interface para persistência de Chamados.

    Chamados nunca são removidos, por isso não há `delete`.
    """

    def save(self, chamado: ChamadoEntity) -> None:
        """Persiste chamado (create ou update). Preenche `id` ao criar."""
        ...

    def get_by_id(self, chamado_id: int) -> Optional[ChamadoEntity]:
        ...

    def list_all(self) -> List[ChamadoEntity]:
        ...

    def list_abertos(self) -> List[ChamadoEntity]:
        """
        Chamados com status exatamente "Aberto", ordenados por id.

        Em andamento e concluídos não entram na triagem.
        """
        ...

    def atualizar_responsavel(
        self,
        chamado_id: int,
        novo_atendente_id: Optional[int],
        atendente_esperado_id: Optional[int],
    ) -> bool:
        """
        Troca o responsável somente se o atual ainda for o esperado.

        Compare-and-set: evita sobrescrever uma reatribuição feita por
        outro processo entre a leitura e a escrita.

        Returns:
            True se gravou, False se o responsável já era outro
        """
        ...


@runtime_checkable
class UsuarioRepository(Protocol):
    """Interface para consulta de usuários."""

    def get_by_id(self, usuario_id: int) -> Optional[UsuarioEntity]:
        ...

    def list_all(self) -> List[UsuarioEntity]:
        ...

    def list_elegiveis(
        self,
        cargos_excluidos: AbstractSet[int],
        usuario_excluido_id: int,
    ) -> List[UsuarioEntity]:
        """
        Usuários ativos aptos a receber chamados, ordenados por id.

        Exclui cargos de supervisão e a identidade reservada do sistema.
        """
        ...

    def get_setor_id(self, usuario_id: int) -> Optional[int]:
        """Setor de qualquer usuário (elegível ou não). None se não houver."""
        ...


@runtime_checkable
class SetorRepository(Protocol):
    """Interface para consulta de setores."""

    def get_by_id(self, setor_id: int) -> Optional[SetorEntity]:
        ...

    def list_all(self) -> List[SetorEntity]:
        ...


@runtime_checkable
class HistoricoRepository(Protocol):
    """Interface para o histórico de chamados (append-only)."""

    def append(self, entry: HistoricoChamadoEntry) -> None:
        ...

    def list_by_chamado(self, chamado_id: int) -> List[HistoricoChamadoEntry]:
        """Entradas do chamado, mais recentes primeiro."""
        ...


# =============================================================================
# Implementações em memória
# =============================================================================

class InMemoryChamadoRepository:
    """
    Implementação em memória do ChamadoRepository.

    Guarda cópias das entidades para que alterações feitas pelo
    chamador só valham depois de `save`, como num banco real.
    """

    def __init__(self):
        self._chamados: Dict[int, ChamadoEntity] = {}
        self._proximo_id = 1

    def save(self, chamado: ChamadoEntity) -> None:
        if chamado.id is None:
            chamado.id = self._proximo_id
        self._proximo_id = max(self._proximo_id, chamado.id + 1)
        self._chamados[chamado.id] = copy(chamado)

    def get_by_id(self, chamado_id: int) -> Optional[ChamadoEntity]:
        chamado = self._chamados.get(chamado_id)
        return copy(chamado) if chamado else None

    def list_all(self) -> List[ChamadoEntity]:
        return [copy(self._chamados[k]) for k in sorted(self._chamados)]

    def list_abertos(self) -> List[ChamadoEntity]:
        return [c for c in self.list_all() if c.status == ChamadoStatus.ABERTO]

    def atualizar_responsavel(
        self,
        chamado_id: int,
        novo_atendente_id: Optional[int],
        atendente_esperado_id: Optional[int],
    ) -> bool:
        chamado = self._chamados.get(chamado_id)
        if chamado is None or chamado.atendente_id != atendente_esperado_id:
            return False
        chamado.atendente_id = novo_atendente_id
        return True

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._chamados.clear()
        self._proximo_id = 1


class InMemoryUsuarioRepository:
    """Implementação em memória do UsuarioRepository."""

    def __init__(self, usuarios: Optional[List[UsuarioEntity]] = None):
        self._usuarios: Dict[int, UsuarioEntity] = {}
        for usuario in usuarios or []:
            self.save(usuario)

    def save(self, usuario: UsuarioEntity) -> None:
        self._usuarios[usuario.id] = usuario

    def get_by_id(self, usuario_id: int) -> Optional[UsuarioEntity]:
        return self._usuarios.get(usuario_id)

    def list_all(self) -> List[UsuarioEntity]:
        return [self._usuarios[k] for k in sorted(self._usuarios)]

    def list_elegiveis(
        self,
        cargos_excluidos: AbstractSet[int],
        usuario_excluido_id: int,
    ) -> List[UsuarioEntity]:
        return [
            u for u in self.list_all()
            if u.elegivel_para_triagem(cargos_excluidos, usuario_excluido_id)
        ]

    def get_setor_id(self, usuario_id: int) -> Optional[int]:
        usuario = self._usuarios.get(usuario_id)
        return usuario.setor_id if usuario else None


class InMemorySetorRepository:
    """Implementação em memória do SetorRepository."""

    def __init__(self, setores: Optional[List[SetorEntity]] = None):
        self._setores: Dict[int, SetorEntity] = {s.id: s for s in setores or []}

    def save(self, setor: SetorEntity) -> None:
        self._setores[setor.id] = setor

    def get_by_id(self, setor_id: int) -> Optional[SetorEntity]:
        return self._setores.get(setor_id)

    def list_all(self) -> List[SetorEntity]:
        return [self._setores[k] for k in sorted(self._setores)]


class InMemoryHistoricoRepository:
    """Implementação em memória do HistoricoRepository."""

    def __init__(self):
        self._entries: List[HistoricoChamadoEntry] = []

    def append(self, entry: HistoricoChamadoEntry) -> None:
        entry.id = len(self._entries) + 1
        self._entries.append(entry)

    def list_by_chamado(self, chamado_id: int) -> List[HistoricoChamadoEntry]:
        entries = [e for e in self._entries if e.chamado_id == chamado_id]
        return sorted(entries, key=lambda e: (e.data, e.id), reverse=True)

    def list_all(self) -> List[HistoricoChamadoEntry]:
        return list(self._entries)

    def count(self) -> int:
        return len(self._entries)
