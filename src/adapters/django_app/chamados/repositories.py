"""
Repositórios Django para persistência de Chamados.

Implementam as interfaces (Ports) definidas em src/core/chamados/ports.py.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from typing import AbstractSet, List, Optional
import logging

from src.core.chamados.entities import (
    ChamadoEntity,
    ChamadoStatus,
    HistoricoChamadoEntry,
    SetorEntity,
    UsuarioEntity,
)

from .models import ChamadoModel, HistoricoChamadoModel, SetorModel, UsuarioModel
from .mappers import ChamadoMapper, HistoricoMapper, SetorMapper, UsuarioMapper

logger = logging.getLogger(__name__)


class DjangoChamadoRepository:
    """
    Implementação Django do ChamadoRepository.

    Example:
        repo = DjangoChamadoRepository()
        abertos = repo.list_abertos()
        repo.atualizar_responsavel(abertos[0].id, 7, abertos[0].atendente_id)
    """

    def __init__(self):
        self._mapper = ChamadoMapper()

    def save(self, chamado: ChamadoEntity) -> None:
        """
        Persiste chamado (create ou update).

        Na atualização o responsável não é gravado: ele só muda via
        `atualizar_responsavel`, que protege contra escrita concorrente.
        """
        if chamado.id is None:
            model = self._mapper.to_model(chamado)
            model.save()
            chamado.id = model.id
            chamado.data_inicio = model.data_inicio
            logger.info(f"Chamado criado: {chamado.id}")
            return

        ChamadoModel.objects.filter(id=chamado.id).update(
            titulo=chamado.titulo,
            descricao=chamado.descricao,
            status=chamado.status.value,
            data_fim=chamado.data_fim,
            criterio_prioridade_id=chamado.criterio_prioridade_id,
            prioridade_id=chamado.prioridade_id,
        )
        logger.debug(f"Chamado atualizado: {chamado.id}")

    def get_by_id(self, chamado_id: int) -> Optional[ChamadoEntity]:
        try:
            model = ChamadoModel.objects.get(id=chamado_id)
            return self._mapper.to_entity(model)
        except ChamadoModel.DoesNotExist:
            logger.debug(f"Chamado not found: {chamado_id}")
            return None

    def list_all(self) -> List[ChamadoEntity]:
        models = ChamadoModel.objects.order_by('id')
        return self._mapper.to_entity_list(models)

    def list_abertos(self) -> List[ChamadoEntity]:
        models = ChamadoModel.objects.filter(
            status=ChamadoStatus.ABERTO.value
        ).order_by('id')
        return self._mapper.to_entity_list(models)

    def atualizar_responsavel(
        self,
        chamado_id: int,
        novo_atendente_id: Optional[int],
        atendente_esperado_id: Optional[int],
    ) -> bool:
        """
        UPDATE condicional no responsável (compare-and-set).

        Returns:
            True se uma linha foi alterada
        """
        filtro = ChamadoModel.objects.filter(id=chamado_id)
        if atendente_esperado_id is None:
            filtro = filtro.filter(atendente__isnull=True)
        else:
            filtro = filtro.filter(atendente_id=atendente_esperado_id)

        return filtro.update(atendente_id=novo_atendente_id) == 1


class DjangoUsuarioRepository:
    """Implementação Django do UsuarioRepository."""

    def __init__(self):
        self._mapper = UsuarioMapper()

    def get_by_id(self, usuario_id: int) -> Optional[UsuarioEntity]:
        try:
            return self._mapper.to_entity(UsuarioModel.objects.get(id=usuario_id))
        except UsuarioModel.DoesNotExist:
            return None

    def list_all(self) -> List[UsuarioEntity]:
        return self._mapper.to_entity_list(UsuarioModel.objects.order_by('id'))

    def list_elegiveis(
        self,
        cargos_excluidos: AbstractSet[int],
        usuario_excluido_id: int,
    ) -> List[UsuarioEntity]:
        models = (
            UsuarioModel.objects
            .filter(ativo=True)
            .exclude(id=usuario_excluido_id)
            .exclude(cargo_id__in=list(cargos_excluidos))
            .order_by('id')
        )
        return self._mapper.to_entity_list(models)

    def get_setor_id(self, usuario_id: int) -> Optional[int]:
        return (
            UsuarioModel.objects
            .filter(id=usuario_id)
            .values_list('setor_id', flat=True)
            .first()
        )


class DjangoSetorRepository:
    """Implementação Django do SetorRepository."""

    def get_by_id(self, setor_id: int) -> Optional[SetorEntity]:
        try:
            return SetorMapper.to_entity(SetorModel.objects.get(id=setor_id))
        except SetorModel.DoesNotExist:
            return None

    def list_all(self) -> List[SetorEntity]:
        return [SetorMapper.to_entity(m) for m in SetorModel.objects.order_by('id')]


class DjangoHistoricoRepository:
    """Implementação Django do HistoricoRepository (append-only)."""

    def append(self, entry: HistoricoChamadoEntry) -> None:
        model = HistoricoMapper.to_model(entry)
        model.save()
        entry.id = model.id

    def list_by_chamado(self, chamado_id: int) -> List[HistoricoChamadoEntry]:
        models = HistoricoChamadoModel.objects.filter(chamado_id=chamado_id).order_by('-data', '-id')
        return [HistoricoMapper.to_entity(m) for m in models]
