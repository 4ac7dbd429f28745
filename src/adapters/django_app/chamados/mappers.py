"""
Mappers para conversão entre Entities (Core) e Models (Django).

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import List

from src.core.chamados.entities import (
    ChamadoEntity,
    ChamadoStatus,
    HistoricoChamadoEntry,
    SetorEntity,
    UsuarioEntity,
)

from .models import (
    ChamadoModel,
    HistoricoChamadoModel,
    SetorModel,
    UsuarioModel,
)


class ChamadoMapper:
    """
    Mapper para conversão entre ChamadoEntity e ChamadoModel.

    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_entity_list(): List[Model] → List[Entity]
    """

    @staticmethod
    def to_model(entity: ChamadoEntity) -> ChamadoModel:
        """
        Converte ChamadoEntity para ChamadoModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        model = ChamadoModel(
            titulo=entity.titulo,
            descricao=entity.descricao,
            data_fim=entity.data_fim,
            status=entity.status.value,
            solicitante_id=entity.solicitante_id,
            atendente_id=entity.atendente_id,
            criterio_prioridade_id=entity.criterio_prioridade_id,
            prioridade_id=entity.prioridade_id,
        )
        if entity.id is not None:
            model.id = entity.id
        if entity.data_inicio is not None:
            model.data_inicio = entity.data_inicio
        return model

    @staticmethod
    def to_entity(model: ChamadoModel) -> ChamadoEntity:
        """
        Converte ChamadoModel para ChamadoEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na abertura
        """
        return ChamadoEntity(
            id=model.id,
            titulo=model.titulo,
            descricao=model.descricao,
            data_inicio=model.data_inicio,
            data_fim=model.data_fim,
            status=ChamadoStatus(model.status),
            solicitante_id=model.solicitante_id,
            atendente_id=model.atendente_id,
            criterio_prioridade_id=model.criterio_prioridade_id,
            prioridade_id=model.prioridade_id,
        )

    @staticmethod
    def to_entity_list(models: List[ChamadoModel]) -> List[ChamadoEntity]:
        return [ChamadoMapper.to_entity(m) for m in models]


class UsuarioMapper:
    """Mapper para UsuarioModel → UsuarioEntity (somente leitura)."""

    @staticmethod
    def to_entity(model: UsuarioModel) -> UsuarioEntity:
        return UsuarioEntity(
            id=model.id,
            nome=model.nome,
            setor_id=model.setor_id,
            cargo_id=model.cargo_id,
            ativo=model.ativo,
            email=model.email,
        )

    @staticmethod
    def to_entity_list(models: List[UsuarioModel]) -> List[UsuarioEntity]:
        return [UsuarioMapper.to_entity(m) for m in models]


class SetorMapper:

    @staticmethod
    def to_entity(model: SetorModel) -> SetorEntity:
        return SetorEntity(id=model.id, descricao=model.descricao)


class HistoricoMapper:
    """Mapper para entradas de histórico."""

    @staticmethod
    def to_model(entry: HistoricoChamadoEntry) -> HistoricoChamadoModel:
        return HistoricoChamadoModel(
            chamado_id=entry.chamado_id,
            usuario_id=entry.usuario_id,
            acao_tomada=entry.acao_tomada,
            data=entry.data,
        )

    @staticmethod
    def to_entity(model: HistoricoChamadoModel) -> HistoricoChamadoEntry:
        return HistoricoChamadoEntry(
            id=model.id,
            chamado_id=model.chamado_id,
            usuario_id=model.usuario_id,
            acao_tomada=model.acao_tomada,
            data=model.data,
        )
