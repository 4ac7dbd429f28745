"""
Use Cases (Application Services) do Domínio de Chamados.

Use Cases implementados:
- ListarChamadosService: Busca com filtros e situação calculada
- PainelSituacaoService: Contadores por situação
- ObterChamadoService: Detalhe com histórico
- AlterarStatusService: Troca de status com auditoria
- AtribuirResponsavelService: Reatribuição manual com auditoria

Toda exibição de situação passa por `classificar_situacao`, com o
instante `agora` recebido do chamador (relógio injetado).
"""

import logging
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyError,
    EntityNotFoundError,
)

from .entities import (
    ROTULO_NAO_ATRIBUIDO,
    ROTULO_NAO_DEFINIDO,
    ChamadoEntity,
    ChamadoStatus,
    HistoricoChamadoEntry,
    UsuarioEntity,
)
from .situacao import Situacao, classificar_situacao, contar_por_situacao
from .ports import (
    ChamadoRepository,
    HistoricoRepository,
    SetorRepository,
    UsuarioRepository,
)
from .dtos import (
    AlterarStatusInputDTO,
    AtribuirResponsavelInputDTO,
    BuscarChamadosQueryDTO,
    ChamadoDetalheDTO,
    ChamadoListItemDTO,
    ChamadoOutputDTO,
    HistoricoItemDTO,
    PainelSituacaoDTO,
)
from .events import ORIGEM_MANUAL, ResponsavelAlteradoEvent, StatusAlteradoEvent

logger = logging.getLogger(__name__)


def _obter_chamado(chamado_repo: ChamadoRepository, chamado_id: int) -> ChamadoEntity:
    chamado = chamado_repo.get_by_id(chamado_id)
    if not chamado:
        raise EntityNotFoundError(
            f"Chamado {chamado_id} não encontrado",
            entity_type="Chamado",
            entity_id=str(chamado_id)
        )
    return chamado


def _obter_autor(usuario_repo: UsuarioRepository, usuario_id: int) -> UsuarioEntity:
    """Usuário que executa a ação; precisa existir para assinar o histórico."""
    autor = usuario_repo.get_by_id(usuario_id)
    if not autor:
        raise EntityNotFoundError(
            f"Usuário {usuario_id} não encontrado",
            entity_type="Usuario",
            entity_id=str(usuario_id)
        )
    return autor


def _output(chamado: ChamadoEntity) -> ChamadoOutputDTO:
    return ChamadoOutputDTO(
        id=chamado.id,
        status=chamado.status.value,
        atendente_id=chamado.atendente_id,
        data_fim=chamado.data_fim,
    )


def _contem(texto: str, trecho: str) -> bool:
    return trecho.lower() in (texto or "").lower()


def _dia(valor: datetime, agora: datetime) -> date:
    """Data de calendário de `valor` no fuso de `agora`."""
    if valor.tzinfo is not None and agora.tzinfo is not None:
        valor = valor.astimezone(agora.tzinfo)
    return valor.date()


class ListarChamadosService:
    """
    Use Case: Buscar chamados.

    Não usa UoW pois é operação de leitura. Resolve nomes de
    responsável, solicitante e setores a partir dos repositórios e
    devolve a lista ordenada por número decrescente.
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        usuario_repo: UsuarioRepository,
        setor_repo: SetorRepository,
    ):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo
        self.setor_repo = setor_repo

    def execute(
        self,
        query: BuscarChamadosQueryDTO,
        agora: datetime,
    ) -> List[ChamadoListItemDTO]:
        """
        Executa a busca.

        Raises:
            ValidationError: Se status ou situação informados forem inválidos
        """
        informado = BuscarChamadosQueryDTO.filtro_informado

        status_filtro = (
            ChamadoStatus.from_string(query.status) if informado(query.status) else None
        )
        situacao_filtro = (
            Situacao.from_string(query.situacao) if informado(query.situacao) else None
        )

        usuarios: Dict[int, UsuarioEntity] = {u.id: u for u in self.usuario_repo.list_all()}
        setores = {s.id: s.descricao for s in self.setor_repo.list_all()}

        def nome(usuario_id: Optional[int]) -> str:
            usuario = usuarios.get(usuario_id)
            return usuario.nome if usuario else ""

        def setor_de(usuario_id: Optional[int]) -> Optional[int]:
            usuario = usuarios.get(usuario_id)
            return usuario.setor_id if usuario else None

        resultados = []
        chamados = sorted(self.chamado_repo.list_all(), key=lambda c: c.id, reverse=True)

        for chamado in chamados:
            responsavel = nome(chamado.atendente_id)
            setor = setores.get(setor_de(chamado.atendente_id), "")
            solicitante = nome(chamado.solicitante_id)
            setor_solicitante = setores.get(setor_de(chamado.solicitante_id), "")

            if query.setor_atendente_id is not None:
                if setor_de(chamado.atendente_id) != query.setor_atendente_id:
                    continue
            if query.solicitante_id is not None and chamado.solicitante_id != query.solicitante_id:
                continue
            if query.numero is not None and chamado.id != query.numero:
                continue
            if informado(query.titulo) and not _contem(chamado.titulo, query.titulo):
                continue
            if query.data_abertura and _dia(chamado.data_inicio, agora) != query.data_abertura:
                continue
            if query.data_fim and (
                chamado.data_fim is None or _dia(chamado.data_fim, agora) != query.data_fim
            ):
                continue
            if informado(query.responsavel) and not _contem(responsavel, query.responsavel):
                continue
            if informado(query.setor) and not _contem(setor, query.setor):
                continue
            if informado(query.setor_solicitante) and not _contem(
                setor_solicitante, query.setor_solicitante
            ):
                continue
            if informado(query.solicitante) and not _contem(solicitante, query.solicitante):
                continue
            if status_filtro and chamado.status != status_filtro:
                continue

            situacao = classificar_situacao(chamado.status, chamado.data_inicio, agora)
            if situacao_filtro and situacao != situacao_filtro:
                continue

            resultados.append(
                ChamadoListItemDTO(
                    id=chamado.id,
                    titulo=chamado.titulo,
                    data_inicio=chamado.data_inicio,
                    data_fim=chamado.data_fim,
                    responsavel=responsavel,
                    setor=setor,
                    status=chamado.status.value,
                    setor_solicitante=setor_solicitante,
                    solicitante=solicitante,
                    situacao=situacao.value,
                )
            )

        return resultados


class PainelSituacaoService:
    """
    Use Case: Contadores do painel por situação.

    `setor_id` restringe aos chamados cujo responsável é do setor;
    `solicitante_id` restringe aos chamados abertos pelo usuário.
    """

    def __init__(self, chamado_repo: ChamadoRepository, usuario_repo: UsuarioRepository):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo

    def execute(
        self,
        agora: datetime,
        setor_id: Optional[int] = None,
        solicitante_id: Optional[int] = None,
    ) -> PainelSituacaoDTO:
        chamados = self.chamado_repo.list_all()

        if setor_id is not None:
            chamados = [
                c for c in chamados
                if c.atendente_id is not None
                and self.usuario_repo.get_setor_id(c.atendente_id) == setor_id
            ]
        if solicitante_id is not None:
            chamados = [c for c in chamados if c.solicitante_id == solicitante_id]

        contagem = contar_por_situacao(chamados, agora)

        return PainelSituacaoDTO(
            total=len(chamados),
            no_prazo=contagem[Situacao.NO_PRAZO],
            atencao=contagem[Situacao.ATENCAO],
            atrasados=contagem[Situacao.ATRASADO],
            finalizados=contagem[Situacao.FINALIZADO],
        )


class ObterChamadoService:
    """
    Use Case: Detalhe de um chamado com histórico.
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        usuario_repo: UsuarioRepository,
        setor_repo: SetorRepository,
        historico_repo: HistoricoRepository,
    ):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo
        self.setor_repo = setor_repo
        self.historico_repo = historico_repo

    def execute(self, chamado_id: int, agora: datetime) -> ChamadoDetalheDTO:
        """
        Obtém chamado por ID.

        Raises:
            EntityNotFoundError: Se chamado não existe
        """
        chamado = _obter_chamado(self.chamado_repo, chamado_id)

        solicitante = self.usuario_repo.get_by_id(chamado.solicitante_id)
        atendente = (
            self.usuario_repo.get_by_id(chamado.atendente_id)
            if chamado.atendente_id is not None else None
        )
        setor = (
            self.setor_repo.get_by_id(atendente.setor_id)
            if atendente and atendente.setor_id is not None else None
        )

        historico = []
        for entry in self.historico_repo.list_by_chamado(chamado.id):
            autor = self.usuario_repo.get_by_id(entry.usuario_id)
            historico.append(
                HistoricoItemDTO(
                    usuario=autor.nome if autor else ROTULO_NAO_DEFINIDO,
                    acao_tomada=entry.acao_tomada,
                    data=entry.data,
                )
            )

        return ChamadoDetalheDTO(
            id=chamado.id,
            titulo=chamado.titulo,
            descricao=chamado.descricao,
            status=chamado.status.value,
            situacao=chamado.situacao(agora).value,
            data_inicio=chamado.data_inicio,
            data_fim=chamado.data_fim,
            solicitante=solicitante.nome if solicitante else ROTULO_NAO_DEFINIDO,
            responsavel=atendente.nome if atendente else ROTULO_NAO_ATRIBUIDO,
            atendente_id=chamado.atendente_id,
            setor=setor.descricao if setor else ROTULO_NAO_DEFINIDO,
            prioridade_id=chamado.prioridade_id,
            criterio_prioridade_id=chamado.criterio_prioridade_id,
            historico=historico,
        )


class AlterarStatusService:
    """
    Use Case: Alterar status de um chamado.

    Fluxo:
    1. Buscar chamado
    2. Aplicar novo status (entidade cuida da data de fim)
    3. Persistir e registrar histórico
    4. Disparar StatusAlteradoEvent
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        usuario_repo: UsuarioRepository,
        historico_repo: HistoricoRepository,
        uow: UnitOfWork,
        relogio: Callable[[], datetime],
    ):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo
        self.historico_repo = historico_repo
        self.uow = uow
        self.relogio = relogio

    def execute(self, input_dto: AlterarStatusInputDTO) -> ChamadoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se chamado ou autor não existe
            ValidationError: Se status inválido
        """
        novo_status = ChamadoStatus.from_string(input_dto.novo_status)
        agora = self.relogio()

        with self.uow:
            chamado = _obter_chamado(self.chamado_repo, input_dto.chamado_id)
            _obter_autor(self.usuario_repo, input_dto.alterado_por_id)

            if chamado.status == novo_status:
                return _output(chamado)

            anterior = chamado.alterar_status(novo_status, agora)
            self.chamado_repo.save(chamado)

            self.historico_repo.append(
                HistoricoChamadoEntry.alteracao_de_campo(
                    chamado_id=chamado.id,
                    usuario_id=input_dto.alterado_por_id,
                    campo="Status",
                    valor_antigo=anterior.value,
                    valor_novo=novo_status.value,
                    data=agora,
                )
            )

            self.uow.publish_event(
                StatusAlteradoEvent(
                    aggregate_id=str(chamado.id),
                    status_anterior=anterior.value,
                    status_novo=novo_status.value,
                    alterado_por_id=input_dto.alterado_por_id,
                )
            )

        logger.info(
            f"Chamado {chamado.id}: status {anterior.value} -> {novo_status.value}"
        )
        return _output(chamado)


class AtribuirResponsavelService:
    """
    Use Case: Reatribuição manual do responsável.

    Usa o mesmo compare-and-set da triagem: se o responsável mudou
    entre a leitura e a escrita, lança ConcurrencyError em vez de
    sobrescrever.
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        usuario_repo: UsuarioRepository,
        historico_repo: HistoricoRepository,
        uow: UnitOfWork,
        relogio: Callable[[], datetime],
    ):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo
        self.historico_repo = historico_repo
        self.uow = uow
        self.relogio = relogio

    def execute(self, input_dto: AtribuirResponsavelInputDTO) -> ChamadoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se chamado, autor ou atendente não existe
            BusinessRuleViolationError: Se atendente inativo ou chamado concluído
            ConcurrencyError: Se o responsável foi alterado concorrentemente
        """
        agora = self.relogio()

        with self.uow:
            chamado = _obter_chamado(self.chamado_repo, input_dto.chamado_id)
            _obter_autor(self.usuario_repo, input_dto.alterado_por_id)

            if chamado.status == ChamadoStatus.CONCLUIDO:
                raise BusinessRuleViolationError(
                    "Não é possível alterar o responsável de chamado concluído",
                    rule="chamado_concluido_imutavel"
                )

            novo = None
            if input_dto.atendente_id is not None:
                novo = self.usuario_repo.get_by_id(input_dto.atendente_id)
                if not novo:
                    raise EntityNotFoundError(
                        f"Usuário {input_dto.atendente_id} não encontrado",
                        entity_type="Usuario",
                        entity_id=str(input_dto.atendente_id)
                    )
                if not novo.ativo:
                    raise BusinessRuleViolationError(
                        f"Usuário {novo.nome} está inativo",
                        rule="responsavel_inativo"
                    )

            anterior_id = chamado.atendente_id
            if anterior_id == input_dto.atendente_id:
                return _output(chamado)

            if not self.chamado_repo.atualizar_responsavel(
                chamado.id, input_dto.atendente_id, anterior_id
            ):
                raise ConcurrencyError(
                    f"Responsável do chamado {chamado.id} foi alterado por outro processo"
                )
            chamado.atribuir_a(input_dto.atendente_id)

            anterior = (
                self.usuario_repo.get_by_id(anterior_id) if anterior_id is not None else None
            )
            self.historico_repo.append(
                HistoricoChamadoEntry.alteracao_de_campo(
                    chamado_id=chamado.id,
                    usuario_id=input_dto.alterado_por_id,
                    campo="Responsavel",
                    valor_antigo=anterior.nome if anterior else None,
                    valor_novo=novo.nome if novo else None,
                    data=agora,
                )
            )

            self.uow.publish_event(
                ResponsavelAlteradoEvent(
                    aggregate_id=str(chamado.id),
                    atendente_anterior_id=anterior_id,
                    atendente_novo_id=input_dto.atendente_id,
                    alterado_por_id=input_dto.alterado_por_id,
                    origem=ORIGEM_MANUAL,
                )
            )

        logger.info(
            f"Chamado {chamado.id}: responsável {anterior_id} -> {input_dto.atendente_id}"
        )
        return _output(chamado)
