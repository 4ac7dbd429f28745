"""
Use Case da Triagem Automática de Chamados.

Redistribui os chamados com status "Aberto" entre os atendentes
elegíveis de cada setor, em round-robin, e registra no histórico
cada troca efetiva de responsável.

Regras:
- Atendentes elegíveis: ativos, fora dos cargos de supervisão e
  diferentes da identidade do sistema. Sem setor, são ignorados.
- Setores processados em ordem crescente de id; atendentes e
  chamados também em ordem de id.
- Candidatos de um setor: chamados sem responsável ou cujo
  responsável atual (considerando trocas já feitas nesta execução)
  pertence ao setor. Chamados sem responsável ficam, portanto, com o
  primeiro setor que tiver atendentes.
- Candidato i vai para atendentes[i % len(atendentes)].
- Mesma pessoa: nada é gravado, nem histórico.

A execução é um recálculo completo e sem estado: com a mesma entrada,
uma segunda execução não altera nada.
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import OperationCancelledError
from src.core.chamados.entities import ChamadoEntity, HistoricoChamadoEntry, UsuarioEntity
from src.core.chamados.events import ORIGEM_TRIAGEM, ResponsavelAlteradoEvent
from src.core.chamados.ports import (
    ChamadoRepository,
    HistoricoRepository,
    UsuarioRepository,
)

from .config import TriagemConfig
from .dtos import Reatribuicao, ResultadoTriagemDTO, ResumoSetorDTO

logger = logging.getLogger(__name__)


CAMPO_RESPONSAVEL = "Responsavel"


def agrupar_por_setor(atendentes: Sequence[UsuarioEntity]) -> "OrderedDict[int, List[UsuarioEntity]]":
    """Agrupa atendentes por setor, ambos em ordem de id. Sem setor fica de fora."""
    grupos: Dict[int, List[UsuarioEntity]] = {}
    for atendente in sorted(atendentes, key=lambda a: a.id):
        if atendente.setor_id is None:
            continue
        grupos.setdefault(atendente.setor_id, []).append(atendente)
    return OrderedDict((setor_id, grupos[setor_id]) for setor_id in sorted(grupos))


def calcular_redistribuicao(
    chamados: Sequence[ChamadoEntity],
    atendentes: Sequence[UsuarioEntity],
    setor_do_usuario: Callable[[int], Optional[int]],
) -> Tuple[List[Reatribuicao], List[ResumoSetorDTO]]:
    """
    Calcula as trocas de responsável sem tocar em repositórios.

    Args:
        chamados: Chamados abertos (snapshot)
        atendentes: Atendentes elegíveis
        setor_do_usuario: Setor de qualquer usuário (elegível ou não)

    Returns:
        Tupla (reatribuicoes, resumos) com a lista de Reatribuicao e um
        ResumoSetorDTO por setor que teve candidatos
    """
    responsavel_atual = {c.id: c.atendente_id for c in chamados}
    ordenados = sorted(chamados, key=lambda c: c.id)

    reatribuicoes: List[Reatribuicao] = []
    resumos: List[ResumoSetorDTO] = []

    for setor_id, grupo in agrupar_por_setor(atendentes).items():
        candidatos = [
            c for c in ordenados
            if responsavel_atual[c.id] is None
            or setor_do_usuario(responsavel_atual[c.id]) == setor_id
        ]
        if not candidatos:
            continue

        resumo = ResumoSetorDTO(
            setor_id=setor_id,
            total_chamados=len(candidatos),
            total_atendentes=len(grupo),
        )

        for posicao, chamado in enumerate(candidatos):
            novo = grupo[posicao % len(grupo)]
            anterior_id = responsavel_atual[chamado.id]
            if novo.id == anterior_id:
                continue

            reatribuicoes.append(
                Reatribuicao(
                    chamado_id=chamado.id,
                    setor_id=setor_id,
                    atendente_anterior_id=anterior_id,
                    atendente_novo_id=novo.id,
                )
            )
            responsavel_atual[chamado.id] = novo.id
            resumo.alterados += 1

        resumos.append(resumo)

    return reatribuicoes, resumos


class RedistribuirChamadosService:
    """
    Use Case: Redistribuir chamados abertos entre atendentes.

    Fluxo:
    1. Ler snapshot (chamados abertos + atendentes elegíveis)
    2. Calcular trocas em memória
    3. Verificar cancelamento (antes de qualquer escrita)
    4. Gravar responsável (compare-and-set) + histórico + evento
    5. Verificar cancelamento novamente e fazer commit único
    6. Logar resumo por setor

    Attributes:
        chamado_repo: Repositório de chamados
        usuario_repo: Repositório de usuários
        historico_repo: Repositório de histórico
        uow: Unit of Work (uma transação por execução)
        config: Parâmetros da triagem
        relogio: Fonte de "agora"

    Example:
        service = RedistribuirChamadosService(...)
        resultado = service.execute(deve_cancelar=evento_shutdown.is_set)
        print(resultado.total_alterados)
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        usuario_repo: UsuarioRepository,
        historico_repo: HistoricoRepository,
        uow: UnitOfWork,
        config: TriagemConfig,
        relogio: Callable[[], datetime],
    ):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo
        self.historico_repo = historico_repo
        self.uow = uow
        self.config = config
        self.relogio = relogio

    def execute(self, deve_cancelar: Optional[Callable[[], bool]] = None) -> ResultadoTriagemDTO:
        """
        Executa uma rodada de triagem.

        Args:
            deve_cancelar: Consultado antes de gravar e antes do commit

        Returns:
            Resultado com resumo por setor

        Raises:
            OperationCancelledError: Se cancelado (nada é persistido)
        """
        agora = self.relogio()
        cancelar = deve_cancelar or (lambda: False)

        with self.uow:
            chamados = self.chamado_repo.list_abertos()
            atendentes = self.usuario_repo.list_elegiveis(
                self.config.cargos_excluidos,
                self.config.usuario_sistema_id,
            )
            nomes = {a.id: a.nome for a in atendentes}

            reatribuicoes, resumos = calcular_redistribuicao(
                chamados, atendentes, self._setor_do_usuario()
            )
            self._verificar_cancelamento(cancelar)

            por_setor = {r.setor_id: r for r in resumos}
            for troca in reatribuicoes:
                if not self._aplicar(troca, nomes, agora):
                    por_setor[troca.setor_id].alterados -= 1
                    por_setor[troca.setor_id].conflitos += 1

            self._verificar_cancelamento(cancelar)

        for resumo in resumos:
            logger.info(
                f"[TRIAGEM] Redistribuídos {resumo.total_chamados} chamados no setor "
                f"{resumo.setor_id} entre {resumo.total_atendentes} atendentes "
                f"({resumo.alterados} alterados, {resumo.conflitos} conflitos)"
            )

        return ResultadoTriagemDTO(executado_em=agora, setores=resumos)

    def _aplicar(self, troca: Reatribuicao, nomes: Dict[int, str], agora: datetime) -> bool:
        """Grava uma troca. False se o responsável mudou desde a leitura."""
        gravou = self.chamado_repo.atualizar_responsavel(
            troca.chamado_id,
            troca.atendente_novo_id,
            troca.atendente_anterior_id,
        )
        if not gravou:
            logger.warning(
                f"[TRIAGEM] Chamado {troca.chamado_id} alterado por outro processo; "
                f"troca para {troca.atendente_novo_id} descartada"
            )
            return False

        self.historico_repo.append(
            HistoricoChamadoEntry.alteracao_de_campo(
                chamado_id=troca.chamado_id,
                usuario_id=self.config.usuario_sistema_id,
                campo=CAMPO_RESPONSAVEL,
                valor_antigo=self._nome(troca.atendente_anterior_id),
                valor_novo=nomes[troca.atendente_novo_id],
                data=agora,
            )
        )
        self.uow.publish_event(
            ResponsavelAlteradoEvent(
                aggregate_id=str(troca.chamado_id),
                atendente_anterior_id=troca.atendente_anterior_id,
                atendente_novo_id=troca.atendente_novo_id,
                alterado_por_id=self.config.usuario_sistema_id,
                origem=ORIGEM_TRIAGEM,
            )
        )
        return True

    def _nome(self, usuario_id: Optional[int]) -> Optional[str]:
        if usuario_id is None:
            return None
        usuario = self.usuario_repo.get_by_id(usuario_id)
        return usuario.nome if usuario else None

    def _setor_do_usuario(self) -> Callable[[int], Optional[int]]:
        """Lookup de setor com cache local à execução."""
        cache: Dict[int, Optional[int]] = {}

        def buscar(usuario_id: int) -> Optional[int]:
            if usuario_id not in cache:
                cache[usuario_id] = self.usuario_repo.get_setor_id(usuario_id)
            return cache[usuario_id]

        return buscar

    @staticmethod
    def _verificar_cancelamento(cancelar: Callable[[], bool]) -> None:
        if cancelar():
            logger.warning("[TRIAGEM] Execução cancelada antes do commit")
            raise OperationCancelledError("Triagem cancelada antes de persistir")
