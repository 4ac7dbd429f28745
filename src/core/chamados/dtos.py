"""
Data Transfer Objects (DTOs) do Domínio de Chamados.

Tipos de DTOs:
- Input DTOs: Recebem dados de entrada validados (da API)
- Output DTOs: Formatam dados para resposta, já com a situação calculada
- Query DTOs: Parâmetros de busca
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


# Valor enviado pelos combos da tela quando nenhum filtro foi escolhido
SELECIONE_UMA_OPCAO = "Selecione uma opção"


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class AlterarStatusInputDTO:
    """
    DTO de entrada para alterar status.

    Attributes:
        chamado_id: ID do chamado
        novo_status: Nome ou valor do status ("CONCLUIDO", "Concluído")
        alterado_por_id: Usuário que está alterando
    """

    chamado_id: int
    novo_status: str
    alterado_por_id: int


@dataclass(frozen=True)
class AtribuirResponsavelInputDTO:
    """
    DTO de entrada para reatribuição manual.

    Attributes:
        chamado_id: ID do chamado
        atendente_id: Novo responsável (None remove a atribuição)
        alterado_por_id: Usuário que está alterando
    """

    chamado_id: int
    atendente_id: Optional[int]
    alterado_por_id: int


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class BuscarChamadosQueryDTO:
    """
    Parâmetros de busca de chamados. Todos opcionais.

    Filtros de texto são por trecho, sem diferenciar maiúsculas.
    Datas comparam apenas o dia. `status` e `situacao` são exatos.

    Escopo (quem está consultando):
        setor_atendente_id: apenas chamados cujo responsável é do setor
        solicitante_id: apenas chamados abertos pelo usuário
    """

    numero: Optional[int] = None
    titulo: Optional[str] = None
    data_abertura: Optional[date] = None
    data_fim: Optional[date] = None
    responsavel: Optional[str] = None
    setor: Optional[str] = None
    status: Optional[str] = None
    setor_solicitante: Optional[str] = None
    solicitante: Optional[str] = None
    situacao: Optional[str] = None
    setor_atendente_id: Optional[int] = None
    solicitante_id: Optional[int] = None

    @staticmethod
    def filtro_informado(valor: Optional[str]) -> bool:
        """Texto vazio e o placeholder dos combos não filtram."""
        return bool(valor) and valor != SELECIONE_UMA_OPCAO


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class ChamadoListItemDTO:
    """Linha da listagem/busca de chamados."""

    id: int
    titulo: str
    data_inicio: datetime
    data_fim: Optional[datetime]
    responsavel: str
    setor: str
    status: str
    setor_solicitante: str
    solicitante: str
    situacao: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "titulo": self.titulo,
            "data_inicio": _iso(self.data_inicio),
            "data_fim": _iso(self.data_fim),
            "responsavel": self.responsavel,
            "setor": self.setor,
            "status": self.status,
            "setor_solicitante": self.setor_solicitante,
            "solicitante": self.solicitante,
            "situacao": self.situacao,
        }


@dataclass
class HistoricoItemDTO:
    """Entrada de histórico com o nome de quem agiu."""

    usuario: str
    acao_tomada: str
    data: datetime

    def to_dict(self) -> dict:
        return {
            "usuario": self.usuario,
            "acao_tomada": self.acao_tomada,
            "data": _iso(self.data),
        }


@dataclass
class ChamadoDetalheDTO:
    """
    Detalhe completo de um chamado.

    Nomes ausentes usam "Não atribuído" (responsável) ou
    "Não definido" (demais referências).
    """

    id: int
    titulo: str
    descricao: str
    status: str
    situacao: str
    data_inicio: datetime
    data_fim: Optional[datetime]
    solicitante: str
    responsavel: str
    atendente_id: Optional[int]
    setor: str
    prioridade_id: Optional[int]
    criterio_prioridade_id: Optional[int]
    historico: List[HistoricoItemDTO] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "titulo": self.titulo,
            "descricao": self.descricao,
            "status": self.status,
            "situacao": self.situacao,
            "data_inicio": _iso(self.data_inicio),
            "data_fim": _iso(self.data_fim),
            "solicitante": self.solicitante,
            "responsavel": self.responsavel,
            "atendente_id": self.atendente_id,
            "setor": self.setor,
            "prioridade_id": self.prioridade_id,
            "criterio_prioridade_id": self.criterio_prioridade_id,
            "historico": [item.to_dict() for item in self.historico],
        }


@dataclass
class PainelSituacaoDTO:
    """
    Contadores do painel.

    `total` inclui concluídos; `no_prazo`, `atencao` e `atrasados`
    consideram apenas chamados não concluídos.
    """

    total: int = 0
    no_prazo: int = 0
    atencao: int = 0
    atrasados: int = 0
    finalizados: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "no_prazo": self.no_prazo,
            "atencao": self.atencao,
            "atrasados": self.atrasados,
            "finalizados": self.finalizados,
        }


@dataclass
class ChamadoOutputDTO:
    """Resultado de operações de escrita sobre um chamado."""

    id: int
    status: str
    atendente_id: Optional[int]
    data_fim: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status,
            "atendente_id": self.atendente_id,
            "data_fim": _iso(self.data_fim),
        }
