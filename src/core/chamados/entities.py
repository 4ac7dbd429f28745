"""
Entidades do Domínio de Chamados.

Entidades:
- ChamadoEntity: Agregado principal (chamado de suporte)
- ChamadoStatus: Estados possíveis de um chamado
- UsuarioEntity: Solicitante ou atendente
- SetorEntity: Departamento que agrupa atendentes
- HistoricoChamadoEntry: Registro de auditoria (append-only)

Regras de Negócio Encapsuladas:
- Chamado concluído sempre tem data de fim; aberto ou em andamento nunca tem
- Texto padronizado de auditoria para alteração de campo
- Elegibilidade de atendentes para a triagem automática
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import AbstractSet, Optional

from src.core.shared.exceptions import ValidationError

from .situacao import Situacao, classificar_situacao


ROTULO_NAO_DEFINIDO = "Não definido"
ROTULO_NAO_ATRIBUIDO = "Não atribuído"


class ChamadoStatus(Enum):
    """
    Estados possíveis de um chamado.

    Apenas chamados ABERTO participam da triagem automática.
    """

    ABERTO = "Aberto"
    EM_ANDAMENTO = "Em andamento"
    CONCLUIDO = "Concluído"

    @classmethod
    def from_string(cls, value: str) -> "ChamadoStatus":
        """
        Converte string para enum.

        Args:
            value: Valor string (nome ou valor do enum)

        Returns:
            ChamadoStatus correspondente

        Raises:
            ValidationError: Se valor inválido
        """
        # Tenta pelo nome (EM_ANDAMENTO)
        try:
            return cls[value.upper().replace(" ", "_")]
        except KeyError:
            pass

        # Tenta pelo valor ("Em andamento")
        for status in cls:
            if status.value.lower() == value.lower():
                return status

        raise ValidationError(f"Status inválido: {value}", field="status")


@dataclass
class ChamadoEntity:
    """
    Entidade de Domínio: Chamado.

    Invariantes:
    - solicitante_id é obrigatório
    - status CONCLUIDO ⇔ data_fim preenchida
    - Nunca é removido fisicamente

    Attributes:
        id: Identificador (None até ser persistido)
        titulo: Título descritivo
        descricao: Texto livre do problema
        data_inicio: Data/hora de abertura
        data_fim: Data/hora de conclusão
        status: Estado atual
        solicitante_id: Usuário que abriu o chamado
        atendente_id: Responsável atual (opcional)
        criterio_prioridade_id: Critério de prioridade (opcional)
        prioridade_id: Prioridade (opcional)
    """

    id: Optional[int] = None
    titulo: str = ""
    descricao: str = ""
    data_inicio: Optional[datetime] = None
    data_fim: Optional[datetime] = None
    status: ChamadoStatus = ChamadoStatus.ABERTO
    solicitante_id: Optional[int] = None
    atendente_id: Optional[int] = None
    criterio_prioridade_id: Optional[int] = None
    prioridade_id: Optional[int] = None

    TITULO_MAX_LENGTH = 200

    @classmethod
    def criar(
        cls,
        titulo: str,
        descricao: str,
        solicitante_id: int,
        agora: datetime,
        criterio_prioridade_id: Optional[int] = None,
        prioridade_id: Optional[int] = None,
    ) -> "ChamadoEntity":
        """
        Factory method para abrir um chamado com validações.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        if not titulo or not titulo.strip():
            raise ValidationError("Título é obrigatório", field="titulo")
        if len(titulo.strip()) > cls.TITULO_MAX_LENGTH:
            raise ValidationError(
                f"Título deve ter no máximo {cls.TITULO_MAX_LENGTH} caracteres",
                field="titulo"
            )
        if not solicitante_id:
            raise ValidationError("Solicitante é obrigatório", field="solicitante_id")

        return cls(
            titulo=titulo.strip(),
            descricao=(descricao or "").strip(),
            data_inicio=agora,
            status=ChamadoStatus.ABERTO,
            solicitante_id=solicitante_id,
            criterio_prioridade_id=criterio_prioridade_id,
            prioridade_id=prioridade_id,
        )

    def alterar_status(self, novo_status: ChamadoStatus, agora: datetime) -> ChamadoStatus:
        """
        Altera status mantendo o invariante da data de fim.

        Concluir preenche data_fim com `agora`; qualquer outro status
        limpa data_fim (reabertura).

        Returns:
            Status anterior
        """
        anterior = self.status
        self.status = novo_status
        if novo_status == ChamadoStatus.CONCLUIDO:
            self.data_fim = agora
        else:
            self.data_fim = None
        return anterior

    def atribuir_a(self, atendente_id: Optional[int]) -> Optional[int]:
        """
        Define o responsável (None remove a atribuição).

        Returns:
            Responsável anterior
        """
        anterior = self.atendente_id
        self.atendente_id = atendente_id
        return anterior

    def situacao(self, agora: datetime) -> Situacao:
        """Situação derivada no instante `agora`."""
        return classificar_situacao(self.status, self.data_inicio, agora)

    @property
    def esta_aberto(self) -> bool:
        return self.status == ChamadoStatus.ABERTO

    @property
    def esta_atribuido(self) -> bool:
        return self.atendente_id is not None

    def __repr__(self) -> str:
        return (
            f"ChamadoEntity("
            f"id={self.id}, "
            f"titulo='{self.titulo[:20]}', "
            f"status={self.status.value}, "
            f"atendente_id={self.atendente_id}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChamadoEntity):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)


@dataclass
class UsuarioEntity:
    """
    Usuário do sistema (solicitante ou atendente).

    Nunca é removido; desativação via `ativo=False`.
    """

    id: int
    nome: str
    setor_id: Optional[int] = None
    cargo_id: Optional[int] = None
    ativo: bool = True
    email: str = ""

    def elegivel_para_triagem(
        self,
        cargos_excluidos: AbstractSet[int],
        usuario_sistema_id: int,
    ) -> bool:
        """
        Pode receber chamados redistribuídos?

        Exige usuário ativo, fora dos cargos de supervisão e que não
        seja a identidade reservada do sistema.
        """
        return (
            self.ativo
            and self.id != usuario_sistema_id
            and self.cargo_id not in cargos_excluidos
        )


@dataclass
class SetorEntity:
    """Setor (departamento). Dado de referência."""

    id: int
    descricao: str


@dataclass
class HistoricoChamadoEntry:
    """
    Registro de auditoria de um chamado. Append-only.

    Attributes:
        chamado_id: Chamado afetado
        usuario_id: Quem agiu (usuário real ou identidade do sistema)
        acao_tomada: Texto livre descrevendo a ação
        data: Momento da ação
    """

    chamado_id: int
    usuario_id: int
    acao_tomada: str
    data: datetime
    id: Optional[int] = None

    @classmethod
    def alteracao_de_campo(
        cls,
        chamado_id: int,
        usuario_id: int,
        campo: str,
        valor_antigo: Optional[str],
        valor_novo: Optional[str],
        data: datetime,
    ) -> "HistoricoChamadoEntry":
        """
        Registro padronizado de alteração de campo.

        Example:
            Alterou o campo Responsavel de "Não definido" para "Ana"
        """
        antigo = valor_antigo if valor_antigo else ROTULO_NAO_DEFINIDO
        novo = valor_novo if valor_novo else ROTULO_NAO_DEFINIDO
        return cls(
            chamado_id=chamado_id,
            usuario_id=usuario_id,
            acao_tomada=f'Alterou o campo {campo} de "{antigo}" para "{novo}"',
            data=data,
        )
