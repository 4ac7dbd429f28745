"""
Parâmetros da triagem automática.

Valores vêm das settings (TRIAGEM_*) via container de DI; os defaults
abaixo reproduzem o comportamento de produção.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional


CARGOS_EXCLUIDOS_PADRAO = frozenset({8, 9, 10})
USUARIO_SISTEMA_PADRAO = 2006


@dataclass(frozen=True)
class TriagemConfig:
    """
    Attributes:
        intervalo_minutos: Intervalo entre execuções agendadas
        cargos_excluidos: Cargos de supervisão que não recebem chamados
        usuario_sistema_id: Identidade do sistema/bot (autora do histórico)
    """

    intervalo_minutos: int = 30
    cargos_excluidos: FrozenSet[int] = field(default=CARGOS_EXCLUIDOS_PADRAO)
    usuario_sistema_id: int = USUARIO_SISTEMA_PADRAO

    def __post_init__(self):
        if self.intervalo_minutos <= 0:
            raise ValueError("intervalo_minutos deve ser positivo")

    @classmethod
    def criar(
        cls,
        intervalo_minutos: Optional[int] = None,
        cargos_excluidos: Optional[Iterable[int]] = None,
        usuario_sistema_id: Optional[int] = None,
    ) -> "TriagemConfig":
        """Monta a config a partir de valores crus (None usa o default)."""
        padrao = cls()
        return cls(
            intervalo_minutos=(
                int(intervalo_minutos)
                if intervalo_minutos is not None else padrao.intervalo_minutos
            ),
            cargos_excluidos=(
                frozenset(int(c) for c in cargos_excluidos)
                if cargos_excluidos is not None else padrao.cargos_excluidos
            ),
            usuario_sistema_id=(
                int(usuario_sistema_id)
                if usuario_sistema_id is not None else padrao.usuario_sistema_id
            ),
        )
