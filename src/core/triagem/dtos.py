"""
DTOs da Triagem.

- Reatribuicao: uma troca de responsável planejada
- ResumoSetorDTO: números de um setor em uma execução
- ResultadoTriagemDTO: resultado completo de uma execução
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class Reatribuicao:
    """Troca de responsável calculada para um chamado."""

    chamado_id: int
    setor_id: int
    atendente_anterior_id: Optional[int]
    atendente_novo_id: int


@dataclass
class ResumoSetorDTO:
    """
    Attributes:
        setor_id: Setor processado
        total_chamados: Chamados candidatos distribuídos no setor
        total_atendentes: Atendentes elegíveis do setor
        alterados: Chamados que efetivamente trocaram de responsável
        conflitos: Trocas descartadas por alteração concorrente
    """

    setor_id: int
    total_chamados: int
    total_atendentes: int
    alterados: int = 0
    conflitos: int = 0

    def to_dict(self) -> dict:
        return {
            "setor_id": self.setor_id,
            "total_chamados": self.total_chamados,
            "total_atendentes": self.total_atendentes,
            "alterados": self.alterados,
            "conflitos": self.conflitos,
        }


@dataclass
class ResultadoTriagemDTO:
    """Resultado de uma execução da triagem."""

    executado_em: datetime
    setores: List[ResumoSetorDTO] = field(default_factory=list)

    @property
    def total_alterados(self) -> int:
        return sum(s.alterados for s in self.setores)

    @property
    def total_conflitos(self) -> int:
        return sum(s.conflitos for s in self.setores)

    def to_dict(self) -> dict:
        return {
            "executado_em": self.executado_em.isoformat(),
            "total_alterados": self.total_alterados,
            "total_conflitos": self.total_conflitos,
            "setores": [s.to_dict() for s in self.setores],
        }
