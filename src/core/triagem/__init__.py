"""
Domínio de Triagem - Redistribuição automática de chamados.

- TriagemConfig: parâmetros (intervalo, cargos excluídos, usuário do sistema)
- calcular_redistribuicao: cálculo puro das trocas (round-robin por setor)
- RedistribuirChamadosService: execução transacional com auditoria
"""

from .config import TriagemConfig
from .dtos import Reatribuicao, ResultadoTriagemDTO, ResumoSetorDTO
from .use_cases import RedistribuirChamadosService, calcular_redistribuicao

__all__ = [
    "TriagemConfig",
    "Reatribuicao",
    "ResultadoTriagemDTO",
    "ResumoSetorDTO",
    "RedistribuirChamadosService",
    "calcular_redistribuicao",
]
