"""
Domínio de Chamados - Atendimento de Suporte.

Este módulo contém a lógica de negócio dos chamados:
- Entidades (ChamadoEntity, ChamadoStatus, UsuarioEntity, SetorEntity)
- Classificação de situação (No Prazo, Atencao, Atrasado, Finalizado)
- Use Cases (busca, painel, detalhe, status, responsável)
- Domain Events (ResponsavelAlterado, StatusAlterado)
- Ports (Interfaces para repositórios)
"""

from .entities import (
    ChamadoEntity,
    ChamadoStatus,
    HistoricoChamadoEntry,
    SetorEntity,
    UsuarioEntity,
)
from .situacao import Situacao, classificar_situacao, contar_por_situacao
from .events import ResponsavelAlteradoEvent, StatusAlteradoEvent
from .ports import (
    ChamadoRepository,
    HistoricoRepository,
    SetorRepository,
    UsuarioRepository,
)
from .use_cases import (
    AlterarStatusService,
    AtribuirResponsavelService,
    ListarChamadosService,
    ObterChamadoService,
    PainelSituacaoService,
)

__all__ = [
    # Entities
    "ChamadoEntity",
    "ChamadoStatus",
    "HistoricoChamadoEntry",
    "SetorEntity",
    "UsuarioEntity",
    # Situação
    "Situacao",
    "classificar_situacao",
    "contar_por_situacao",
    # Events
    "ResponsavelAlteradoEvent",
    "StatusAlteradoEvent",
    # Ports
    "ChamadoRepository",
    "HistoricoRepository",
    "SetorRepository",
    "UsuarioRepository",
    # Use Cases
    "AlterarStatusService",
    "AtribuirResponsavelService",
    "ListarChamadosService",
    "ObterChamadoService",
    "PainelSituacaoService",
]
