"""
Domain Events do Domínio de Chamados.

Eventos:
- ResponsavelAlteradoEvent: Responsável do chamado mudou (triagem ou manual)
- StatusAlteradoEvent: Status do chamado mudou

Uso:
    with uow:
        chamado_repo.atualizar_responsavel(...)
        uow.publish_event(ResponsavelAlteradoEvent(...))
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


ORIGEM_TRIAGEM = "triagem"
ORIGEM_MANUAL = "manual"


@dataclass
class ResponsavelAlteradoEvent(DomainEvent):
    """
    Evento: Responsável do chamado foi alterado.

    Handlers típicos:
    - Notificar o novo atendente

    Attributes:
        atendente_anterior_id: Responsável antes da mudança (None se não havia)
        atendente_novo_id: Novo responsável
        alterado_por_id: Quem alterou (identidade do sistema na triagem)
        origem: "triagem" ou "manual"
    """

    atendente_anterior_id: Optional[int] = None
    atendente_novo_id: Optional[int] = None
    alterado_por_id: Optional[int] = None
    origem: str = ORIGEM_MANUAL

    @property
    def aggregate_type(self) -> str:
        return "Chamado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "atendente_anterior_id": self.atendente_anterior_id,
            "atendente_novo_id": self.atendente_novo_id,
            "alterado_por_id": self.alterado_por_id,
            "origem": self.origem,
        }


@dataclass
class StatusAlteradoEvent(DomainEvent):
    """
    Evento: Status do chamado foi alterado.

    Attributes:
        status_anterior: Valor do status antes da mudança
        status_novo: Valor do status após a mudança
        alterado_por_id: Quem alterou
    """

    status_anterior: str = ""
    status_novo: str = ""
    alterado_por_id: Optional[int] = None

    @property
    def aggregate_type(self) -> str:
        return "Chamado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "status_anterior": self.status_anterior,
            "status_novo": self.status_novo,
            "alterado_por_id": self.alterado_por_id,
        }
