"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados após o commit de um caso de uso.

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento

`event_data` é o resultado de `DomainEvent.to_dict()`: os campos
específicos do evento ficam em `event_data['data']`.
"""

import logging
from typing import Any, Dict, Optional

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

ASSUNTO_PADRAO = "Helpdesk de Chamados"


# =============================================================================
# Event Handlers - Chamados
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_responsavel_alterado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento ResponsavelAlteradoEvent.

    Ações:
    - Notificar o novo atendente
    - Registrar métrica por origem (triagem ou manual)

    Args:
        event_data: Dados do evento serializado
    """
    try:
        chamado_id = event_data.get('aggregate_id')
        dados = event_data.get('data', {})
        novo_id = dados.get('atendente_novo_id')
        origem = dados.get('origem', 'manual')

        logger.info(
            f"[HANDLER] ResponsavelAlterado: chamado {chamado_id} | "
            f"{dados.get('atendente_anterior_id')} -> {novo_id} | origem={origem}"
        )

        if novo_id is not None:
            notify_user.delay(
                user_id=novo_id,
                message=f"Você é o novo responsável pelo chamado #{chamado_id}.",
                subject=f"Chamado #{chamado_id} atribuído a você",
            )

        record_metric.delay(
            metric_name='chamados_reatribuidos',
            value=1,
            tags={'origem': origem}
        )

    except Exception as e:
        logger.error(f"Erro no handler ResponsavelAlterado: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_status_alterado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento StatusAlteradoEvent.

    Args:
        event_data: Dados do evento serializado
    """
    try:
        chamado_id = event_data.get('aggregate_id')
        dados = event_data.get('data', {})
        status_novo = dados.get('status_novo')

        logger.info(
            f"[HANDLER] StatusAlterado: chamado {chamado_id} | "
            f"{dados.get('status_anterior')} -> {status_novo}"
        )

        record_metric.delay(
            metric_name='chamados_status_alterado',
            value=1,
            tags={'status': status_novo}
        )

    except Exception as e:
        logger.error(f"Erro no handler StatusAlterado: {e}", exc_info=True)
        raise


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados.

    Args:
        event_type: Tipo do evento (ex: 'ResponsavelAlteradoEvent')
        event_data: Dados do evento serializado
    """
    handlers = {
        'ResponsavelAlteradoEvent': handle_responsavel_alterado,
        'StatusAlteradoEvent': handle_status_alterado,
    }

    handler = handlers.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Notification / Metric Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(
    self,
    user_id: int,
    message: str,
    subject: str = ASSUNTO_PADRAO,
) -> bool:
    """
    Notifica usuário por e-mail.

    Usuário inexistente ou sem e-mail cadastrado não é erro: a
    notificação é descartada e fica registrada no log. Falha de envio
    (SMTP fora) é reenfileirada.

    Args:
        user_id: ID do usuário
        message: Corpo da mensagem
        subject: Assunto do e-mail

    Returns:
        True se o e-mail foi enviado
    """
    from src.adapters.django_app.chamados.models import UsuarioModel

    usuario = UsuarioModel.objects.filter(pk=user_id).first()
    if usuario is None or not usuario.email:
        logger.warning(f"[NOTIFICATION] Usuário {user_id} sem e-mail; notificação descartada")
        return False

    try:
        send_mail(
            subject,
            message,
            settings.DEFAULT_FROM_EMAIL,
            [usuario.email],
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"[NOTIFICATION] Falha ao enviar e-mail para {usuario.email}: {e}")
        raise self.retry(exc=e)

    logger.info(f"[NOTIFICATION] EMAIL para {usuario.email}: {subject}")
    return True


@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Optional[Dict[str, str]] = None
) -> None:
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")
