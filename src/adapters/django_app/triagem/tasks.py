"""
Tarefas Celery da Triagem automática.

`redistribuir_chamados` roda pelo Celery Beat a cada
TRIAGEM_INTERVALO_MINUTOS e, opcionalmente, logo que o worker sobe.

Garantias:
- Uma execução por vez (lock no cache compartilhado)
- Falha em uma execução não derruba o agendamento: a tarefa loga,
  retorna None e a próxima batida do Beat tenta de novo
- Shutdown do worker cancela a execução em andamento antes do commit

Uso:
    # Worker consumindo a fila da triagem
    celery -A src.config.celery worker -Q default,events,triagem -l INFO

    # Execução manual
    redistribuir_chamados.delay()
"""

import logging
import threading
from typing import Any, Dict, Optional

from celery import shared_task
from celery.signals import worker_ready, worker_shutting_down
from django.conf import settings

from src.core.shared.exceptions import OperationCancelledError
from src.adapters.django_app.shared.locks import single_flight

logger = logging.getLogger(__name__)

LOCK_TRIAGEM = "triagem:redistribuir-chamados"

# Sinalizado no shutdown do worker; consultado pelo service antes de gravar
_desligando = threading.Event()


@shared_task(bind=True, max_retries=0, ignore_result=False)
def redistribuir_chamados(self) -> Optional[Dict[str, Any]]:
    """
    Executa uma rodada de redistribuição de chamados abertos.

    Returns:
        Resumo da execução (ResultadoTriagemDTO.to_dict()), ou None se
        a execução foi pulada, cancelada ou falhou
    """
    try:
        with single_flight(LOCK_TRIAGEM, settings.TRIAGEM_LOCK_TIMEOUT_SEGUNDOS) as adquirido:
            if not adquirido:
                logger.info("[TRIAGEM] Execução anterior ainda em andamento; pulando")
                return None

            logger.info("[TRIAGEM] Iniciando redistribuição de chamados...")

            # Importação tardia para evitar circular import
            from src.config.container import get_container

            service = get_container().redistribuir_chamados_service()
            resultado = service.execute(deve_cancelar=_desligando.is_set)

        logger.info(
            f"[TRIAGEM] Concluída: {resultado.total_alterados} alterações em "
            f"{len(resultado.setores)} setores"
        )
        return resultado.to_dict()

    except OperationCancelledError:
        logger.warning("[TRIAGEM] Execução cancelada pelo desligamento do worker")
        return None

    except Exception as e:
        # Inclui falhas do cache ao adquirir o lock
        logger.error(f"[TRIAGEM] Erro ao redistribuir chamados: {e}", exc_info=True)
        return None


@worker_shutting_down.connect
def _ao_desligar_worker(sig=None, how=None, exitcode=None, **kwargs) -> None:
    logger.info(f"[TRIAGEM] Worker desligando ({how}); execuções em andamento serão canceladas")
    _desligando.set()


@worker_ready.connect
def _ao_iniciar_worker(sender=None, **kwargs) -> None:
    """Primeira execução assim que o worker fica pronto."""
    _desligando.clear()
    if getattr(settings, 'TRIAGEM_EXECUTAR_AO_INICIAR', False):
        logger.info("[TRIAGEM] Agendando execução inicial")
        redistribuir_chamados.delay()
