"""
Locks distribuídos sobre o cache do Django.

Usado pelas tarefas agendadas para garantir que apenas uma execução
esteja em andamento por vez, mesmo com vários workers Celery. Com
Redis configurado (REDIS_URL) o lock vale entre processos; com
LocMemCache vale apenas dentro do processo.
"""

from contextlib import contextmanager
from typing import Iterator
import logging
import os
import socket

from django.core.cache import cache

logger = logging.getLogger(__name__)


def _dono() -> str:
    return f"{socket.gethostname()}:{os.getpid()}"


@contextmanager
def single_flight(chave: str, timeout: int) -> Iterator[bool]:
    """
    Tenta adquirir o lock `chave` sem bloquear.

    `cache.add` só grava se a chave não existir, o que torna a
    aquisição atômica no Redis. O `timeout` expira o lock caso o
    worker morra sem liberar.

    Yields:
        True se adquiriu (o bloco deve executar), False caso contrário

    Raises:
        Erros do backend de cache na aquisição (ex.: Redis fora do ar)

    Example:
        with single_flight("triagem:lock", 1500) as adquirido:
            if not adquirido:
                return None
            service.execute()
    """
    dono = _dono()
    adquirido = cache.add(chave, dono, timeout)

    if not adquirido:
        logger.info(f"[LOCK] {chave} em uso por {cache.get(chave)}")

    try:
        yield adquirido
    finally:
        if adquirido:
            _liberar(chave, dono)


def _liberar(chave: str, dono: str) -> None:
    """
    Libera o lock se ainda for o dono (o lock pode ter expirado).

    Falha do cache aqui não propaga: o resultado do bloco já está
    definido e o lock expira sozinho pelo timeout.
    """
    try:
        if cache.get(chave) == dono:
            cache.delete(chave)
        else:
            logger.warning(f"[LOCK] {chave} expirou antes do fim da execução")
    except Exception as e:
        logger.error(f"[LOCK] Falha ao liberar {chave}: {e}", exc_info=True)
