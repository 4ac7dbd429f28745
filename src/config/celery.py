"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de forma assíncrona
- Triagem automática de chamados (agendada pelo Beat)
- Notificações

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -Q default,events,notifications,triagem -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

# Criar aplicação Celery
app = Celery('helpdesk')

# Carregar configurações do Django (broker, backend, eager nos testes)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    # Monitoramento
    worker_send_task_events=True,
    task_send_sent_event=True,
)

# Definir filas
app.conf.task_default_queue = 'default'
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
    Queue('triagem', Exchange('triagem'), routing_key='triagem.#'),
)

# Roteamento de tarefas para filas
app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.notify_user': {'queue': 'notifications'},
    'src.adapters.django_app.events.handlers.*': {'queue': 'events'},
    'src.adapters.django_app.triagem.tasks.*': {'queue': 'triagem'},
}

# Auto-descoberta de tarefas nos apps Django
app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')
app.autodiscover_tasks(['src.adapters.django_app.triagem'])


# Tarefas agendadas (beat)
@app.on_after_finalize.connect
def agendar_triagem(sender, **kwargs):
    """
    Redistribuir chamados abertos entre os atendentes de cada setor.

    O intervalo vem da TriagemConfig do container (TRIAGEM_INTERVALO_MINUTOS),
    lida depois que o settings do Django já está disponível.
    """
    from src.config.container import get_container

    intervalo = get_container().triagem_config().intervalo_minutos
    sender.add_periodic_task(
        intervalo * 60.0,
        sender.signature('src.adapters.django_app.triagem.tasks.redistribuir_chamados'),
        name='redistribuir-chamados',
        queue='triagem',
    )
