"""
Configuração do projeto Helpdesk de Chamados.

Módulos:
- settings: Configurações Django
- settings_test: Configurações para a suíte de testes
- urls: Rotas principais
- wsgi: WSGI application
- celery: Configuração Celery (eventos e triagem agendada)
- container: Dependency Injection Container
"""

# Importar app Celery para que seja carregado com Django
from .celery import app as celery_app

__all__ = ('celery_app',)
