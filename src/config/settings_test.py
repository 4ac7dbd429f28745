"""
Settings para a suíte de testes.

Banco SQLite em memória, cache local e Celery em modo eager:
nenhum serviço externo é necessário.
"""

from .settings import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'testes',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

EVENT_PUBLISHER_MODE = 'sync'

# Mensagens ficam em django.core.mail.outbox
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

TRIAGEM_EXECUTAR_AO_INICIAR = False

# Logs do projeto propagam até o root para que o `caplog` os capture
for _logger in ('src.core', 'src.adapters'):
    LOGGING['loggers'][_logger]['propagate'] = True  # noqa: F405
