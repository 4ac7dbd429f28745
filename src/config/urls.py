"""
URL Configuration para o Helpdesk de Chamados.

Estrutura:
- /admin/ - Django Admin
- /chamados/api/ - API JSON de Chamados
- /health/ - Health check
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path

urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),

    # Chamados App
    path('chamados/', include('src.adapters.django_app.chamados.urls')),

    # Health check
    path('health/', lambda r: JsonResponse({'status': 'ok'})),
]
