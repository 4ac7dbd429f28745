"""
URL patterns para o domínio de Chamados.

Endpoints API JSON:
- GET  /chamados/api/ - Buscar chamados
- GET  /chamados/api/painel/ - Painel por situação
- POST /chamados/api/triagem/executar/ - Executar triagem
- GET  /chamados/api/<id>/ - Detalhe
- POST /chamados/api/<id>/status/ - Alterar status
- POST /chamados/api/<id>/responsavel/ - Reatribuir
"""

from django.urls import path
from . import api_views

app_name = 'chamados'

urlpatterns = [
    path('api/', api_views.ChamadoAPIListView.as_view(), name='api_list'),

    # Antes do <pk> para não conflitar
    path('api/painel/', api_views.ChamadoAPIPainelView.as_view(), name='api_painel'),
    path('api/triagem/executar/', api_views.TriagemAPIExecutarView.as_view(), name='api_triagem_executar'),

    path('api/<int:pk>/', api_views.ChamadoAPIDetailView.as_view(), name='api_detail'),
    path('api/<int:pk>/status/', api_views.ChamadoAPIStatusView.as_view(), name='api_status'),
    path('api/<int:pk>/responsavel/', api_views.ChamadoAPIResponsavelView.as_view(), name='api_responsavel'),
]
