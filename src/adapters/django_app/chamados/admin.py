"""
Django Admin para o domínio de Chamados.

A coluna de situação usa o mesmo classificador do Core, com o
horário local configurado em TIME_ZONE.
"""

from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from src.core.chamados.situacao import Situacao, classificar_situacao

from .models import (
    CargoModel,
    ChamadoModel,
    CriterioPrioridadeModel,
    HistoricoChamadoModel,
    PrioridadeModel,
    SetorModel,
    UsuarioModel,
)


CORES_SITUACAO = {
    Situacao.FINALIZADO: '#343a40',
    Situacao.NO_PRAZO: '#28a745',
    Situacao.ATENCAO: '#ffc107',
    Situacao.ATRASADO: '#dc3545',
}


class HistoricoInline(admin.TabularInline):
    model = HistoricoChamadoModel
    extra = 0
    can_delete = False
    readonly_fields = ['usuario', 'acao_tomada', 'data']
    ordering = ['-data', '-id']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ChamadoModel)
class ChamadoAdmin(admin.ModelAdmin):
    """Admin para ChamadoModel."""

    list_display = [
        'id',
        'titulo',
        'status',
        'situacao_badge',
        'solicitante',
        'atendente',
        'data_inicio',
        'data_fim',
    ]

    list_filter = [
        'status',
        'atendente__setor',
        'data_inicio',
    ]

    search_fields = [
        'id',
        'titulo',
        'solicitante__nome',
        'atendente__nome',
    ]

    list_select_related = ['solicitante', 'atendente']

    readonly_fields = ['data_inicio', 'data_fim']

    inlines = [HistoricoInline]

    date_hierarchy = 'data_inicio'

    def situacao_badge(self, obj):
        """Exibe situação calculada com badge colorido."""
        situacao = classificar_situacao(obj.status, obj.data_inicio, timezone.localtime())
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            CORES_SITUACAO[situacao],
            situacao.value
        )
    situacao_badge.short_description = 'Situação'


@admin.register(HistoricoChamadoModel)
class HistoricoChamadoAdmin(admin.ModelAdmin):
    """Admin para histórico de chamados (somente leitura)."""

    list_display = ['id', 'chamado', 'usuario', 'acao_tomada', 'data']
    list_filter = ['data']
    search_fields = ['chamado__id', 'acao_tomada', 'usuario__nome']
    readonly_fields = ['chamado', 'usuario', 'acao_tomada', 'data']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(UsuarioModel)
class UsuarioAdmin(admin.ModelAdmin):
    list_display = ['id', 'nome', 'email', 'setor', 'cargo', 'ativo']
    list_filter = ['ativo', 'setor', 'cargo']
    search_fields = ['nome', 'email']


admin.site.register(SetorModel)
admin.site.register(CargoModel)
admin.site.register(PrioridadeModel)
admin.site.register(CriterioPrioridadeModel)
