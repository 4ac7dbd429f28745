"""
Django Models para o domínio de Chamados.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/chamados/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Tabelas:
- SetorModel, CargoModel: dados de referência
- UsuarioModel: solicitantes e atendentes
- PrioridadeModel, CriterioPrioridadeModel: classificação de prioridade
- ChamadoModel: tabela principal
- HistoricoChamadoModel: auditoria append-only
"""

from django.db import models
from django.utils import timezone


class ChamadoStatusChoices(models.TextChoices):
    """Choices para status de chamado (espelha ChamadoStatus do Core)."""
    ABERTO = 'Aberto', 'Aberto'
    EM_ANDAMENTO = 'Em andamento', 'Em andamento'
    CONCLUIDO = 'Concluído', 'Concluído'


class SetorModel(models.Model):
    """Setor (departamento) que agrupa atendentes."""

    descricao = models.CharField(max_length=100, help_text="Nome do setor")

    class Meta:
        db_table = 'setores'
        verbose_name = 'Setor'
        verbose_name_plural = 'Setores'
        ordering = ['id']

    def __str__(self):
        return self.descricao


class CargoModel(models.Model):
    """Cargo do usuário. Cargos de supervisão ficam fora da triagem."""

    descricao = models.CharField(max_length=100, help_text="Nome do cargo")

    class Meta:
        db_table = 'cargos'
        verbose_name = 'Cargo'
        verbose_name_plural = 'Cargos'
        ordering = ['id']

    def __str__(self):
        return self.descricao


class UsuarioModel(models.Model):
    """
    Usuário do helpdesk (solicitante ou atendente).

    Nunca é removido: desativação via `ativo=False`.
    """

    nome = models.CharField(max_length=150, help_text="Nome de exibição")

    email = models.EmailField(blank=True, default='')

    setor = models.ForeignKey(
        SetorModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='usuarios',
        help_text="Setor do usuário (opcional)"
    )

    cargo = models.ForeignKey(
        CargoModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='usuarios',
    )

    ativo = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'usuarios'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['id']

    def __str__(self):
        return self.nome


class PrioridadeModel(models.Model):
    descricao = models.CharField(max_length=50)

    class Meta:
        db_table = 'prioridades'
        verbose_name = 'Prioridade'
        verbose_name_plural = 'Prioridades'

    def __str__(self):
        return self.descricao


class CriterioPrioridadeModel(models.Model):
    descricao = models.CharField(max_length=200)

    prioridade = models.ForeignKey(
        PrioridadeModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='criterios',
    )

    class Meta:
        db_table = 'criterios_prioridade'
        verbose_name = 'Critério de Prioridade'
        verbose_name_plural = 'Critérios de Prioridade'

    def __str__(self):
        return self.descricao


class ChamadoModel(models.Model):
    """
    Model Django para persistência de Chamados.

    Fields:
        titulo: Título do chamado
        descricao: Texto livre do problema
        data_inicio: Abertura
        data_fim: Conclusão (preenchida só quando Concluído)
        status: Estado atual (choices)
        solicitante: Quem abriu (obrigatório)
        atendente: Responsável atual (opcional)
        criterio_prioridade / prioridade: classificação (opcionais)
    """

    titulo = models.CharField(
        max_length=200,
        db_index=True,
        help_text="Título descritivo do chamado"
    )

    descricao = models.TextField(blank=True, default='')

    data_inicio = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de abertura"
    )

    data_fim = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Data/hora de conclusão"
    )

    status = models.CharField(
        max_length=20,
        choices=ChamadoStatusChoices.choices,
        default=ChamadoStatusChoices.ABERTO,
        db_index=True,
    )

    solicitante = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        related_name='chamados_solicitados',
    )

    atendente = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='chamados_atendidos',
    )

    criterio_prioridade = models.ForeignKey(
        CriterioPrioridadeModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
    )

    prioridade = models.ForeignKey(
        PrioridadeModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = 'chamados'
        verbose_name = 'Chamado'
        verbose_name_plural = 'Chamados'
        ordering = ['-id']
        indexes = [
            models.Index(fields=['status', 'id'], name='chamados_status_id_idx'),
            models.Index(fields=['atendente', 'status'], name='chamados_atendente_status_idx'),
        ]

    def __str__(self):
        return f"#{self.id} {self.titulo}"


class HistoricoChamadoModel(models.Model):
    """
    Histórico de ações em chamados. Append-only.

    Registros da triagem automática usam o usuário do sistema.
    """

    chamado = models.ForeignKey(
        ChamadoModel,
        on_delete=models.PROTECT,
        related_name='historico',
    )

    usuario = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        related_name='acoes',
        help_text="Quem agiu (usuário real ou sistema)"
    )

    acao_tomada = models.TextField()

    data = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'historico_chamado'
        verbose_name = 'Histórico de Chamado'
        verbose_name_plural = 'Histórico de Chamados'
        ordering = ['-data', '-id']
        indexes = [
            models.Index(fields=['chamado', 'data'], name='historico_chamado_data_idx'),
        ]

    def __str__(self):
        return f"#{self.chamado_id} @ {self.data}: {self.acao_tomada[:50]}"
