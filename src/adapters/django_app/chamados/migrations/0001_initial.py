"""
Migration inicial para o domínio de Chamados.

Cria as tabelas:
- setores, cargos: dados de referência
- usuarios: solicitantes e atendentes
- prioridades, criterios_prioridade: classificação
- chamados: tabela principal
- historico_chamado: auditoria append-only
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='SetorModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('descricao', models.CharField(help_text='Nome do setor', max_length=100)),
            ],
            options={
                'verbose_name': 'Setor',
                'verbose_name_plural': 'Setores',
                'db_table': 'setores',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='CargoModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('descricao', models.CharField(help_text='Nome do cargo', max_length=100)),
            ],
            options={
                'verbose_name': 'Cargo',
                'verbose_name_plural': 'Cargos',
                'db_table': 'cargos',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='PrioridadeModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('descricao', models.CharField(max_length=50)),
            ],
            options={
                'verbose_name': 'Prioridade',
                'verbose_name_plural': 'Prioridades',
                'db_table': 'prioridades',
            },
        ),
        migrations.CreateModel(
            name='CriterioPrioridadeModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('descricao', models.CharField(max_length=200)),
                ('prioridade', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='criterios',
                    to='chamados.prioridademodel'
                )),
            ],
            options={
                'verbose_name': 'Critério de Prioridade',
                'verbose_name_plural': 'Critérios de Prioridade',
                'db_table': 'criterios_prioridade',
            },
        ),
        migrations.CreateModel(
            name='UsuarioModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(help_text='Nome de exibição', max_length=150)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('ativo', models.BooleanField(db_index=True, default=True)),
                ('cargo', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='usuarios',
                    to='chamados.cargomodel'
                )),
                ('setor', models.ForeignKey(
                    blank=True,
                    help_text='Setor do usuário (opcional)',
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='usuarios',
                    to='chamados.setormodel'
                )),
            ],
            options={
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'db_table': 'usuarios',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='ChamadoModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('titulo', models.CharField(db_index=True, help_text='Título descritivo do chamado', max_length=200)),
                ('descricao', models.TextField(blank=True, default='')),
                ('data_inicio', models.DateTimeField(
                    db_index=True,
                    default=django.utils.timezone.now,
                    help_text='Data/hora de abertura'
                )),
                ('data_fim', models.DateTimeField(blank=True, help_text='Data/hora de conclusão', null=True)),
                ('status', models.CharField(
                    choices=[
                        ('Aberto', 'Aberto'),
                        ('Em andamento', 'Em andamento'),
                        ('Concluído', 'Concluído'),
                    ],
                    db_index=True,
                    default='Aberto',
                    max_length=20
                )),
                ('atendente', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='chamados_atendidos',
                    to='chamados.usuariomodel'
                )),
                ('criterio_prioridade', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    to='chamados.criterioprioridademodel'
                )),
                ('prioridade', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    to='chamados.prioridademodel'
                )),
                ('solicitante', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='chamados_solicitados',
                    to='chamados.usuariomodel'
                )),
            ],
            options={
                'verbose_name': 'Chamado',
                'verbose_name_plural': 'Chamados',
                'db_table': 'chamados',
                'ordering': ['-id'],
            },
        ),
        migrations.CreateModel(
            name='HistoricoChamadoModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('acao_tomada', models.TextField()),
                ('data', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('chamado', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='historico',
                    to='chamados.chamadomodel'
                )),
                ('usuario', models.ForeignKey(
                    help_text='Quem agiu (usuário real ou sistema)',
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='acoes',
                    to='chamados.usuariomodel'
                )),
            ],
            options={
                'verbose_name': 'Histórico de Chamado',
                'verbose_name_plural': 'Histórico de Chamados',
                'db_table': 'historico_chamado',
                'ordering': ['-data', '-id'],
            },
        ),
        migrations.AddIndex(
            model_name='chamadomodel',
            index=models.Index(fields=['status', 'id'], name='chamados_status_id_idx'),
        ),
        migrations.AddIndex(
            model_name='chamadomodel',
            index=models.Index(fields=['atendente', 'status'], name='chamados_atendente_status_idx'),
        ),
        migrations.AddIndex(
            model_name='historicochamadomodel',
            index=models.Index(fields=['chamado', 'data'], name='historico_chamado_data_idx'),
        ),
    ]
