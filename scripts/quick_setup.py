#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria dados de exemplo (opcional): setores, cargos, usuários
   (incluindo o usuário do sistema usado pela triagem) e chamados

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
    python scripts/quick_setup.py --with-sample-data --run-triagem
"""

import os
import sys
import argparse
from datetime import timedelta

# Adicionar raiz do projeto ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """Cria dados de exemplo."""
    from django.conf import settings
    from django.utils import timezone
    from src.adapters.django_app.chamados.models import (
        CargoModel,
        ChamadoModel,
        SetorModel,
        UsuarioModel,
    )

    print("🏢 Criando setores e cargos...")

    infra, _ = SetorModel.objects.get_or_create(descricao='Infraestrutura')
    sistemas, _ = SetorModel.objects.get_or_create(descricao='Sistemas')
    financeiro, _ = SetorModel.objects.get_or_create(descricao='Financeiro')

    cargos = {}
    for cargo_id, descricao in [
        (1, 'Colaborador'),
        (3, 'Analista de Suporte'),
        (8, 'Coordenador'),
        (9, 'Gerente'),
        (10, 'Diretor'),
    ]:
        cargos[cargo_id], _ = CargoModel.objects.get_or_create(
            id=cargo_id, defaults={'descricao': descricao}
        )

    print("👥 Criando usuários...")

    sample_usuarios = [
        ('Ana Souza', infra, 3),
        ('Bruno Lima', infra, 3),
        ('Carla Mendes', infra, 3),
        ('Diego Rocha', sistemas, 3),
        ('Eduarda Alves', sistemas, 3),
        ('Fábio Nunes', infra, 8),
        ('Gabriela Costa', financeiro, 1),
        ('Heitor Dias', financeiro, 1),
    ]

    usuarios = {}
    for nome, setor, cargo_id in sample_usuarios:
        usuarios[nome], _ = UsuarioModel.objects.get_or_create(
            nome=nome,
            defaults={'setor': setor, 'cargo': cargos[cargo_id]},
        )
        print(f"   ✓ {nome} ({setor.descricao})")

    # Identidade da triagem no histórico; nunca recebe chamados
    UsuarioModel.objects.get_or_create(
        id=settings.TRIAGEM_USUARIO_SISTEMA_ID,
        defaults={'nome': 'Sistema', 'setor': infra, 'cargo': cargos[3]},
    )

    sample_chamados = [
        {
            'titulo': 'Impressora do financeiro não imprime',
            'descricao': 'A impressora do 2º andar mostra erro de papel mesmo com a bandeja cheia.',
            'solicitante': 'Gabriela Costa',
            'atendente': None,
            'dias': 0,
        },
        {
            'titulo': 'VPN desconectando',
            'descricao': 'A conexão VPN cai a cada 10 minutos quando trabalho de casa.',
            'solicitante': 'Heitor Dias',
            'atendente': None,
            'dias': 1,
        },
        {
            'titulo': 'Erro ao emitir nota fiscal',
            'descricao': 'O ERP retorna timeout ao emitir notas com mais de 50 itens.',
            'solicitante': 'Gabriela Costa',
            'atendente': 'Diego Rocha',
            'dias': 2,
        },
        {
            'titulo': 'Acesso à pasta compartilhada',
            'descricao': 'Preciso de acesso de leitura à pasta de contratos.',
            'solicitante': 'Heitor Dias',
            'atendente': 'Fábio Nunes',
            'dias': 5,
        },
        {
            'titulo': 'Troca de mouse',
            'descricao': 'Mouse com botão direito falhando.',
            'solicitante': 'Gabriela Costa',
            'atendente': 'Ana Souza',
            'dias': 8,
            'status': 'Concluído',
        },
    ]

    print("📝 Criando chamados de exemplo...")

    agora = timezone.now()
    for dados in sample_chamados:
        status = dados.get('status', 'Aberto')
        chamado = ChamadoModel.objects.create(
            titulo=dados['titulo'],
            descricao=dados['descricao'],
            solicitante=usuarios[dados['solicitante']],
            atendente=usuarios.get(dados['atendente']),
            status=status,
            data_inicio=agora - timedelta(days=dados['dias']),
            data_fim=agora if status == 'Concluído' else None,
        )
        print(f"   ✓ #{chamado.pk} {chamado.titulo[:50]}")

    print(f"✅ {len(sample_chamados)} chamados criados!")


def run_triagem():
    """Executa uma rodada da triagem no próprio processo."""
    from src.config.container import get_container

    print("🔀 Executando triagem...")
    resultado = get_container().redistribuir_chamados_service().execute()

    for resumo in resultado.setores:
        print(
            f"   ✓ Setor {resumo.setor_id}: {resumo.total_chamados} chamados, "
            f"{resumo.total_atendentes} atendentes, {resumo.alterados} alterados"
        )
    print(f"✅ Triagem concluída: {resultado.total_alterados} alterações")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except Exception as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Triagem a cada: {settings.TRIAGEM_INTERVALO_MINUTOS} min")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python manage.py runserver")
    print("   2. Acesse: http://localhost:8000/admin/")
    print("   3. Acesse: http://localhost:8000/chamados/api/painel/")
    print("   4. celery -A src.config.celery worker -B -Q default,events,notifications,triagem -l INFO")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar dados de exemplo'
    )
    parser.add_argument(
        '--run-triagem',
        action='store_true',
        help='Executar uma rodada da triagem ao final'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Helpdesk de Chamados - Quick Setup")
    print("=" * 60 + "\n")

    # Configurar Django
    setup_django()

    if args.check_only:
        check_connection()
        return

    # Verificar conexão
    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    # Executar migrations
    run_migrations()

    # Criar dados de exemplo
    if args.with_sample_data:
        create_sample_data()

    if args.run_triagem:
        run_triagem()

    # Mostrar informações
    show_info()


if __name__ == '__main__':
    main()
