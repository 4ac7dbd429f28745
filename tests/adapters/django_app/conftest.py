"""
Fixtures para testes com Django.

O settings de teste (src.config.settings_test) é carregado pelo
pytest-django: SQLite em memória, cache local e Celery eager.
"""

import pytest
from datetime import timedelta

from django.core.cache import cache
from django.utils import timezone


@pytest.fixture(scope='session', autouse=True)
def celery_finalizado():
    """App Celery finalizada (tasks registradas e agenda do Beat montada)."""
    from src.config.celery import app

    app.finalize()
    return app


@pytest.fixture(autouse=True)
def limpar_cache():
    """Cache local compartilhado entre testes (locks)."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def setores(db):
    from src.adapters.django_app.chamados.models import SetorModel

    return {
        'infra': SetorModel.objects.create(descricao='Infraestrutura'),
        'sistemas': SetorModel.objects.create(descricao='Sistemas'),
    }


@pytest.fixture
def cargos(db):
    """Cargos com ids fixos: 8, 9 e 10 são de supervisão."""
    from src.adapters.django_app.chamados.models import CargoModel

    return {
        cargo_id: CargoModel.objects.create(id=cargo_id, descricao=descricao)
        for cargo_id, descricao in [
            (1, 'Colaborador'),
            (3, 'Analista'),
            (8, 'Coordenador'),
            (9, 'Gerente'),
            (10, 'Diretor'),
        ]
    }


@pytest.fixture
def usuario_factory(db):
    """Factory para criar UsuarioModel para testes."""
    from src.adapters.django_app.chamados.models import UsuarioModel

    def create_usuario(**kwargs):
        defaults = {
            'nome': 'Usuário de Teste',
            'email': '',
            'ativo': True,
        }
        defaults.update(kwargs)
        return UsuarioModel.objects.create(**defaults)

    return create_usuario


@pytest.fixture
def usuarios(setores, cargos, usuario_factory):
    """
    Usuários de referência:
    - ana, bruno, carla: atendentes de Infraestrutura
    - diego: atendente de Sistemas
    - elisa: coordenadora (cargo 8) de Sistemas
    - fernanda: solicitante sem setor
    - sistema: usuário do sistema (id 2006)
    """
    return {
        'ana': usuario_factory(nome='Ana', setor=setores['infra'], cargo=cargos[3]),
        'bruno': usuario_factory(nome='Bruno', setor=setores['infra'], cargo=cargos[3]),
        'carla': usuario_factory(nome='Carla', setor=setores['infra'], cargo=cargos[3]),
        'diego': usuario_factory(nome='Diego', setor=setores['sistemas'], cargo=cargos[3]),
        'elisa': usuario_factory(nome='Elisa', setor=setores['sistemas'], cargo=cargos[8]),
        'fernanda': usuario_factory(nome='Fernanda', cargo=cargos[1]),
        'sistema': usuario_factory(id=2006, nome='Sistema', setor=setores['infra'], cargo=cargos[3]),
    }


@pytest.fixture
def chamado_model_factory(usuarios):
    """Factory para criar ChamadoModel para testes."""
    from src.adapters.django_app.chamados.models import ChamadoModel

    def create_chamado(dias: int = 0, **kwargs):
        defaults = {
            'titulo': 'Chamado de Teste',
            'descricao': 'Descrição do chamado de teste',
            'status': 'Aberto',
            'solicitante': usuarios['fernanda'],
            'data_inicio': timezone.now() - timedelta(days=dias),
        }
        defaults.update(kwargs)
        return ChamadoModel.objects.create(**defaults)

    return create_chamado
