"""
Testes dos Repositórios e Mappers Django de Chamados.

Testa:
- Conversão Model <-> Entity
- Consultas usadas pela triagem (abertos, elegíveis, setor)
- Compare-and-set do responsável
- Histórico append-only
"""

import pytest
from datetime import timedelta
from django.utils import timezone

from src.adapters.django_app.chamados.mappers import ChamadoMapper, UsuarioMapper
from src.adapters.django_app.chamados.models import ChamadoModel, HistoricoChamadoModel
from src.adapters.django_app.chamados.repositories import (
    DjangoChamadoRepository,
    DjangoHistoricoRepository,
    DjangoSetorRepository,
    DjangoUsuarioRepository,
)
from src.core.chamados.entities import ChamadoEntity, ChamadoStatus, HistoricoChamadoEntry


@pytest.mark.django_db
class TestMappers:

    def test_chamado_model_para_entity(self, chamado_model_factory, usuarios):
        model = chamado_model_factory(atendente=usuarios['ana'], status='Em andamento')

        entity = ChamadoMapper.to_entity(model)

        assert entity.id == model.id
        assert entity.status == ChamadoStatus.EM_ANDAMENTO
        assert entity.atendente_id == usuarios['ana'].id
        assert entity.solicitante_id == usuarios['fernanda'].id

    def test_chamado_entity_para_model(self, usuarios):
        entity = ChamadoEntity.criar(
            titulo="Sem VPN",
            descricao="",
            solicitante_id=usuarios['fernanda'].id,
            agora=timezone.now(),
        )

        model = ChamadoMapper.to_model(entity)

        assert model.titulo == "Sem VPN"
        assert model.status == "Aberto"
        assert model.atendente_id is None

    def test_usuario_mapper(self, usuarios):
        entity = UsuarioMapper.to_entity(usuarios['elisa'])

        assert entity.nome == 'Elisa'
        assert entity.cargo_id == 8
        assert entity.setor_id == usuarios['elisa'].setor_id


@pytest.mark.django_db
class TestDjangoChamadoRepository:

    def test_save_cria_e_atualiza(self, usuarios):
        repo = DjangoChamadoRepository()
        chamado = ChamadoEntity.criar(
            titulo="Monitor piscando",
            descricao="",
            solicitante_id=usuarios['fernanda'].id,
            agora=timezone.now(),
        )

        repo.save(chamado)
        assert chamado.id is not None

        chamado.alterar_status(ChamadoStatus.CONCLUIDO, timezone.now())
        repo.save(chamado)

        salvo = repo.get_by_id(chamado.id)
        assert salvo.status == ChamadoStatus.CONCLUIDO
        assert salvo.data_fim is not None

    def test_save_nao_sobrescreve_responsavel(self, chamado_model_factory, usuarios):
        """Atualização de status não desfaz uma atribuição feita em paralelo."""
        repo = DjangoChamadoRepository()
        model = chamado_model_factory()
        chamado = repo.get_by_id(model.id)

        ChamadoModel.objects.filter(id=model.id).update(atendente=usuarios['bruno'])
        chamado.alterar_status(ChamadoStatus.EM_ANDAMENTO, timezone.now())
        repo.save(chamado)

        assert ChamadoModel.objects.get(id=model.id).atendente_id == usuarios['bruno'].id

    def test_get_by_id_inexistente(self, db):
        assert DjangoChamadoRepository().get_by_id(999) is None

    def test_list_abertos_em_ordem_de_id(self, chamado_model_factory):
        primeiro = chamado_model_factory()
        chamado_model_factory(status='Em andamento')
        terceiro = chamado_model_factory()
        chamado_model_factory(status='Concluído', data_fim=timezone.now())

        abertos = DjangoChamadoRepository().list_abertos()

        assert [c.id for c in abertos] == [primeiro.id, terceiro.id]

    def test_atualizar_responsavel_compare_and_set(self, chamado_model_factory, usuarios):
        repo = DjangoChamadoRepository()
        model = chamado_model_factory()

        assert repo.atualizar_responsavel(model.id, usuarios['ana'].id, None)
        # Esperado desatualizado: não grava
        assert not repo.atualizar_responsavel(model.id, usuarios['bruno'].id, None)
        assert repo.atualizar_responsavel(model.id, usuarios['bruno'].id, usuarios['ana'].id)

        assert ChamadoModel.objects.get(id=model.id).atendente_id == usuarios['bruno'].id


@pytest.mark.django_db
class TestDjangoUsuarioRepository:

    def test_list_elegiveis(self, usuarios, usuario_factory, setores, cargos):
        inativo = usuario_factory(nome='Gil', setor=setores['infra'], cargo=cargos[3], ativo=False)

        elegiveis = DjangoUsuarioRepository().list_elegiveis(frozenset({8, 9, 10}), 2006)
        nomes = [u.nome for u in elegiveis]

        assert nomes == ['Ana', 'Bruno', 'Carla', 'Diego', 'Fernanda']
        assert inativo.nome not in nomes

    def test_get_setor_id(self, usuarios, setores):
        repo = DjangoUsuarioRepository()

        assert repo.get_setor_id(usuarios['diego'].id) == setores['sistemas'].id
        assert repo.get_setor_id(usuarios['fernanda'].id) is None
        assert repo.get_setor_id(999) is None

    def test_setor_repository(self, setores):
        repo = DjangoSetorRepository()

        assert [s.descricao for s in repo.list_all()] == ['Infraestrutura', 'Sistemas']
        assert repo.get_by_id(setores['sistemas'].id).descricao == 'Sistemas'
        assert repo.get_by_id(999) is None


@pytest.mark.django_db
class TestDjangoHistoricoRepository:

    def test_append_e_list_mais_recente_primeiro(self, chamado_model_factory, usuarios):
        repo = DjangoHistoricoRepository()
        chamado = chamado_model_factory()
        agora = timezone.now()

        primeira = HistoricoChamadoEntry(chamado.id, 2006, "primeira", agora - timedelta(minutes=5))
        segunda = HistoricoChamadoEntry(chamado.id, usuarios['ana'].id, "segunda", agora)
        repo.append(primeira)
        repo.append(segunda)

        assert primeira.id is not None
        assert [e.acao_tomada for e in repo.list_by_chamado(chamado.id)] == ["segunda", "primeira"]
        assert HistoricoChamadoModel.objects.count() == 2
