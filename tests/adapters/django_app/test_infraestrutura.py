"""
Testes de infraestrutura compartilhada.

Testa:
- DjangoUnitOfWork: commit, rollback e publicação de eventos
- InMemoryUnitOfWork
- single_flight: lock de execução única sobre o cache
- Publishers e dispatcher de eventos
"""

import logging
from unittest.mock import Mock, patch

import pytest
from django.core import mail
from django.core.cache import cache

from src.adapters.django_app.chamados.models import SetorModel
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.adapters.django_app.shared.locks import single_flight
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork, InMemoryUnitOfWork
from src.core.chamados.events import ResponsavelAlteradoEvent, StatusAlteradoEvent


def _evento(chamado_id: int = 1) -> ResponsavelAlteradoEvent:
    return ResponsavelAlteradoEvent(
        aggregate_id=str(chamado_id),
        atendente_anterior_id=None,
        atendente_novo_id=7,
        alterado_por_id=2006,
        origem="triagem",
    )


@pytest.mark.django_db(transaction=True)
class TestDjangoUnitOfWork:

    def test_commit_persiste_e_publica(self):
        publisher = InMemoryEventPublisher()

        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            SetorModel.objects.create(descricao='Financeiro')
            uow.publish_event(_evento())

        assert uow.is_committed
        assert SetorModel.objects.filter(descricao='Financeiro').exists()
        assert len(publisher.published_events) == 1

    def test_rollback_em_excecao(self):
        publisher = InMemoryEventPublisher()
        uow = DjangoUnitOfWork(event_publisher=publisher)

        with pytest.raises(RuntimeError):
            with uow:
                SetorModel.objects.create(descricao='Financeiro')
                uow.publish_event(_evento())
                raise RuntimeError("falha no meio da transação")

        assert uow.is_rolled_back
        assert not SetorModel.objects.filter(descricao='Financeiro').exists()
        assert publisher.published_events == []

    def test_falha_ao_publicar_nao_desfaz_commit(self):
        publisher = Mock()
        publisher.publish.side_effect = RuntimeError("broker fora")

        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            SetorModel.objects.create(descricao='Financeiro')
            uow.publish_event(_evento())

        assert uow.is_committed
        assert SetorModel.objects.filter(descricao='Financeiro').exists()


class TestInMemoryUnitOfWork:

    def test_eventos_publicados_apos_commit(self):
        uow = InMemoryUnitOfWork()

        with uow:
            uow.publish_event(_evento())
            assert uow.published_events == []

        assert uow.committed
        assert len(uow.published_events) == 1

    def test_eventos_descartados_em_rollback(self):
        uow = InMemoryUnitOfWork()

        with pytest.raises(ValueError):
            with uow:
                uow.publish_event(_evento())
                raise ValueError("erro")

        assert uow.rolled_back
        assert uow.published_events == []


class TestSingleFlight:

    def test_adquire_e_libera(self):
        with single_flight("teste:lock", 60) as adquirido:
            assert adquirido
            assert cache.get("teste:lock") is not None

        assert cache.get("teste:lock") is None

    def test_segunda_execucao_nao_adquire(self):
        with single_flight("teste:lock", 60) as primeiro:
            with single_flight("teste:lock", 60) as segundo:
                assert primeiro
                assert not segundo
            # O lock do primeiro continua valendo
            assert cache.get("teste:lock") is not None

    def test_libera_mesmo_com_excecao(self):
        with pytest.raises(RuntimeError):
            with single_flight("teste:lock", 60):
                raise RuntimeError("falhou")

        assert cache.get("teste:lock") is None

    def test_falha_ao_liberar_nao_propaga(self, caplog):
        with patch.object(cache, 'delete', side_effect=ConnectionError("redis fora")):
            with caplog.at_level(logging.ERROR):
                with single_flight("teste:lock", 60) as adquirido:
                    assert adquirido

        assert "Falha ao liberar teste:lock: redis fora" in caplog.text

    def test_falha_ao_adquirir_propaga(self):
        with patch.object(cache, 'add', side_effect=ConnectionError("redis fora")):
            with pytest.raises(ConnectionError):
                with single_flight("teste:lock", 60):
                    pass

    def test_nao_remove_lock_de_outro_dono(self, caplog):
        """Se o lock expirou e outro processo pegou, não é removido."""
        with caplog.at_level(logging.WARNING):
            with single_flight("teste:lock", 60):
                cache.set("teste:lock", "outro-host:1", 60)

        assert cache.get("teste:lock") == "outro-host:1"
        assert "expirou" in caplog.text


class TestEventPublishers:

    def test_factory(self):
        assert isinstance(get_event_publisher(use_celery=True), CeleryEventPublisher)
        assert isinstance(get_event_publisher(), LoggingEventPublisher)

    def test_logging_publisher(self, caplog):
        with caplog.at_level(logging.INFO):
            LoggingEventPublisher().publish(_evento(42))

        assert "[EVENT] ResponsavelAlteradoEvent | aggregate=42" in caplog.text

    def test_celery_publisher_envia_para_dispatcher(self):
        evento = _evento(42)

        with patch(
            'src.adapters.django_app.events.handlers.dispatch_domain_event.delay'
        ) as delay:
            CeleryEventPublisher(also_log=False).publish(evento)

        delay.assert_called_once_with('ResponsavelAlteradoEvent', evento.to_dict())

    def test_in_memory_handlers(self):
        publisher = InMemoryEventPublisher()
        recebidos = []
        publisher.register_handler('StatusAlteradoEvent', recebidos.append)

        publisher.publish(_evento())
        publisher.publish(StatusAlteradoEvent(aggregate_id="1", status_anterior="Aberto", status_novo="Concluído"))

        assert len(recebidos) == 1
        assert len(publisher.get_events_by_type('ResponsavelAlteradoEvent')) == 1


class TestEventHandlers:

    def test_dispatcher_roteia_para_handler(self):
        from src.adapters.django_app.events import handlers

        with patch.object(handlers.handle_responsavel_alterado, 'delay') as delay:
            handlers.dispatch_domain_event('ResponsavelAlteradoEvent', _evento().to_dict())

        delay.assert_called_once()

    def test_responsavel_alterado_notifica_novo_atendente(self):
        from src.adapters.django_app.events import handlers

        with patch.object(handlers.notify_user, 'delay') as notify, \
                patch.object(handlers.record_metric, 'delay') as metric:
            handlers.handle_responsavel_alterado(_evento(5).to_dict())

        notify.assert_called_once()
        assert notify.call_args.kwargs['user_id'] == 7
        metric.assert_called_once_with(
            metric_name='chamados_reatribuidos', value=1, tags={'origem': 'triagem'}
        )

    def test_evento_desconhecido(self, caplog):
        from src.adapters.django_app.events import handlers

        with caplog.at_level(logging.WARNING):
            handlers.dispatch_domain_event('OutroEvento', {})

        assert "Handler não encontrado para OutroEvento" in caplog.text


@pytest.mark.django_db
class TestNotificacaoPorEmail:

    def test_envia_email_ao_usuario(self, usuario_factory):
        from src.adapters.django_app.events.handlers import notify_user

        ana = usuario_factory(nome='Ana', email='ana@empresa.com.br')

        enviado = notify_user(user_id=ana.pk, message="Chamado #7 é seu.", subject="Chamado #7")

        assert enviado is True
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['ana@empresa.com.br']
        assert mail.outbox[0].subject == "Chamado #7"
        assert mail.outbox[0].body == "Chamado #7 é seu."

    def test_usuario_sem_email(self, usuario_factory, caplog):
        from src.adapters.django_app.events.handlers import notify_user

        bruno = usuario_factory(nome='Bruno')

        with caplog.at_level(logging.WARNING):
            enviado = notify_user(user_id=bruno.pk, message="Chamado #7 é seu.")

        assert enviado is False
        assert mail.outbox == []
        assert "sem e-mail" in caplog.text

    def test_reatribuicao_notifica_novo_atendente(self, usuario_factory):
        """Com Celery eager, o handler dispara o e-mail de ponta a ponta."""
        from src.adapters.django_app.events import handlers

        carla = usuario_factory(nome='Carla', email='carla@empresa.com.br')
        evento = ResponsavelAlteradoEvent(
            aggregate_id="42",
            atendente_novo_id=carla.pk,
            alterado_por_id=2006,
            origem="triagem",
        )

        handlers.dispatch_domain_event('ResponsavelAlteradoEvent', evento.to_dict())

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['carla@empresa.com.br']
        assert mail.outbox[0].subject == "Chamado #42 atribuído a você"
