"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher)
- Factory: Nova instância por chamada (services, UoW)
- Configuration: Valores TRIAGEM_* vindos do settings

Imports dos adapters são tardios (`__import__` dentro do provider)
para que o container possa ser importado antes do Django estar pronto.
"""

from dependency_injector import containers, providers
from typing import Optional


def _settings_triagem() -> dict:
    from django.conf import settings
    return {
        'intervalo_minutos': settings.TRIAGEM_INTERVALO_MINUTOS,
        'cargos_excluidos': settings.TRIAGEM_CARGOS_EXCLUIDOS,
        'usuario_sistema_id': settings.TRIAGEM_USUARIO_SISTEMA_ID,
    }


def _agora():
    from django.utils import timezone
    return timezone.localtime()


def _criar_event_publisher():
    from django.conf import settings
    from src.adapters.django_app.events.publishers import get_event_publisher
    return get_event_publisher(
        use_celery=getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync') == 'celery'
    )


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings da triagem
    - Infrastructure: Publisher de eventos, relógio
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from src.config.container import get_container

        service = get_container().redistribuir_chamados_service()
        resultado = service.execute()
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    triagem_config = providers.Singleton(
        lambda intervalo_minutos, cargos_excluidos, usuario_sistema_id: __import__(
            'src.core.triagem.config',
            fromlist=['TriagemConfig']
        ).TriagemConfig.criar(
            intervalo_minutos=intervalo_minutos,
            cargos_excluidos=cargos_excluidos,
            usuario_sistema_id=usuario_sistema_id,
        ),
        intervalo_minutos=config.triagem.intervalo_minutos,
        cargos_excluidos=config.triagem.cargos_excluidos,
        usuario_sistema_id=config.triagem.usuario_sistema_id,
    )

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(_criar_event_publisher)

    # Fonte de "agora" injetada nos services (horário local do TIME_ZONE)
    relogio = providers.Object(_agora)

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    chamado_repository = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.chamados.repositories',
            fromlist=['DjangoChamadoRepository']
        ).DjangoChamadoRepository()
    )

    usuario_repository = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.chamados.repositories',
            fromlist=['DjangoUsuarioRepository']
        ).DjangoUsuarioRepository()
    )

    setor_repository = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.chamados.repositories',
            fromlist=['DjangoSetorRepository']
        ).DjangoSetorRepository()
    )

    historico_repository = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.chamados.repositories',
            fromlist=['DjangoHistoricoRepository']
        ).DjangoHistoricoRepository()
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        lambda event_publisher: __import__(
            'src.adapters.django_app.shared.unit_of_work',
            fromlist=['DjangoUnitOfWork']
        ).DjangoUnitOfWork(event_publisher=event_publisher),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    # Buscar Chamados (sem UoW - leitura)
    listar_chamados_service = providers.Factory(
        lambda chamado_repo, usuario_repo, setor_repo: __import__(
            'src.core.chamados.use_cases',
            fromlist=['ListarChamadosService']
        ).ListarChamadosService(
            chamado_repo=chamado_repo,
            usuario_repo=usuario_repo,
            setor_repo=setor_repo,
        ),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
        setor_repo=setor_repository,
    )

    # Painel por situação
    painel_situacao_service = providers.Factory(
        lambda chamado_repo, usuario_repo: __import__(
            'src.core.chamados.use_cases',
            fromlist=['PainelSituacaoService']
        ).PainelSituacaoService(
            chamado_repo=chamado_repo,
            usuario_repo=usuario_repo,
        ),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
    )

    # Detalhe
    obter_chamado_service = providers.Factory(
        lambda chamado_repo, usuario_repo, setor_repo, historico_repo: __import__(
            'src.core.chamados.use_cases',
            fromlist=['ObterChamadoService']
        ).ObterChamadoService(
            chamado_repo=chamado_repo,
            usuario_repo=usuario_repo,
            setor_repo=setor_repo,
            historico_repo=historico_repo,
        ),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
        setor_repo=setor_repository,
        historico_repo=historico_repository,
    )

    # Alterar Status
    alterar_status_service = providers.Factory(
        lambda chamado_repo, usuario_repo, historico_repo, uow, relogio: __import__(
            'src.core.chamados.use_cases',
            fromlist=['AlterarStatusService']
        ).AlterarStatusService(
            chamado_repo=chamado_repo,
            usuario_repo=usuario_repo,
            historico_repo=historico_repo,
            uow=uow,
            relogio=relogio,
        ),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
        historico_repo=historico_repository,
        uow=unit_of_work,
        relogio=relogio,
    )

    # Reatribuição manual
    atribuir_responsavel_service = providers.Factory(
        lambda chamado_repo, usuario_repo, historico_repo, uow, relogio: __import__(
            'src.core.chamados.use_cases',
            fromlist=['AtribuirResponsavelService']
        ).AtribuirResponsavelService(
            chamado_repo=chamado_repo,
            usuario_repo=usuario_repo,
            historico_repo=historico_repo,
            uow=uow,
            relogio=relogio,
        ),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
        historico_repo=historico_repository,
        uow=unit_of_work,
        relogio=relogio,
    )

    # Triagem automática
    redistribuir_chamados_service = providers.Factory(
        lambda chamado_repo, usuario_repo, historico_repo, uow, config, relogio: __import__(
            'src.core.triagem.use_cases',
            fromlist=['RedistribuirChamadosService']
        ).RedistribuirChamadosService(
            chamado_repo=chamado_repo,
            usuario_repo=usuario_repo,
            historico_repo=historico_repo,
            uow=uow,
            config=config,
            relogio=relogio,
        ),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
        historico_repo=historico_repository,
        uow=unit_of_work,
        config=triagem_config,
        relogio=relogio,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir, carregando a configuração da triagem
    a partir do settings do Django.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict({'triagem': _settings_triagem()})

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Permite criar novo container limpo, relendo o settings.
    """
    global _container
    _container = None
