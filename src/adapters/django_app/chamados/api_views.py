"""
API Views JSON para o domínio de Chamados.

Endpoints:
- GET  /chamados/api/ - Buscar chamados (filtros + paginação)
- GET  /chamados/api/painel/ - Contadores por situação
- GET  /chamados/api/<id>/ - Detalhe com histórico
- POST /chamados/api/<id>/status/ - Alterar status
- POST /chamados/api/<id>/responsavel/ - Reatribuir responsável
- POST /chamados/api/triagem/executar/ - Enfileirar triagem

Formato:
- Entrada: JSON (o usuário que age vem em `usuario_id`)
- Saída: JSON com estrutura {success, data/error, meta}
"""

import json
import logging
from datetime import date
from typing import Any, Dict, Optional

from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.chamados.dtos import (
    AlterarStatusInputDTO,
    AtribuirResponsavelInputDTO,
    BuscarChamadosQueryDTO,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from src.config.container import get_container

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("JSON inválido: o corpo deve ser um objeto")
    return data


def _inteiro(valor: Any, campo: str) -> Optional[int]:
    if valor in (None, ''):
        return None
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise ValidationError(f"{campo} deve ser um número inteiro", field=campo)


def _data(valor: Optional[str], campo: str) -> Optional[date]:
    if not valor:
        return None
    try:
        resultado = parse_date(valor)
    except ValueError:
        resultado = None
    if resultado is None:
        raise ValidationError(f"{campo} deve estar no formato AAAA-MM-DD", field=campo)
    return resultado


def _usuario_id(data: Dict) -> int:
    usuario_id = _inteiro(data.get('usuario_id'), 'usuario_id')
    if usuario_id is None:
        raise ValidationError("usuario_id é obrigatório", field='usuario_id')
    return usuario_id


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso aos services do container DI
    - Tratamento de erros padronizado
    """

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def agora(self):
        return timezone.localtime()

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        400 validação, 404 não encontrado, 409 concorrência,
        422 regra de negócio, 500 inesperado.
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': getattr(e, 'field', None)}
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=str(e), status=404)

        if isinstance(e, ConcurrencyError):
            return json_response(success=False, error=str(e), status=409)

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=str(e),
                status=422,
                meta={'rule': getattr(e, 'rule', None)}
            )

        if isinstance(e, (DomainException, ValueError)):
            return json_response(success=False, error=str(e), status=400)

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Chamado API Views
# =============================================================================

class ChamadoAPIListView(BaseAPIView):
    """
    GET /chamados/api/ - Busca de chamados.

    Query params (todos opcionais):
    - numero, titulo, data_abertura, data_fim (AAAA-MM-DD)
    - responsavel, setor, status, setor_solicitante, solicitante, situacao
    - setor_atendente_id, solicitante_id (escopo de quem consulta)
    - page (default: 1), per_page (default: 20)
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            params = request.GET

            query = BuscarChamadosQueryDTO(
                numero=_inteiro(params.get('numero'), 'numero'),
                titulo=params.get('titulo') or None,
                data_abertura=_data(params.get('data_abertura'), 'data_abertura'),
                data_fim=_data(params.get('data_fim'), 'data_fim'),
                responsavel=params.get('responsavel') or None,
                setor=params.get('setor') or None,
                status=params.get('status') or None,
                setor_solicitante=params.get('setor_solicitante') or None,
                solicitante=params.get('solicitante') or None,
                situacao=params.get('situacao') or None,
                setor_atendente_id=_inteiro(params.get('setor_atendente_id'), 'setor_atendente_id'),
                solicitante_id=_inteiro(params.get('solicitante_id'), 'solicitante_id'),
            )

            chamados = self.get_service('listar_chamados_service').execute(query, self.agora())

            # Paginação simples
            page = max(_inteiro(params.get('page'), 'page') or 1, 1)
            per_page = max(_inteiro(params.get('per_page'), 'per_page') or 20, 1)

            total = len(chamados)
            start = (page - 1) * per_page
            paginated = chamados[start:start + per_page]

            return json_response(
                success=True,
                data=[c.to_dict() for c in paginated],
                meta={
                    'total': total,
                    'page': page,
                    'per_page': per_page,
                    'total_pages': (total + per_page - 1) // per_page,
                }
            )

        except Exception as e:
            return self.handle_exception(e)


class ChamadoAPIPainelView(BaseAPIView):
    """
    GET /chamados/api/painel/ - Contadores por situação.

    Query params: setor_id, solicitante_id (opcionais)
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            painel = self.get_service('painel_situacao_service').execute(
                self.agora(),
                setor_id=_inteiro(request.GET.get('setor_id'), 'setor_id'),
                solicitante_id=_inteiro(request.GET.get('solicitante_id'), 'solicitante_id'),
            )
            return json_response(success=True, data=painel.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ChamadoAPIDetailView(BaseAPIView):
    """GET /chamados/api/<id>/ - Detalhe do chamado com histórico."""

    def get(self, request: HttpRequest, pk: int) -> JsonResponse:
        try:
            detalhe = self.get_service('obter_chamado_service').execute(pk, self.agora())
            return json_response(success=True, data=detalhe.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ChamadoAPIStatusView(BaseAPIView):
    """POST /chamados/api/<id>/status/"""

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        """
        Body JSON:
        {
            "status": "Aberto|Em andamento|Concluído (obrigatório)",
            "usuario_id": int (obrigatório)
        }
        """
        try:
            data = self.parse_body(request)

            if not data.get('status'):
                return json_response(
                    success=False,
                    error="status é obrigatório",
                    status=400
                )

            output = self.get_service('alterar_status_service').execute(
                AlterarStatusInputDTO(
                    chamado_id=pk,
                    novo_status=data['status'],
                    alterado_por_id=_usuario_id(data),
                )
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ChamadoAPIResponsavelView(BaseAPIView):
    """POST /chamados/api/<id>/responsavel/"""

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        """
        Body JSON:
        {
            "atendente_id": int | null (obrigatório; null remove),
            "usuario_id": int (obrigatório)
        }
        """
        try:
            data = self.parse_body(request)

            if 'atendente_id' not in data:
                return json_response(
                    success=False,
                    error="atendente_id é obrigatório",
                    status=400
                )

            output = self.get_service('atribuir_responsavel_service').execute(
                AtribuirResponsavelInputDTO(
                    chamado_id=pk,
                    atendente_id=_inteiro(data['atendente_id'], 'atendente_id'),
                    alterado_por_id=_usuario_id(data),
                )
            )

            logger.info(f"API: Chamado {pk} atribuído a {output.atendente_id}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TriagemAPIExecutarView(BaseAPIView):
    """
    POST /chamados/api/triagem/executar/

    Enfileira uma execução da triagem. Se outra execução estiver em
    andamento, a tarefa apenas registra no log e termina.
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            from src.adapters.django_app.triagem.tasks import redistribuir_chamados

            resultado = redistribuir_chamados.delay()

            return json_response(
                success=True,
                data={'task_id': resultado.id},
                status=202
            )

        except Exception as e:
            return self.handle_exception(e)
