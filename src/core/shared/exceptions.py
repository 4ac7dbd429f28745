"""
Exceções de Domínio do Suporte Chamados.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    ├── EntityNotFoundError (entidade não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    ├── ConcurrencyError (escrita concorrente detectada)
    ├── ContractViolationError (pré-condição quebrada pelo chamador)
    └── OperationCancelledError (execução cancelada antes de persistir)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            chamado.alterar_status(ChamadoStatus.CONCLUIDO, agora)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Example:
        if not titulo.strip():
            raise ValidationError("Título é obrigatório", field="titulo")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        chamado = repo.get_by_id(chamado_id)
        if not chamado:
            raise EntityNotFoundError(
                f"Chamado {chamado_id} não encontrado",
                entity_type="Chamado",
                entity_id=str(chamado_id),
            )
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Example:
        if not usuario.ativo:
            raise BusinessRuleViolationError(
                "Usuário inativo não pode receber chamados",
                rule="responsavel_inativo"
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class ConcurrencyError(DomainException):
    """
    Erro de concorrência.

    Lançada quando o responsável de um chamado foi alterado por
    outro processo entre a leitura e a escrita.
    """

    def __init__(self, message: str):
        super().__init__(message, "CONCURRENCY_ERROR")


class ContractViolationError(DomainException):
    """
    Pré-condição violada pelo chamador.

    Indica erro de programação (ex: chamado sem data de abertura
    enviado ao classificador de situação). Não há recuperação.
    """

    def __init__(self, message: str, argument: str = None):
        self.argument = argument
        super().__init__(message, "CONTRACT_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.argument:
            result["argument"] = self.argument
        return result


class OperationCancelledError(DomainException):
    """Execução cancelada antes da etapa de persistência."""

    def __init__(self, message: str = "Operação cancelada"):
        super().__init__(message, "OPERATION_CANCELLED")
