"""
Classificação de Situação (aging) de Chamados.

A situação é derivada, nunca persistida: recalculada a cada leitura a
partir do status atual e dos dias de calendário desde a abertura.
Todas as telas (listagem, busca, painel, detalhe, admin) usam
exclusivamente `classificar_situacao` para que o rótulo seja idêntico
em qualquer lugar.

Regra (primeira que casar vence):
    1. status "Concluído"          → Finalizado
    2. dias = data(agora) - data(abertura), em dias de calendário
    3. dias <= 1                   → No Prazo   (inclui negativos)
    4. 2 <= dias <= 3              → Atencao
    5. demais                      → Atrasado

Módulo puro: sem I/O, sem estado, seguro para chamadas concorrentes.
"""

from collections import OrderedDict
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, Union

from src.core.shared.exceptions import ContractViolationError, ValidationError


STATUS_CONCLUIDO = "Concluído"

LIMITE_NO_PRAZO_DIAS = 1
LIMITE_ATENCAO_DIAS = 3


class Situacao(Enum):
    """Rótulo de urgência exibido nas listagens."""

    FINALIZADO = "Finalizado"
    NO_PRAZO = "No Prazo"
    ATENCAO = "Atencao"
    ATRASADO = "Atrasado"

    @classmethod
    def from_string(cls, value: str) -> "Situacao":
        """
        Converte string (nome ou valor) para enum.

        Aceita "Atencao", "ATENCAO", "no prazo", "NO_PRAZO"...

        Raises:
            ValidationError: Se valor inválido
        """
        try:
            return cls[value.upper().replace(" ", "_")]
        except KeyError:
            pass

        for situacao in cls:
            if situacao.value.lower() == value.lower():
                return situacao

        raise ValidationError(f"Situação inválida: {value}", field="situacao")


def dias_decorridos(data_inicio: datetime, agora: datetime) -> int:
    """
    Dias de calendário entre a abertura e `agora`.

    Horas são ignoradas: aberto ontem às 23h e consultado hoje à 1h
    conta 1 dia. Com datetimes aware, a abertura é convertida para o
    fuso de `agora` antes de extrair a data.
    """
    if data_inicio.tzinfo is not None and agora.tzinfo is not None:
        data_inicio = data_inicio.astimezone(agora.tzinfo)
    return (agora.date() - data_inicio.date()).days


def classificar_situacao(
    status: Union[str, Enum],
    data_inicio: datetime,
    agora: datetime,
) -> Situacao:
    """
    Classifica a situação de um chamado.

    Args:
        status: ChamadoStatus ou seu valor string ("Aberto", "Concluído"...)
        data_inicio: Data/hora de abertura do chamado
        agora: Instante de referência (relógio injetado pelo chamador)

    Returns:
        Situacao correspondente

    Raises:
        ContractViolationError: Se data_inicio ausente
    """
    valor_status = status.value if isinstance(status, Enum) else status

    if valor_status == STATUS_CONCLUIDO:
        return Situacao.FINALIZADO

    if data_inicio is None:
        raise ContractViolationError(
            "Chamado sem data de abertura não pode ser classificado",
            argument="data_inicio",
        )

    dias = dias_decorridos(data_inicio, agora)

    if dias <= LIMITE_NO_PRAZO_DIAS:
        return Situacao.NO_PRAZO
    if dias <= LIMITE_ATENCAO_DIAS:
        return Situacao.ATENCAO
    return Situacao.ATRASADO


def contar_por_situacao(chamados: Iterable, agora: datetime) -> Dict[Situacao, int]:
    """
    Conta chamados por situação (contadores do painel).

    Aceita qualquer objeto com `status` e `data_inicio`. Chamados
    concluídos caem sempre em FINALIZADO, logo os demais contadores
    consideram apenas chamados não concluídos.
    """
    contagem = OrderedDict((situacao, 0) for situacao in Situacao)
    for chamado in chamados:
        contagem[classificar_situacao(chamado.status, chamado.data_inicio, agora)] += 1
    return contagem
