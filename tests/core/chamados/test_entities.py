"""
Testes Unitários para Entidades do Domínio de Chamados.

Coverage:
- ChamadoEntity.criar(): Validações de abertura
- ChamadoEntity.alterar_status(): Invariante da data de fim
- ChamadoEntity.atribuir_a()
- UsuarioEntity.elegivel_para_triagem()
- HistoricoChamadoEntry.alteracao_de_campo(): Texto de auditoria
- ChamadoStatus.from_string()
"""

import pytest
from datetime import timedelta

from src.core.chamados.entities import (
    ChamadoEntity,
    ChamadoStatus,
    HistoricoChamadoEntry,
    UsuarioEntity,
)
from src.core.chamados.situacao import Situacao
from src.core.shared.exceptions import ValidationError


class TestChamadoEntityCriacao:
    """Testes para abertura de chamados."""

    def test_criar_chamado_valido(self, agora):
        """Deve abrir chamado com status Aberto e sem responsável."""
        chamado = ChamadoEntity.criar(
            titulo="  Impressora não imprime  ",
            descricao="Fila travada no 2º andar",
            solicitante_id=10,
            agora=agora,
        )

        assert chamado.id is None
        assert chamado.titulo == "Impressora não imprime"
        assert chamado.status == ChamadoStatus.ABERTO
        assert chamado.data_inicio == agora
        assert chamado.data_fim is None
        assert chamado.atendente_id is None
        assert chamado.esta_aberto
        assert not chamado.esta_atribuido

    def test_titulo_obrigatorio(self, agora):
        """Deve rejeitar título vazio."""
        with pytest.raises(ValidationError) as exc_info:
            ChamadoEntity.criar(titulo="   ", descricao="", solicitante_id=10, agora=agora)

        assert exc_info.value.field == "titulo"

    def test_titulo_muito_longo(self, agora):
        """Deve rejeitar título acima do limite."""
        with pytest.raises(ValidationError):
            ChamadoEntity.criar(
                titulo="x" * (ChamadoEntity.TITULO_MAX_LENGTH + 1),
                descricao="",
                solicitante_id=10,
                agora=agora,
            )

    def test_solicitante_obrigatorio(self, agora):
        with pytest.raises(ValidationError) as exc_info:
            ChamadoEntity.criar(titulo="Sem rede", descricao="", solicitante_id=None, agora=agora)

        assert exc_info.value.field == "solicitante_id"


class TestChamadoEntityStatus:
    """Testes de transição de status."""

    def test_concluir_preenche_data_fim(self, agora):
        """Concluir deve gravar a data de fim."""
        chamado = ChamadoEntity(id=1, titulo="T", data_inicio=agora, solicitante_id=10)

        anterior = chamado.alterar_status(ChamadoStatus.CONCLUIDO, agora)

        assert anterior == ChamadoStatus.ABERTO
        assert chamado.status == ChamadoStatus.CONCLUIDO
        assert chamado.data_fim == agora
        assert chamado.situacao(agora) == Situacao.FINALIZADO

    def test_reabrir_limpa_data_fim(self, agora):
        """Voltar de Concluído para outro status limpa a data de fim."""
        chamado = ChamadoEntity(
            id=1,
            titulo="T",
            data_inicio=agora - timedelta(days=5),
            data_fim=agora,
            status=ChamadoStatus.CONCLUIDO,
            solicitante_id=10,
        )

        chamado.alterar_status(ChamadoStatus.EM_ANDAMENTO, agora)

        assert chamado.data_fim is None
        assert chamado.situacao(agora) == Situacao.ATRASADO

    def test_atribuir_retorna_anterior(self):
        chamado = ChamadoEntity(id=1, titulo="T", solicitante_id=10, atendente_id=3)

        assert chamado.atribuir_a(7) == 3
        assert chamado.atendente_id == 7
        assert chamado.atribuir_a(None) == 7
        assert not chamado.esta_atribuido

    @pytest.mark.parametrize("valor,esperado", [
        ("Aberto", ChamadoStatus.ABERTO),
        ("EM_ANDAMENTO", ChamadoStatus.EM_ANDAMENTO),
        ("em andamento", ChamadoStatus.EM_ANDAMENTO),
        ("Concluído", ChamadoStatus.CONCLUIDO),
        ("concluido", ChamadoStatus.CONCLUIDO),
    ])
    def test_status_from_string(self, valor, esperado):
        assert ChamadoStatus.from_string(valor) == esperado

    def test_status_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            ChamadoStatus.from_string("Cancelado")

        assert exc_info.value.field == "status"

    def test_igualdade_por_id(self):
        """Entidades com mesmo id são iguais."""
        assert ChamadoEntity(id=5, titulo="A") == ChamadoEntity(id=5, titulo="B")
        assert ChamadoEntity(titulo="A") != ChamadoEntity(titulo="A")


class TestUsuarioElegibilidade:
    """Testes de elegibilidade para a triagem."""

    CARGOS_EXCLUIDOS = frozenset({8, 9, 10})
    SISTEMA = 2006

    def test_atendente_comum_elegivel(self):
        usuario = UsuarioEntity(id=1, nome="Ana", setor_id=1, cargo_id=3)
        assert usuario.elegivel_para_triagem(self.CARGOS_EXCLUIDOS, self.SISTEMA)

    @pytest.mark.parametrize("cargo_id", [8, 9, 10])
    def test_cargo_de_supervisao_excluido(self, cargo_id):
        usuario = UsuarioEntity(id=1, nome="Chefe", setor_id=1, cargo_id=cargo_id)
        assert not usuario.elegivel_para_triagem(self.CARGOS_EXCLUIDOS, self.SISTEMA)

    def test_usuario_do_sistema_excluido(self):
        bot = UsuarioEntity(id=2006, nome="Sistema", setor_id=1, cargo_id=3)
        assert not bot.elegivel_para_triagem(self.CARGOS_EXCLUIDOS, self.SISTEMA)

    def test_inativo_excluido(self):
        usuario = UsuarioEntity(id=1, nome="Ana", setor_id=1, cargo_id=3, ativo=False)
        assert not usuario.elegivel_para_triagem(self.CARGOS_EXCLUIDOS, self.SISTEMA)

    def test_sem_cargo_elegivel(self):
        usuario = UsuarioEntity(id=1, nome="Ana", setor_id=1, cargo_id=None)
        assert usuario.elegivel_para_triagem(self.CARGOS_EXCLUIDOS, self.SISTEMA)


class TestHistoricoChamadoEntry:
    """Testes do texto de auditoria."""

    def test_alteracao_de_campo(self, agora):
        entry = HistoricoChamadoEntry.alteracao_de_campo(
            chamado_id=1,
            usuario_id=2006,
            campo="Responsavel",
            valor_antigo="Ana",
            valor_novo="Bruno",
            data=agora,
        )

        assert entry.acao_tomada == 'Alterou o campo Responsavel de "Ana" para "Bruno"'
        assert entry.usuario_id == 2006
        assert entry.data == agora
        assert entry.id is None

    def test_valor_antigo_ausente_vira_nao_definido(self, agora):
        """Sem responsável anterior, o texto usa "Não definido"."""
        entry = HistoricoChamadoEntry.alteracao_de_campo(
            chamado_id=1,
            usuario_id=2006,
            campo="Responsavel",
            valor_antigo=None,
            valor_novo="Ana",
            data=agora,
        )

        assert entry.acao_tomada == 'Alterou o campo Responsavel de "Não definido" para "Ana"'
