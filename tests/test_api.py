from decimal import Decimal

from application import create_app
from conftest import make_app
from models import COLLECTIONS
from record_store import StoreRegistry, get_stores

FUNCIONARIO = {
    "nome": "Maria Souza",
    "cpf": "123.456.789-00",
    "email": "maria@empresa.com",
    "cargo_admitido": "Vendedora",
    "salario": "2500.00",
    "data_admissao": "2024-02-01",
}


# ==================== FUNCIONÁRIOS ====================

def test_funcionario_crud(client):
    resp = client.post("/api/funcionarios", json=FUNCIONARIO)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    funcionario_id = body["funcionario"]["id"]
    assert body["funcionario"]["salario"] == 2500.0
    assert body["funcionario"]["data_admissao"] == "2024-02-01"

    resp = client.get(f"/api/funcionarios/{funcionario_id}")
    assert resp.get_json()["funcionario"]["nome"] == "Maria Souza"

    resp = client.put(f"/api/funcionarios/{funcionario_id}", json={"cargo_admitido": "Gerente"})
    assert resp.status_code == 200
    atualizado = client.get(f"/api/funcionarios/{funcionario_id}").get_json()["funcionario"]
    assert atualizado["cargo_admitido"] == "Gerente"
    assert atualizado["cpf"] == FUNCIONARIO["cpf"]

    assert client.delete(f"/api/funcionarios/{funcionario_id}").status_code == 200
    resp = client.get(f"/api/funcionarios/{funcionario_id}")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Funcionário não encontrado"}


def test_funcionario_duplicado_por_cpf_ou_email(client):
    assert client.post("/api/funcionarios", json=FUNCIONARIO).status_code == 200

    resp = client.post("/api/funcionarios", json=dict(FUNCIONARIO, email="outra@empresa.com"))
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Funcionário já cadastrado."

    resp = client.post("/api/funcionarios", json=dict(FUNCIONARIO, cpf="000.000.000-00"))
    assert resp.status_code == 409

    assert len(client.get("/api/funcionarios").get_json()["funcionarios"]) == 1


def test_funcionario_sem_campos_obrigatorios(client):
    resp = client.post("/api/funcionarios", json={"nome": "Sem CPF"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_atualizar_funcionario_inexistente(client):
    assert client.put("/api/funcionarios/999", json={"nome": "X"}).status_code == 404
    assert client.delete("/api/funcionarios/999").status_code == 404


def test_funcionarios_listados_por_nome(client):
    for nome, cpf in (("Carlos", "3"), ("Ana", "1"), ("Bruno", "2")):
        client.post("/api/funcionarios", json={"nome": nome, "cpf": cpf})
    nomes = [f["nome"] for f in client.get("/api/funcionarios").get_json()["funcionarios"]]
    assert nomes == ["Ana", "Bruno", "Carlos"]


# ==================== TESOURARIA ====================

def test_tesouraria_resumo(client):
    client.post("/api/tesouraria", json={"tipo": "entrada", "valor": 100, "descricao": "Venda à vista"})
    client.post("/api/tesouraria", json={"tipo": "saida", "valor": "40.00", "descricao": "Material"})

    resumo = client.get("/api/tesouraria/resumo").get_json()["resumo"]
    assert resumo == {"totalEntradas": 100.0, "totalSaidas": 40.0, "saldo": 60.0}

    body = client.get("/api/tesouraria").get_json()
    assert [item["tipo"] for item in body["lancamentos"]] == ["saida", "entrada"]
    assert body["resumo"]["saldo"] == 60.0


def test_tesouraria_dados_invalidos(client):
    for payload in (
        {"tipo": "entrada", "valor": 0, "descricao": "zero"},
        {"tipo": "transferencia", "valor": 10, "descricao": "tipo errado"},
        {"tipo": "saida", "valor": "abc", "descricao": "valor errado"},
        {"tipo": "saida", "valor": 10},
    ):
        resp = client.post("/api/tesouraria", json=payload)
        assert resp.status_code == 400
        assert resp.get_json() == {"success": False, "message": "Dados inválidos"}


# ==================== CONTAS ====================

def test_contas_pagar_ordenadas_por_vencimento(client):
    client.post("/api/contas-pagar", json={"descricao": "Aluguel", "valor": 1500, "vencimento": "2024-05-10"})
    resp = client.post("/api/contas-pagar", json={"descricao": "Luz", "valor": "230,90", "vencimento": "2024-05-05"})
    conta = resp.get_json()["conta"]
    assert conta["status"] == "pendente"
    assert conta["valor"] == 230.9

    contas = client.get("/api/contas-pagar").get_json()["contas"]
    assert [c["descricao"] for c in contas] == ["Luz", "Aluguel"]
    assert client.get(f"/api/contas-pagar/{conta['id']}").status_code == 200
    assert client.get("/api/contas-pagar/999").status_code == 404


def test_conta_receber_exige_vencimento(client):
    resp = client.post("/api/contas-receber", json={"descricao": "Cliente X", "valor": 300})
    assert resp.status_code == 400
    resp = client.post("/api/contas-receber", json={"descricao": "Cliente X", "valor": 300, "vencimento": "31/12/2024"})
    assert resp.status_code == 400


# ==================== VENDAS E ESTOQUE ====================

def test_venda_gera_numero_nota(client):
    resp = client.post("/api/vendas", json={"cliente": "João", "produto": "Cadeira", "valor": 199.9})
    venda = resp.get_json()["venda"]
    assert venda["numero_nota"].startswith("NF")
    assert venda["numero_nota"][2:].isdigit()
    assert client.get(f"/api/vendas/{venda['id']}").get_json()["venda"]["cliente"] == "João"


def test_listagem_idempotente(client):
    for i in range(5):
        client.post("/api/vendas", json={"cliente": f"C{i}", "produto": "P", "valor": 10 + i})
    first = client.get("/api/vendas").get_json()
    second = client.get("/api/vendas").get_json()
    assert first == second
    assert [v["cliente"] for v in first["vendas"]] == ["C4", "C3", "C2", "C1", "C0"]


def test_estoque_calcula_valor_total(app, client):
    resp = client.post("/api/estoque", json={
        "produto": "Parafuso", "quantidade": 5, "valor_unitario": 2.50, "nota_fiscal": "NF-123",
    })
    assert resp.status_code == 200
    entrada = resp.get_json()["entrada"]
    assert entrada["valor_total"] == 12.5

    with app.app_context():
        stored = get_stores()["estoque"].find_by_id(entrada["id"])
    assert stored["valor_total"] == Decimal("12.50")


def test_estoque_rejeita_quantidade_negativa(client):
    resp = client.post("/api/estoque", json={"produto": "X", "quantidade": -1, "valor_unitario": 1})
    assert resp.status_code == 400
    resp = client.post("/api/estoque", json={"produto": "X", "quantidade": 1.5, "valor_unitario": 1})
    assert resp.status_code == 400


def test_valores_acima_do_limite_das_colunas(client):
    resp = client.post("/api/vendas", json={"cliente": "C", "produto": "P", "valor": "1e30"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    resp = client.post("/api/tesouraria", json={"tipo": "entrada", "valor": "10000000000000", "descricao": "X"})
    assert resp.status_code == 400

    resp = client.post("/api/estoque", json={"produto": "X", "quantidade": 10**30, "valor_unitario": 1})
    assert resp.status_code == 400
    resp = client.post("/api/estoque", json={"produto": "X", "quantidade": 2**31, "valor_unitario": 1})
    assert resp.status_code == 400
    # quantidade e unitário válidos, mas o total estoura a coluna
    resp = client.post("/api/estoque", json={"produto": "X", "quantidade": 2**31 - 1, "valor_unitario": "9999999"})
    assert resp.status_code == 400

    assert client.get("/api/vendas").get_json()["vendas"] == []
    assert client.get("/api/estoque").get_json()["estoque"] == []


def test_maior_valor_aceito(client):
    resp = client.post("/api/vendas", json={"cliente": "C", "produto": "P", "valor": "9999999999999.99"})
    assert resp.status_code == 200


# ==================== DASHBOARD ====================

def test_dashboard_stats(client):
    client.post("/api/funcionarios", json={"nome": "Ana", "cpf": "1"})
    client.post("/api/tesouraria", json={"tipo": "entrada", "valor": 50, "descricao": "Caixa"})
    client.post("/api/vendas", json={"cliente": "C", "produto": "P", "valor": "20.10"})
    client.post("/api/vendas", json={"cliente": "D", "produto": "P", "valor": "9.90"})
    client.post("/api/estoque", json={"produto": "P", "quantidade": 3, "valor_unitario": 1})

    stats = client.get("/api/dashboard/stats").get_json()["stats"]
    assert stats == {
        "totalFuncionarios": 1,
        "saldoAtual": 50.0,
        "totalVendasHoje": 2,
        "valorVendasHoje": 30.0,
        "itensEstoque": 1,
    }


# ==================== ROTAS E ERROS ====================

def test_rota_desconhecida_e_verbo_nao_suportado(client):
    for resp in (
        client.get("/api/nao-existe"),
        client.delete("/api/tesouraria"),
        client.patch("/api/funcionarios"),
    ):
        assert resp.status_code == 404
        assert resp.get_json() == {"success": False, "message": "Rota não encontrada"}


def test_corpo_que_nao_e_objeto(client):
    resp = client.post("/api/vendas", json=[1, 2, 3])
    assert resp.status_code == 400


def test_sem_banco_configurado_responde_503(unconfigured_client):
    resp = unconfigured_client.get("/api/funcionarios")
    assert resp.status_code == 503
    assert resp.get_json()["success"] is False
    assert unconfigured_client.post("/api/vendas", json={"cliente": "C", "produto": "P", "valor": 1}).status_code == 503


def test_banco_inacessivel_responde_503(unreachable_client):
    assert unreachable_client.get("/api/tesouraria").status_code == 503
    assert unreachable_client.get("/api/dashboard/stats").status_code == 503


def test_stores_injetadas():
    stores = StoreRegistry(None, COLLECTIONS)
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": None}, stores=stores)
    with app.app_context():
        assert get_stores() is stores
    assert app.test_client().get("/api/estoque").status_code == 503


def _app_com_falha(**overrides):
    app = make_app(**overrides)

    @app.route("/api/falha")
    def falha():
        raise RuntimeError("detalhe interno")

    return app


def test_erro_inesperado_oculta_detalhe_em_producao():
    resp = _app_com_falha(APP_ENV="production").test_client().get("/api/falha")
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Erro interno do servidor"}


def test_erro_inesperado_mostra_detalhe_em_desenvolvimento():
    resp = _app_com_falha(APP_ENV="development").test_client().get("/api/falha")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["message"] == "Erro interno do servidor"
    assert body["error"] == "detalhe interno"
