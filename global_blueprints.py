from modulos.autenticacao.routes import autenticacao_bp
from modulos.dashboard.routes import dashboard_bp
from modulos.estoque.routes import estoque_bp
from modulos.financeiro.routes import financeiro_bp
from modulos.funcionarios.routes import funcionarios_bp
from modulos.relatorios.routes import relatorios_bp
from modulos.sistema.routes import sistema_bp
from modulos.vendas.routes import vendas_bp


def register_blueprints(app):
    """Registra todos os blueprints globais da aplicação."""
    # Diagnóstico (health, debug-env, teste)
    app.register_blueprint(sistema_bp)

    # Autenticação
    app.register_blueprint(autenticacao_bp)

    # Cadastros
    app.register_blueprint(funcionarios_bp)

    # Dashboard
    app.register_blueprint(dashboard_bp)

    # Tesouraria e contas a pagar/receber
    app.register_blueprint(financeiro_bp)

    # Vendas e estoque
    app.register_blueprint(vendas_bp)
    app.register_blueprint(estoque_bp)

    # Relatórios PDF
    app.register_blueprint(relatorios_bp)
