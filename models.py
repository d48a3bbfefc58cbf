from datetime import datetime

from extensions import db

# Nota: os nomes das colunas são também as chaves dos documentos trocados
# com o front-end (ver record_store.RecordStore).


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255))
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User {self.email}>"


class PasswordReset(db.Model):
    """Tokens de recuperação de senha"""
    __tablename__ = "password_resets"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    token = db.Column(db.String(100), unique=True, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    is_used = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<PasswordReset {self.user_id}>"


# ============================================================================
# MODELS DE GESTÃO EMPRESARIAL
# ============================================================================

class Funcionario(db.Model):
    """Cadastro de funcionários (CPF e e-mail únicos)"""
    __tablename__ = "funcionarios"

    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    cpf = db.Column(db.String(14), unique=True, nullable=False)
    rg = db.Column(db.String(20))
    filiacao = db.Column(db.String(255))

    # Endereço
    cep = db.Column(db.String(9))
    logradouro = db.Column(db.String(255))
    numero = db.Column(db.String(20))
    bairro = db.Column(db.String(120))
    cidade = db.Column(db.String(120))
    estado = db.Column(db.String(2))

    # Contato
    telefone = db.Column(db.String(20))
    email = db.Column(db.String(255), unique=True)

    # Contrato
    cargo_admitido = db.Column(db.String(120))
    salario = db.Column(db.Numeric(15, 2))
    data_admissao = db.Column(db.Date)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Funcionario {self.nome}>"


class LancamentoFinanceiro(db.Model):
    """Lançamentos da tesouraria (entrada = crédito, saida = débito)"""
    __tablename__ = "tesouraria"

    id = db.Column(db.Integer, primary_key=True)
    tipo = db.Column(db.String(10), nullable=False)  # entrada ou saida
    valor = db.Column(db.Numeric(15, 2), nullable=False)
    descricao = db.Column(db.String(255), nullable=False)
    data = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<LancamentoFinanceiro {self.tipo} {self.valor}>"


class ContaPagar(db.Model):
    __tablename__ = "contas_pagar"

    id = db.Column(db.Integer, primary_key=True)
    descricao = db.Column(db.String(255), nullable=False)
    valor = db.Column(db.Numeric(15, 2), nullable=False)
    vencimento = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(db.String(20), default="pendente", nullable=False)  # pendente ou pago
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<ContaPagar {self.descricao}>"


class ContaReceber(db.Model):
    __tablename__ = "contas_receber"

    id = db.Column(db.Integer, primary_key=True)
    descricao = db.Column(db.String(255), nullable=False)
    valor = db.Column(db.Numeric(15, 2), nullable=False)
    vencimento = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(db.String(20), default="pendente", nullable=False)  # pendente ou recebido
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<ContaReceber {self.descricao}>"


class Venda(db.Model):
    __tablename__ = "vendas"

    id = db.Column(db.Integer, primary_key=True)
    cliente = db.Column(db.String(255), nullable=False)
    produto = db.Column(db.String(255), nullable=False)
    valor = db.Column(db.Numeric(15, 2), nullable=False)
    numero_nota = db.Column(db.String(30), nullable=False)
    data = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Venda {self.numero_nota}>"


class EntradaEstoque(db.Model):
    """Lote de entrada no estoque (valor_total = quantidade x valor_unitario)"""
    __tablename__ = "estoque"
    __table_args__ = (
        db.CheckConstraint("quantidade >= 0", name="ck_estoque_quantidade_nao_negativa"),
    )

    id = db.Column(db.Integer, primary_key=True)
    produto = db.Column(db.String(255), nullable=False)
    quantidade = db.Column(db.Integer, nullable=False)
    valor_unitario = db.Column(db.Numeric(15, 2), nullable=False)
    valor_total = db.Column(db.Numeric(15, 2), nullable=False)
    nota_fiscal = db.Column(db.String(60))
    data_entrada = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<EntradaEstoque {self.produto} x{self.quantidade}>"


# Coleção -> modelo, na ordem em que aparecem no status do sistema
COLLECTIONS = {
    "users": User,
    "password_resets": PasswordReset,
    "funcionarios": Funcionario,
    "tesouraria": LancamentoFinanceiro,
    "contas_pagar": ContaPagar,
    "contas_receber": ContaReceber,
    "vendas": Venda,
    "estoque": EntradaEstoque,
}
