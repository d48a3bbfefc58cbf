"""
Record Stores - Persistência por Coleção
========================================

Cada entidade (funcionários, tesouraria, contas, vendas, estoque, usuários)
tem uma ``RecordStore`` com as mesmas operações:

    insert_one(doc)            -> id
    find(filters, sort)        -> [doc, ...]
    find_one(filters)          -> doc | None
    find_by_id(id)             -> doc | None
    update_one(id, patch)      -> registros encontrados (0 ou 1)
    delete_one(id)             -> registros removidos (0 ou 1)
    count_documents(filters)   -> int

Os documentos são dicts cujas chaves são os nomes das colunas do modelo.
As stores são agrupadas num ``StoreRegistry`` criado pelo ``create_app`` e
guardado em ``app.extensions["record_stores"]``; os handlers obtêm o
registro com ``get_stores()``.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError

from errors import DuplicateRecordError, StoreUnavailableError, ValidationError

logger = logging.getLogger(__name__)

EXTENSION_KEY = "record_stores"


@dataclass(frozen=True)
class Range:
    """Filtro de intervalo semiaberto: start <= campo < end."""

    start: Any
    end: Any


def _safe_rollback(database) -> None:
    try:
        database.session.rollback()
    except SQLAlchemyError as e:
        logger.debug("Rollback falhou: %s", e)


class RecordStore:
    def __init__(self, model, database=None, duplicate_message: Optional[str] = None):
        self.model = model
        self.database = database
        self.duplicate_message = duplicate_message
        self.name = model.__tablename__

    @property
    def configured(self) -> bool:
        return self.database is not None

    @contextmanager
    def _guard(self):
        if not self.configured:
            raise StoreUnavailableError()
        try:
            yield
        except IntegrityError as e:
            _safe_rollback(self.database)
            logger.info("[%s] violação de unicidade: %s", self.name, e.orig)
            raise DuplicateRecordError(self.duplicate_message) from e
        except DataError as e:
            _safe_rollback(self.database)
            logger.info("[%s] valor fora do limite da coluna: %s", self.name, e.orig)
            raise ValidationError() from e
        except (OperationalError, InterfaceError) as e:
            _safe_rollback(self.database)
            logger.warning("[%s] banco inacessível: %s", self.name, e)
            raise StoreUnavailableError() from e

    def _column(self, field: str):
        if field not in self.model.__table__.columns:
            raise ValueError(f"Campo desconhecido em {self.name}: {field}")
        return getattr(self.model, field)

    def _to_document(self, obj) -> Dict[str, Any]:
        return {column.name: getattr(obj, column.key) for column in self.model.__table__.columns}

    def _filtered_query(self, filters: Optional[Dict[str, Any]]):
        query = self.model.query
        for field, value in (filters or {}).items():
            column = self._column(field)
            if isinstance(value, Range):
                query = query.filter(column >= value.start, column < value.end)
            else:
                query = query.filter(column == value)
        return query

    def insert_one(self, doc: Dict[str, Any]) -> int:
        with self._guard():
            for field in doc:
                self._column(field)
            obj = self.model(**doc)
            self.database.session.add(obj)
            self.database.session.commit()
            return obj.id

    def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[Iterable[Tuple[str, int]]] = None,
    ) -> List[Dict[str, Any]]:
        sort = list(sort or [])
        with self._guard():
            query = self._filtered_query(filters)
            order_by = [
                self._column(field).desc() if direction < 0 else self._column(field).asc()
                for field, direction in sort
            ]
            # id como desempate mantém a listagem estável entre chamadas
            tie_direction = sort[0][1] if sort else 1
            order_by.append(self.model.id.desc() if tie_direction < 0 else self.model.id.asc())
            return [self._to_document(obj) for obj in query.order_by(*order_by).all()]

    def find_one(self, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._guard():
            obj = self._filtered_query(filters).order_by(self.model.id.asc()).first()
            return self._to_document(obj) if obj is not None else None

    def find_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self._guard():
            obj = self.database.session.get(self.model, record_id)
            return self._to_document(obj) if obj is not None else None

    def update_one(self, record_id: int, patch: Dict[str, Any]) -> int:
        with self._guard():
            obj = self.database.session.get(self.model, record_id)
            if obj is None:
                return 0
            for field, value in patch.items():
                self._column(field)
                setattr(obj, field, value)
            self.database.session.commit()
            return 1

    def delete_one(self, record_id: int) -> int:
        with self._guard():
            obj = self.database.session.get(self.model, record_id)
            if obj is None:
                return 0
            self.database.session.delete(obj)
            self.database.session.commit()
            return 1

    def count_documents(self, filters: Optional[Dict[str, Any]] = None) -> int:
        with self._guard():
            return self._filtered_query(filters).count()


class StoreRegistry:
    """Agrupa as stores por nome de coleção."""

    def __init__(self, database=None, collections=None, duplicate_messages=None):
        self.database = database
        duplicate_messages = duplicate_messages or {}
        self._stores = {
            name: RecordStore(model, database, duplicate_messages.get(name))
            for name, model in (collections or {}).items()
        }

    @property
    def configured(self) -> bool:
        return self.database is not None

    def __getitem__(self, name: str) -> RecordStore:
        return self._stores[name]

    def __contains__(self, name: str) -> bool:
        return name in self._stores

    def names(self) -> List[str]:
        return list(self._stores)

    def ping(self) -> bool:
        """Executa SELECT 1; levanta StoreUnavailableError se falhar."""
        if not self.configured:
            raise StoreUnavailableError()
        try:
            self.database.session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            _safe_rollback(self.database)
            raise StoreUnavailableError() from e


def get_stores() -> StoreRegistry:
    return current_app.extensions[EXTENSION_KEY]
