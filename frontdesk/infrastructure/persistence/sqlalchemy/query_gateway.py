from typing import Any, List, Optional
from sqlmodel import Session

from ....application.ports.record_query import RecordQuery, MAX_PAGE_SIZE


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlQueryGateway:
    """Applies a RecordQuery (search, ordering, window) to a select statement."""

    def __init__(self, session: Session):
        self.session = session

    def page(self, statement, query: RecordQuery, order_column, id_column, search_column: Optional[Any] = None, cap: int = MAX_PAGE_SIZE) -> List[Any]:
        q = query.normalized(cap)
        if q.search and search_column is not None:
            statement = statement.where(search_column.ilike(f"%{escape_like(q.search)}%", escape="\\"))
        if q.descending:
            statement = statement.order_by(order_column.desc(), id_column.desc())
        else:
            statement = statement.order_by(order_column.asc(), id_column.asc())
        statement = statement.offset(q.offset).limit(q.limit)
        return list(self.session.exec(statement).all())
