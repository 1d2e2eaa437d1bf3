"""
Render compiled predicates into parameterised PostgreSQL.

Predicate paths are field names from the API models. They are mapped to real
column names through :data:`TABLES`; a path that is not listed for the target
table raises ``ValueError`` so nothing user supplied is ever interpolated into
SQL. Values always travel as ``$n`` parameters.

Full-text clauses use the configured text search dictionary:

- any-term match: ``plainto_tsquery`` with its ``&`` operators rewritten to
  ``|`` so a verse matches when it contains any of the words;
- phrase match: ``phraseto_tsquery`` (words adjacent and in order).

Relevance is ``ts_rank_cd`` against the same tsquery.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..query.predicates import (
    AnyTermMatch,
    Between,
    Bound,
    Conjunction,
    Equals,
    Filter,
    LookupKey,
    PhraseMatch,
    SCORE_FIELD,
    SearchPipeline,
)


@dataclass(frozen=True)
class Table:
    name: str
    columns: dict[str, str]
    order_by: tuple[str, ...] = ()

    def column(self, path: str) -> str:
        try:
            return self.columns[path]
        except KeyError:
            raise ValueError(f"Unknown field {path!r} for table {self.name}") from None

    def select_list(self, fields: tuple[str, ...] | None = None) -> str:
        fields = fields or tuple(self.columns)
        parts = []
        for field in fields:
            column = self.column(field)
            parts.append(column if column == field else f"{column} AS {field}")
        return ", ".join(parts)


TABLES: dict[str, Table] = {
    "verse": Table(
        name="verse",
        columns={
            "book": "book",
            "book_name": "book_name",
            "chapter": "chapter",
            "verse": "verse",
            "text": "text",
            "keywords": "keywords",
        },
        order_by=("book", "chapter", "verse"),
    ),
    "customrange": Table(
        name="customrange",
        columns={
            "name": "name",
            "type": "type",
            "book_number": "booknumber",
            "custom_range": "customrange",
        },
    ),
    "readingplan": Table(
        name="readingplan",
        columns={"name": "name", "number": "number", "days": "days"},
        order_by=("number",),
    ),
}

_BOUND_OPERATORS = {"gt": ">", "gte": ">=", "lt": "<", "lte": "<="}


def get_table(name: str) -> Table:
    try:
        return TABLES[name]
    except KeyError:
        raise ValueError(f"Unknown table {name!r}") from None


def _render_condition(table: Table, clause: Equals | Between | Bound, params: list[Any]) -> str:
    column = table.column(clause.path)
    if isinstance(clause, Equals):
        params.append(clause.value)
        return f"{column} = ${len(params)}"
    if isinstance(clause, Between):
        params.extend([clause.start, clause.end])
        return f"{column} BETWEEN ${len(params) - 1} AND ${len(params)}"
    if isinstance(clause, Bound):
        params.append(clause.value)
        return f"{column} {_BOUND_OPERATORS[clause.op]} ${len(params)}"
    raise TypeError(f"Unsupported clause {clause!r}")


def _render_tsquery(
    clause: AnyTermMatch | PhraseMatch,
    dictionary_param: str,
    params: list[Any],
) -> str:
    params.append(clause.query)
    query_param = f"${len(params)}"
    if isinstance(clause, PhraseMatch):
        if clause.slop != 0:
            raise ValueError("Phrase matching only supports adjacent words (slop=0)")
        return f"phraseto_tsquery({dictionary_param}, {query_param})"
    return (
        f"replace(plainto_tsquery({dictionary_param}, {query_param})::text, ' & ', ' | ')"
        "::tsquery"
    )


def _order_clause(table: Table) -> str:
    if not table.order_by:
        return ""
    return " ORDER BY " + ", ".join(table.column(path) for path in table.order_by)


def render_find(table_name: str, predicate: Filter) -> tuple[str, list[Any]]:
    """Render a ``find`` over ``table_name``."""
    table = get_table(table_name)
    params: list[Any] = []
    conditions = [_render_condition(table, clause, params) for clause in predicate.clauses]
    where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
    sql = f"SELECT {table.select_list()} FROM {table.name}{where}{_order_clause(table)}"
    return sql, params


def render_find_one(table_name: str, key: LookupKey) -> tuple[str, list[Any]]:
    """Render a single-row lookup."""
    table = get_table(table_name)
    sql = (
        f"SELECT {table.select_list()} FROM {table.name} "
        f"WHERE {table.column(key.path)} = $1 LIMIT 1"
    )
    return sql, [key.value]


def render_aggregate(
    table_name: str,
    pipeline: SearchPipeline,
    dictionary: str,
) -> tuple[str, list[Any]]:
    """Render a search pipeline: search stage, projection, relevance sort."""
    table = get_table(table_name)
    params: list[Any] = []
    # Bound only when a text clause needs it; Postgres rejects untyped unused params.
    dictionary_param: str | None = None

    stage = pipeline.search
    clauses = stage.must if isinstance(stage, Conjunction) else (stage,)

    conditions: list[str] = []
    scores: list[str] = []
    for clause in clauses:
        if isinstance(clause, (AnyTermMatch, PhraseMatch)):
            if dictionary_param is None:
                params.append(dictionary)
                dictionary_param = f"${len(params)}::regconfig"
            document = f"to_tsvector({dictionary_param}, {table.column(clause.path)})"
            tsquery = _render_tsquery(clause, dictionary_param, params)
            conditions.append(f"{document} @@ {tsquery}")
            scores.append(f"ts_rank_cd({document}, {tsquery})")
        else:
            conditions.append(_render_condition(table, clause, params))

    score = " + ".join(scores) if scores else "0.0"
    fields = tuple(path for path in pipeline.project if path != SCORE_FIELD)
    select = table.select_list(fields)
    if SCORE_FIELD in pipeline.project:
        select += f", ({score})::float8 AS {SCORE_FIELD}"

    where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
    direction = "DESC" if pipeline.sort.descending else "ASC"
    sort_path = pipeline.sort.path
    sort_column = sort_path if sort_path == SCORE_FIELD else table.column(sort_path)
    sql = f"SELECT {select} FROM {table.name}{where} ORDER BY {sort_column} {direction}"
    return sql, params


__all__ = ["TABLES", "Table", "get_table", "render_aggregate", "render_find", "render_find_one"]
