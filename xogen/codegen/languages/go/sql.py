"""
SQL clause fragments for generated data-access code.

Every builder takes an ordered field list plus an ignore set. Ignored
fields are dropped before anything is counted, so they never appear in
the output and never consume a placeholder position.
"""

from typing import Iterable, Iterator, List, Optional

from ...core.config import GeneratorConfig
from ...core.schema import Column, EscType, Field
from ...registry import Dialect
from .types import GoTypeMapper

GEO_DECODE = "ST_AsBinary"
GEO_ENCODE = "ST_GeomFromWKB"


def _kept(fields: List[Field], ignore_names: Iterable[str]) -> Iterator[Field]:
    ignore = set(ignore_names)
    return (f for f in fields if f.name not in ignore)


def _names_of(ignore_fields: Optional[Iterable[Field]]) -> List[str]:
    return [f.name for f in ignore_fields or ()]


class SqlClauseBuilder:
    """Builds column lists, placeholder lists and assignment clauses."""

    def __init__(
        self,
        config: GeneratorConfig,
        dialect: Dialect,
        type_mapper: Optional[GoTypeMapper] = None,
    ):
        self.config = config
        self.dialect = dialect
        self.type_mapper = type_mapper or GoTypeMapper(config)

    def col_name(self, col: Column) -> str:
        """Column name, escaped when column escaping is enabled."""
        if self.config.escape_column_names:
            return self.dialect.escape(EscType.COLUMN, col.column_name)
        return col.column_name

    def _placeholder(self, f: Field, i: int) -> str:
        param = self.dialect.nth_param(i)
        if self.type_mapper.is_geometry(f.type):
            return f"{GEO_ENCODE}({param})"
        return param

    def _select_name(self, f: Field) -> str:
        name = self.col_name(f.col)
        if self.type_mapper.is_geometry(f.type):
            return f"{GEO_DECODE}({name})"
        return name

    # Column lists

    def col_names(self, fields: List[Field], *ignore_names: str) -> str:
        """``"c1, c2, c3"`` for SELECT/INSERT column lists."""
        return ", ".join(self.col_name(f.col) for f in _kept(fields, ignore_names))

    def col_names_geo(self, fields: List[Field], *ignore_names: str) -> str:
        """Like col_names, decoding geometry columns with ST_AsBinary."""
        return ", ".join(self._select_name(f) for f in _kept(fields, ignore_names))

    def col_names_multi(self, fields: List[Field], ignore_fields: List[Field]) -> str:
        return self.col_names(fields, *_names_of(ignore_fields))

    def col_names_geo_multi(self, fields: List[Field], ignore_fields: List[Field]) -> str:
        return self.col_names_geo(fields, *_names_of(ignore_fields))

    def col_prefix_names(self, fields: List[Field], prefix: str, *ignore_names: str) -> str:
        """``"t.c1, t.c2"``."""
        return ", ".join(
            f"{prefix}.{self.col_name(f.col)}" for f in _kept(fields, ignore_names)
        )

    # Placeholders

    def col_vals(self, fields: List[Field], *ignore_names: str) -> str:
        """``"$1, $2, $3"``, numbered from position 0 by the dialect."""
        return ", ".join(
            self._placeholder(f, i) for i, f in enumerate(_kept(fields, ignore_names))
        )

    def col_vals_multi(self, fields: List[Field], ignore_fields: List[Field]) -> str:
        return self.col_vals(fields, *_names_of(ignore_fields))

    # Assignments / predicates

    def _is_soft_delete(self, f: Field) -> bool:
        column = self.config.soft_delete_column
        return f.name == column or f.column_name == column

    def _query(
        self,
        fields: List[Field],
        has_deleted_field: bool,
        sep: str,
        start_count: int,
        ignore_names: Iterable[str],
    ) -> str:
        clauses = []
        explicit_delete = False

        for i, f in enumerate(_kept(fields, ignore_names), start=start_count):
            if self._is_soft_delete(f):
                explicit_delete = True
            clauses.append(f"{self.col_name(f.col)} = {self._placeholder(f, i)}")

        if has_deleted_field and not explicit_delete:
            clauses.append(f"{self.config.soft_delete_column} = false")

        return sep.join(clauses)

    def col_names_query(
        self, fields: List[Field], has_deleted_field: bool, sep: str, *ignore_names: str
    ) -> str:
        """
        ``"c1 = $1 AND c2 = $2"`` style clause joined by sep.

        When has_deleted_field is set and no soft-delete column survives the
        ignore filter, ``is_deleted = false`` is appended as a final clause.
        """
        return self._query(fields, has_deleted_field, sep, 0, ignore_names)

    def col_names_query_multi(
        self,
        fields: List[Field],
        has_deleted_field: bool,
        sep: str,
        start_count: int,
        ignore_fields: List[Field],
    ) -> str:
        """col_names_query with placeholder numbering offset by start_count."""
        return self._query(
            fields, has_deleted_field, sep, start_count, _names_of(ignore_fields)
        )

    # Go expressions

    def field_names(self, fields: List[Field], prefix: str, *ignore_names: str) -> str:
        """``"t.Field1, t.Field2"``."""
        return ", ".join(f"{prefix}.{f.name}" for f in _kept(fields, ignore_names))

    def field_names_multi(
        self, fields: List[Field], prefix: str, ignore_fields: List[Field]
    ) -> str:
        return self.field_names(fields, prefix, *_names_of(ignore_fields))

    # Counting and lookups

    def col_count(self, fields: List[Field], *ignore_names: str) -> int:
        """1-based count of non-ignored fields (the next free placeholder)."""
        return 1 + sum(1 for _ in _kept(fields, ignore_names))

    @staticmethod
    def get_start_count(fields: List[Field], pk_fields: List[Field]) -> int:
        return len(fields) - len(pk_fields)

    @staticmethod
    def has_column(fields: List[Field], name: str) -> bool:
        return any(f.column_name == name for f in fields)

    @staticmethod
    def has_field(fields: List[Field], name: str) -> bool:
        return any(f.name == name for f in fields)

    def schema_fn(self, schema: str, *names: str) -> str:
        """Join names with the schema, escaping per configuration."""
        names = list(names)
        if self.config.escape_table_names:
            names = [self.dialect.escape(EscType.TABLE, n) for n in names]

        joined = ".".join(names)
        if not schema and not joined:
            return ""

        if schema and joined:
            if self.config.escape_schema_name:
                schema = self.dialect.escape(EscType.SCHEMA, schema)
            schema = schema + "."

        return schema + joined
