from __future__ import annotations

from xogen.codegen.core.naming import camel_to_snake
from xogen.codegen.core.schema import (
    Column,
    Field,
    MethodsOption,
    ModelToPBConfig,
    Type,
)


def make_field(
    name: str,
    typ: str,
    column: str | None = None,
    not_null: bool = True,
    comment: str = "",
) -> Field:
    """Field backed by a column; the column name defaults to snake_case of name."""
    col = Column(column or camel_to_snake(name), not_null=not_null)
    return Field(name, typ, col=col, comment=comment)


def user_type() -> Type:
    fields = [
        make_field("ID", "int64", "id"),
        make_field("Name", "string"),
        make_field("Email", "sql.NullString", not_null=False),
        make_field("CreatedAt", "time.Time"),
        make_field("Age", "int32"),
    ]
    return Type("User", schema="public", fields=fields, primary_key=fields[0],
                primary_key_fields=[fields[0]])


def story_type() -> Type:
    fields = [
        make_field("ID", "int64", "id"),
        make_field("Title", "string"),
        make_field("Score", "float64"),
        make_field("Views", "int", "views"),
        make_field("Body", "[]byte", not_null=False),
        make_field("PublishedAt", "sql.NullTime", not_null=False),
        make_field("Rating", "sql.NullInt64", not_null=False),
        make_field("DeletedAt", "mysql.NullTime", not_null=False),
        make_field("CreatedAt", "time.Time"),
    ]
    return Type("Story", fields=fields, primary_key=fields[0],
                primary_key_fields=[fields[0]])


def option_for(typ: Type, service: str = "public-story", skips=()) -> MethodsOption:
    return MethodsOption(
        type=typ,
        sub=service,
        model_to_pb=True,
        model_to_pb_config=ModelToPBConfig(service, frozenset(skips)),
    )
