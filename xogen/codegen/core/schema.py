"""
Schema model consumed by the code generation helpers.

Tables, views, custom query projections, indexes, foreign keys, enums,
stored procedures and queries. Instances are built once by an external
loader and are treated as read-only for the rest of the run.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union, Any
import enum

from .generator import ConfigError, SchemaError, UnknownKindError
from .naming import camel_to_snake


def _parse_kind(enum_cls, kind: str, value: Any):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace("-", "_")
        if key in enum_cls.__members__:
            return enum_cls[key]
    raise UnknownKindError(kind, value)


class RelType(enum.Enum):
    """Relational storage kind."""

    TABLE = 0
    VIEW = 1

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: Union["RelType", str]) -> "RelType":
        return _parse_kind(cls, "relation kind", value)


class TemplateType(enum.Enum):
    """Template kinds; member order is the output order within a file."""

    ENUM = 0
    PROC = 1
    TYPE = 2
    FOREIGN_KEY = 3
    INDEX = 4
    MAP = 5
    QUERY_TYPE = 6
    QUERY = 7
    OPTIONAL = 8
    TYPE_PROTO = 9

    # always last
    XO = 10

    @property
    def template_name(self) -> str:
        return _TEMPLATE_NAMES[self]

    def __str__(self) -> str:
        return self.template_name

    @classmethod
    def parse(cls, value: Union["TemplateType", str]) -> "TemplateType":
        return _parse_kind(cls, "template kind", value)


_TEMPLATE_NAMES = {
    TemplateType.ENUM: "enum",
    TemplateType.PROC: "proc",
    TemplateType.TYPE: "type",
    TemplateType.FOREIGN_KEY: "foreignkey",
    TemplateType.INDEX: "index",
    TemplateType.MAP: "map",
    TemplateType.QUERY_TYPE: "querytype",
    TemplateType.QUERY: "query",
    TemplateType.OPTIONAL: "optional",
    TemplateType.TYPE_PROTO: "type",
    TemplateType.XO: "xo_db",
}


class EscType(enum.Enum):
    """Identifier kinds that can be escaped by a dialect."""

    SCHEMA = "schema"
    TABLE = "table"
    COLUMN = "column"


@dataclass
class Column:
    """Raw database column as reported by the loader."""

    column_name: str
    not_null: bool = False
    data_type: str = ""
    is_primary_key: bool = False
    default_value: Optional[str] = None
    ordinal: int = 0


@dataclass(eq=False)
class Field:
    """A Go struct field backed by a column (or a procedure/query parameter)."""

    name: str
    type: str
    nil_type: str = ""
    length: int = 0
    col: Optional[Column] = None
    comment: str = ""

    @property
    def column_name(self) -> str:
        return self.col.column_name if self.col else ""

    @property
    def is_nullable(self) -> bool:
        return self.col is not None and not self.col.not_null


@dataclass(eq=False)
class Index:
    """Index over an ordered subsequence of a type's fields."""

    func_name: str
    type: Optional["Type"] = None
    fields: List[Field] = field(default_factory=list)
    map_func_name: str = ""
    map_field: Optional[Field] = None
    schema: str = ""
    is_unique: bool = False
    is_primary: bool = False
    comment: str = ""


@dataclass(eq=False)
class Type:
    """A table, view or custom query projection."""

    name: str
    schema: str = ""
    rel_type: RelType = RelType.TABLE
    fields: List[Field] = field(default_factory=list)
    primary_key: Optional[Field] = None
    primary_key_fields: List[Field] = field(default_factory=list)
    indexes: Dict[str, Index] = field(default_factory=dict)
    comment: str = ""
    has_deleted_field: bool = False

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by Go name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def validate(self) -> None:
        """
        Check the structural invariants of this type.

        Raises:
            SchemaError: duplicate field names, or primary key / index fields
                that are not members of ``fields``.
        """
        seen = set()
        for f in self.fields:
            if f.name in seen:
                raise SchemaError(f"{self.name}: duplicate field name {f.name!r}")
            seen.add(f.name)

        members = {id(f) for f in self.fields}
        for f in self.primary_key_fields:
            if id(f) not in members:
                raise SchemaError(
                    f"{self.name}: primary key field {f.name!r} is not a field of the type"
                )

        for index_name, index in self.indexes.items():
            for f in index.fields:
                if id(f) not in members:
                    raise SchemaError(
                        f"{self.name}: index {index_name} references unknown field {f.name!r}"
                    )


@dataclass(eq=False)
class ForeignKey:
    """Descriptive foreign key relationship between two types."""

    name: str
    type: Type
    field: Field
    ref_type: Type
    ref_field: Field
    schema: str = ""
    comment: str = ""


@dataclass
class EnumValue:
    name: str
    value: int
    comment: str = ""


@dataclass
class Enum:
    """A database enumerated type."""

    name: str
    schema: str = ""
    values: List[EnumValue] = field(default_factory=list)
    comment: str = ""
    reverse_const_names: bool = False


@dataclass(eq=False)
class Proc:
    """A stored procedure."""

    name: str
    schema: str = ""
    proc_params: str = ""
    params: List[Field] = field(default_factory=list)
    return_field: Optional[Field] = None
    comment: str = ""


@dataclass
class QueryParam:
    """A parameter of a custom query."""

    name: str
    type: str
    interpolate: bool = False


@dataclass(eq=False)
class Query:
    """A custom SQL query and the type it projects into."""

    name: str
    schema: str = ""
    query: List[str] = field(default_factory=list)
    query_comments: List[str] = field(default_factory=list)
    query_params: List[QueryParam] = field(default_factory=list)
    only_one: bool = False
    interpolate: bool = False
    type: Optional[Type] = None
    comment: str = ""


@dataclass(frozen=True)
class ModelToPBConfig:
    """Protobuf bridge settings for one type."""

    import_service: str
    skip_fields: frozenset = frozenset()


@dataclass(eq=False)
class MethodsOption:
    """Per-type selection of the extra methods to generate."""

    type: Type
    sub: str = ""
    list_fields: bool = False
    model_to_pb: bool = False
    model_to_pb_config: Optional[ModelToPBConfig] = None

    def is_skipped(self, f: Field) -> bool:
        if self.model_to_pb_config is None:
            return False
        return f.column_name in self.model_to_pb_config.skip_fields


@dataclass
class TableConfig:
    name: str
    skips: List[str] = field(default_factory=list)


def _table_config(service: str, entry: Any) -> TableConfig:
    if isinstance(entry, TableConfig):
        return entry
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        raise ConfigError(
            f"methods.model_to_pb.{service}: each table must be an object "
            f"with a name, got {entry!r}"
        )
    skips = entry.get("skips") or []
    if not isinstance(skips, (list, tuple)):
        raise ConfigError(f"methods.model_to_pb.{service}.{entry['name']}: skips must be a list")
    return TableConfig(entry["name"], list(skips))


@dataclass
class MethodsConfig:
    """Raw ``methods`` section of the run configuration."""

    list_fields: List[str] = field(default_factory=list)
    # import service -> tables converted to messages of that service
    model_to_pb: Dict[str, List[TableConfig]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MethodsConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("methods must be an object")

        services = data.get("model_to_pb") or {}
        if not isinstance(services, dict):
            raise ConfigError("methods.model_to_pb must map services to table lists")

        model_to_pb = {}
        for service, tables in services.items():
            if not isinstance(tables, (list, tuple)):
                raise ConfigError(f"methods.model_to_pb.{service} must be a list of tables")
            model_to_pb[service] = [_table_config(service, t) for t in tables]
        return cls(
            list_fields=list(data.get("list_fields") or []), model_to_pb=model_to_pb
        )

    def build_options(self, types: Iterable[Type]) -> List[MethodsOption]:
        """
        Build one MethodsOption per type, in the order the types are given.

        Configured table names are matched case-sensitively against the Go
        type name first, then against its snake_case form.
        """
        list_fields = set(self.list_fields)

        by_table: Dict[str, tuple] = {}
        for service, tables in self.model_to_pb.items():
            for table in tables:
                by_table[table.name] = (service, table)

        options = []
        for typ in types:
            match = by_table.get(typ.name)
            if match is None:
                # config may name the snake_case table rather than the Go type
                match = by_table.get(camel_to_snake(typ.name))

            option = MethodsOption(
                type=typ,
                list_fields=typ.name in list_fields,
            )
            if match is not None:
                service, table = match
                option.sub = service
                option.model_to_pb = True
                option.model_to_pb_config = ModelToPBConfig(
                    import_service=service, skip_fields=frozenset(table.skips)
                )
            options.append(option)
        return options
