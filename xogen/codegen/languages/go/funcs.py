"""
Template function table for Go data-access templates.

TemplateFuncs binds the run configuration, a SQL dialect and the per-run
state (short name cache, warning log) to the fixed set of names that
templates call during rendering.
"""

from typing import Callable, Dict, List, Optional, Sequence

import inflect

from ...core.config import GeneratorConfig
from ...core.generator import WarningLog
from ...core.naming import force_lower_camel_identifier, go_package_name
from ...core.schema import Column, Field, MethodsOption
from ...registry import Dialect, get_dialect
from .naming import ShortNameResolver, go_param_list
from .proto import ProtoBridge
from .sql import SqlClauseBuilder
from .types import GoTypeMapper

_inflector = inflect.engine()


class TemplateFuncs:
    """
    The named helpers available to templates for one generation run.

    Create one instance per run; its short name cache and warning log are
    never shared between runs.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        dialect: Optional[Dialect] = None,
        resolver: Optional[ShortNameResolver] = None,
        warnings: Optional[WarningLog] = None,
    ):
        self.config = config or GeneratorConfig()
        self.dialect = dialect or get_dialect(self.config.dialect)
        self.resolver = resolver or ShortNameResolver(
            self.config.name_conflict_suffix,
            reserved_names=self.config.reserved_name_overrides,
        )
        self.warnings = warnings if warnings is not None else WarningLog()

        self.types = GoTypeMapper(self.config)
        self.sql = SqlClauseBuilder(self.config, self.dialect, self.types)
        self.bridge = ProtoBridge(self.config, self.types, self.resolver, self.warnings)

    def as_mapping(self) -> Dict[str, Callable]:
        """Name -> callable table registered with the template engine."""
        return {
            "colcount": self.sql.col_count,
            "colnames": self.sql.col_names,
            "colnamesgeo": self.sql.col_names_geo,
            "colnamesmulti": self.sql.col_names_multi,
            "colnamesgeomulti": self.sql.col_names_geo_multi,
            "colnamesquery": self.sql.col_names_query,
            "colnamesquerymulti": self.sql.col_names_query_multi,
            "colprefixnames": self.sql.col_prefix_names,
            "colvals": self.sql.col_vals,
            "colvalsmulti": self.sql.col_vals_multi,
            "fieldnames": self.sql.field_names,
            "fieldnamesmulti": self.sql.field_names_multi,
            "goparamlist": self.goparamlist,
            "reniltype": self.types.reniltype,
            "retype": self.types.retype,
            "shortname": self.shortname,
            "convext": self.types.convext,
            "schema": self.sql.schema_fn,
            "colname": self.colname,
            "hascolumn": self.sql.has_column,
            "hasfield": self.sql.has_field,
            "getstartcount": self.sql.get_start_count,
            "pluralize": self.pluralize,
            "snaketocamel": self.snaketocamel,
            "modelToPB": self.bridge.model_to_pb,
            "PBToModel": self.bridge.pb_to_model,
            "proto": self.proto,
            "GoPackageName": go_package_name,
        }

    def shortname(self, typ: str, *scope_conflicts) -> str:
        return self.resolver.short_name(typ, *scope_conflicts)

    def goparamlist(
        self, fields: List[Field], add_prefix: bool, add_type: bool, *ignore_names: str
    ) -> str:
        return go_param_list(
            fields,
            add_prefix,
            add_type,
            ignore_names,
            retype=self.types.retype,
            reserved_names=self.resolver.reserved_names,
        )

    def colname(self, col: Column) -> str:
        return self.sql.col_name(col)

    def proto(self, options: Sequence[MethodsOption]) -> str:
        return self.bridge.proto(options)

    @staticmethod
    def pluralize(name: str) -> str:
        if not name:
            return name
        return _inflector.plural(name)

    @staticmethod
    def snaketocamel(name: str) -> str:
        return force_lower_camel_identifier(name)
