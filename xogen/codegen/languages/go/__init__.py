"""
Go data-access helpers.

Short names, SQL fragments, type conversions and the protobuf bridge,
exposed to templates through TemplateFuncs.
"""

from .funcs import TemplateFuncs
from .naming import (
    GO_RESERVED_NAMES,
    DEFAULT_IMPORT_CONFLICTS,
    ShortNameResolver,
    param_name,
    go_param_list,
)
from .proto import ProtoBridge, ProtoField, ProtoMessage, ProtoFile, ConversionPlan
from .sql import SqlClauseBuilder
from .types import GoTypeMapper, ConversionKind

__all__ = [
    "TemplateFuncs",
    "GO_RESERVED_NAMES",
    "DEFAULT_IMPORT_CONFLICTS",
    "ShortNameResolver",
    "param_name",
    "go_param_list",
    "ProtoBridge",
    "ProtoField",
    "ProtoMessage",
    "ProtoFile",
    "ConversionPlan",
    "SqlClauseBuilder",
    "GoTypeMapper",
    "ConversionKind",
]
