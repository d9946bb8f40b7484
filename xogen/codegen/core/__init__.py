"""
Core code generation components.

Schema model, configuration, naming utilities, errors and the template
engine shared by the language-specific helpers.
"""

from .generator import (
    GeneratorError,
    UnknownKindError,
    SchemaError,
    UnmappedNullableError,
    ConcurrencyError,
    WarningLog,
    WarningRecord,
    GenerationResult,
    generate_code,
)
from .schema import (
    RelType,
    TemplateType,
    EscType,
    Column,
    Field,
    Type,
    Index,
    ForeignKey,
    Enum,
    EnumValue,
    Proc,
    Query,
    QueryParam,
    MethodsOption,
    ModelToPBConfig,
    MethodsConfig,
    TableConfig,
)
from .naming import camel_to_snake, snake_to_camel, force_lower_camel_identifier
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError

__all__ = [
    # Errors and run state
    "GeneratorError",
    "UnknownKindError",
    "SchemaError",
    "UnmappedNullableError",
    "ConcurrencyError",
    "WarningLog",
    "WarningRecord",
    "GenerationResult",
    "generate_code",
    # Schema model
    "RelType",
    "TemplateType",
    "EscType",
    "Column",
    "Field",
    "Type",
    "Index",
    "ForeignKey",
    "Enum",
    "EnumValue",
    "Proc",
    "Query",
    "QueryParam",
    "MethodsOption",
    "ModelToPBConfig",
    "MethodsConfig",
    "TableConfig",
    # Naming utilities
    "snake_to_camel",
    "camel_to_snake",
    "force_lower_camel_identifier",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
]
