"""
Configuration management for code generation.

Handles loading and merging the run configuration from JSON files,
providing defaults and validation for every knob the generation
helpers read.
"""

import json
from pathlib import Path
from typing import Dict, Any, FrozenSet, Optional, Tuple, Union
from dataclasses import dataclass, field, fields

from ...logging_config import get_logger
from .generator import ConfigError
from .schema import MethodsConfig

logger = get_logger(__name__)


DEFAULT_KNOWN_TYPES = frozenset(
    {
        "bool", "string", "byte", "rune", "int", "int8", "int16", "int32",
        "int64", "uint", "uint8", "uint16", "uint32", "uint64", "float32",
        "float64", "Slice", "StringSlice",
    }
)

DEFAULT_WRAPPER_TYPES = {
    "sql.NullString": "StringValue",
    "sql.NullInt64": "Int64Value",
    "sql.NullInt32": "Int32Value",
    "sql.NullFloat64": "DoubleValue",
    "sql.NullBool": "BoolValue",
}

DEFAULT_PB_TYPES = {
    "int": "int64",
    "int8": "int32",
    "int16": "int32",
    "int32": "int32",
    "int64": "int64",
    "uint": "uint64",
    "uint8": "uint32",
    "uint16": "uint32",
    "uint32": "uint32",
    "uint64": "uint64",
    "float32": "float",
    "float64": "double",
    "string": "string",
    "bool": "bool",
    "[]byte": "bytes",
}

# protobuf scalar names that are not valid Go conversions
DEFAULT_INCOMPATIBLE_PB_TYPES = frozenset({"float", "double", "bytes", "string", "bool"})

DEFAULT_IMPORTS = {
    "time.Time": "google/protobuf/timestamp.proto",
    "mysql.NullTime": "google/protobuf/timestamp.proto",
    "sql.NullTime": "google/protobuf/timestamp.proto",
    "sql.NullString": "google/protobuf/wrappers.proto",
    "sql.NullInt64": "google/protobuf/wrappers.proto",
    "sql.NullInt32": "google/protobuf/wrappers.proto",
    "sql.NullFloat64": "google/protobuf/wrappers.proto",
    "sql.NullBool": "google/protobuf/wrappers.proto",
}


@dataclass
class GeneratorConfig:
    """Run configuration read by the generation helpers."""

    # Type handling
    known_types: FrozenSet[str] = DEFAULT_KNOWN_TYPES
    custom_type_package: str = ""
    nullable_prefix: str = "sql.Null"
    time_type: str = "time.Time"
    nullable_time_types: Tuple[str, ...] = ("mysql.NullTime", "sql.NullTime")
    geo_info_types: FrozenSet[str] = frozenset({"geom.T"})

    # Protobuf bridge
    wrapper_type_map: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_WRAPPER_TYPES)
    )
    to_pb_type_map: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PB_TYPES))
    incompatible_pb_types: FrozenSet[str] = DEFAULT_INCOMPATIBLE_PB_TYPES
    import_map: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_IMPORTS))
    server_proto_path_prefix: str = ""
    strict_nullable_mapping: bool = False

    # SQL settings
    dialect: str = "postgres"
    escape_schema_name: bool = False
    escape_table_names: bool = False
    escape_column_names: bool = False
    soft_delete_column: str = "is_deleted"

    # Naming settings
    name_conflict_suffix: str = "Val"
    reserved_name_overrides: Dict[str, str] = field(default_factory=dict)

    methods: MethodsConfig = field(default_factory=MethodsConfig)

    # Custom settings (unknown keys from config files)
    custom: Dict[str, Any] = field(default_factory=dict)


_SET_FIELDS = {"known_types", "geo_info_types", "incompatible_pb_types"}
_TUPLE_FIELDS = {"nullable_time_types"}


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {}

    def set_default(self, key: str, value: Any):
        """Override a default for every config built by this manager."""
        self._defaults[key] = value

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete run configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        # Start with defaults
        base_config = dict(self._defaults)

        # Load from file if provided
        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        # Apply custom overrides
        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            logger.error(f"Configuration file not found: {path}")
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file {path}: {str(e)}"
            ) from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug(f"Loaded configuration from {path}")
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key not in known_fields:
                custom_args[key] = value
            elif key in _SET_FIELDS:
                config_args[key] = frozenset(value)
            elif key in _TUPLE_FIELDS:
                config_args[key] = tuple(value)
            elif key == "methods" and not isinstance(value, MethodsConfig):
                config_args[key] = MethodsConfig.from_dict(value)
            else:
                config_args[key] = value

        # Add custom fields to the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict: Dict[str, Any] = {}
        for f in fields(GeneratorConfig):
            value = getattr(config, f.name)
            if f.name == "custom":
                continue
            if f.name == "methods":
                value = {
                    "list_fields": list(value.list_fields),
                    "model_to_pb": {
                        service: [{"name": t.name, "skips": list(t.skips)} for t in tables]
                        for service, tables in value.model_to_pb.items()
                    },
                }
            elif isinstance(value, (frozenset, set)):
                value = sorted(value)
            elif isinstance(value, tuple):
                value = list(value)
            config_dict[f.name] = value

        # Add custom settings
        config_dict.update(config.custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}") from e

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Validate a run configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        for go_type, wrapper in config.wrapper_type_map.items():
            if not go_type.startswith(config.nullable_prefix):
                warnings.append(
                    f"Wrapper mapping for {go_type} does not use the nullable "
                    f"prefix {config.nullable_prefix}"
                )
            if not wrapper.endswith("Value"):
                warnings.append(f"Invalid wrapper type for {go_type}: {wrapper}")

        if not config.name_conflict_suffix:
            warnings.append("Empty name_conflict_suffix cannot resolve name conflicts")
        elif not config.name_conflict_suffix.isidentifier():
            warnings.append(f"Invalid name_conflict_suffix: {config.name_conflict_suffix}")

        if config.custom_type_package and not config.custom_type_package.isidentifier():
            warnings.append(f"Invalid Go package name: {config.custom_type_package}")

        for service, _ in config.methods.model_to_pb.items():
            if not service:
                warnings.append("model_to_pb entry with empty import service")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "dialect": "mysql",
    "custom_type_package": "models",
    "escape_column_names": True,
    "name_conflict_suffix": "Val",
    "server_proto_path_prefix": "github.com/acme/server",
    "methods": {
        "list_fields": ["User"],
        "model_to_pb": {
            "public-story": [{"name": "story", "skips": ["deleted_at"]}],
        },
    },
}
