"""
xogen code generation helpers.

Template functions for Go data-access code generated from a relational
schema model: SQL fragments, identifiers, type conversions and the
protobuf bridge.
"""

from typing import Any, Dict, Optional, Union
from pathlib import Path

from .registry import (
    DialectRegistry,
    Dialect,
    get_dialect,
    list_supported_dialects,
)
from .core.generator import GeneratorError, GenerationResult, generate_code
from .core.schema import (
    Field,
    Column,
    Type,
    MethodsOption,
    ModelToPBConfig,
)
from .core.config import GeneratorConfig, ConfigManager, load_config
from .languages.go import TemplateFuncs


def create_template_funcs(
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    dialect: Optional[str] = None,
) -> TemplateFuncs:
    """
    Create the function table for one generation run.

    Args:
        config: GeneratorConfig, override dict, or path to a JSON config file
        dialect: Dialect name overriding the configured one

    Returns:
        TemplateFuncs bound to a fresh short name cache and warning log
    """
    if isinstance(config, GeneratorConfig):
        final_config = config
    elif isinstance(config, (str, Path)):
        final_config = load_config(config_file=config)
    else:
        final_config = load_config(custom_config=config)

    return TemplateFuncs(
        final_config,
        get_dialect(dialect or final_config.dialect),
    )


def render(
    template: str,
    context: Optional[Dict[str, Any]] = None,
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    dialect: Optional[str] = None,
) -> GenerationResult:
    """
    Render a template string in a fresh run.

    Returns:
        GenerationResult with the rendered code and any warnings
    """
    funcs = create_template_funcs(config, dialect)
    return generate_code(funcs, template, context)


__all__ = [
    "DialectRegistry",
    "Dialect",
    "get_dialect",
    "list_supported_dialects",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "Field",
    "Column",
    "Type",
    "MethodsOption",
    "ModelToPBConfig",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "TemplateFuncs",
    "create_template_funcs",
    "render",
]
