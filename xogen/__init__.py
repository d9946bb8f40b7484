"""
xogen: template helpers for generating Go data-access code and protobuf
bridges from a relational schema model.
"""

from .codegen import (
    TemplateFuncs,
    GeneratorConfig,
    GenerationResult,
    create_template_funcs,
    load_config,
    render,
)

__version__ = "0.1.0"

__all__ = [
    "TemplateFuncs",
    "GeneratorConfig",
    "GenerationResult",
    "create_template_funcs",
    "load_config",
    "render",
    "__version__",
]
