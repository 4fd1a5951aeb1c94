"""Run configuration."""

from fibgen.runtime.config import (
    ForwardingConfig,
    GeneratorConfig,
    OutputConfig,
    RunConfig,
    load_run_config,
    validate_config,
)

__all__ = [
    "ForwardingConfig",
    "GeneratorConfig",
    "OutputConfig",
    "RunConfig",
    "load_run_config",
    "validate_config",
]
