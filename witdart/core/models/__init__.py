"""
Domain models — configuration, sandbox filesystem, WIT tree, output.

All models are re-exported here for convenient access:

    from witdart.core.models import GeneratorConfig, FileSystemPaths, GeneratedFile
"""

from witdart.core.models.config import (
    FileSystemPaths,
    GeneratorConfig,
    InMemoryFiles,
    Int64Type,
    WitFile,
    WitGeneratorInput,
    default_generator_config,
)
from witdart.core.models.template import GeneratedFile
from witdart.core.models.wasi import (
    PreopenedDir,
    WasiConfig,
    WasiDirectory,
    WasiFile,
    wasi_config_from_path,
)

__all__ = [
    # config.py
    "FileSystemPaths",
    # template.py
    "GeneratedFile",
    "GeneratorConfig",
    "InMemoryFiles",
    "Int64Type",
    # wasi.py
    "PreopenedDir",
    "WasiConfig",
    "WasiDirectory",
    "WasiFile",
    "WitFile",
    "WitGeneratorInput",
    "default_generator_config",
    "wasi_config_from_path",
]
