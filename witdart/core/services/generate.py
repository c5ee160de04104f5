"""
Generation orchestrator — inputs + config → one generated Dart file.

    resolve inputs → parse the documents → resolve the world → emit Dart

Each stage returns a ``Result``; the first failure short-circuits and is
surfaced as ``GenerationError``.  No partial file is ever returned.

A generator instance only carries the execution environment (preopened
directories / virtual tree, base path for relative native paths).  All
code-shape decisions come from the ``GeneratorConfig`` passed to
``generate()``, so one instance can serve many configs.
"""

from __future__ import annotations

import logging
from pathlib import Path

from witdart.core.errors import GenerationError, InputNotFoundError, WitSyntaxError
from witdart.core.models.config import GeneratorConfig, WitGeneratorInput
from witdart.core.models.template import GeneratedFile
from witdart.core.models.wasi import WasiConfig
from witdart.core.models.wit import WitDocument
from witdart.core.result import Ok, Result
from witdart.core.services.generators.dart import generate_dart
from witdart.core.services.inputs import ResolvedInputs, resolve_inputs
from witdart.core.services.parsers import parse_wit, resolve_world

logger = logging.getLogger(__name__)


class DartWitGenerator:
    """Generates Dart bindings within one execution environment.

    Args:
        wasi_config: Preopened directories and, for sandboxed runs, the
            virtual filesystem tree.  None means plain native access.
        base_path: Directory relative native input paths are joined to.
    """

    def __init__(self, wasi_config: WasiConfig | None = None, *, base_path: Path | None = None):
        self.wasi_config = wasi_config or WasiConfig()
        self.base_path = base_path

    def resolve(self, inputs: WitGeneratorInput) -> Result[ResolvedInputs, InputNotFoundError]:
        """Load the root document and its packages without generating."""
        return resolve_inputs(inputs, self.wasi_config, base_path=self.base_path)

    def generate(
        self,
        config: GeneratorConfig,
        output_path: str | None = None,
    ) -> Result[GeneratedFile, GenerationError]:
        """Run the full pipeline for ``config``.

        Args:
            config: Input source and code-shape toggles.
            output_path: Where the caller intends to write the file.
                Defaults to the logical path of the root WIT document.

        Returns:
            Ok(GeneratedFile) or Err(GenerationError) wrapping the first failure.
        """
        result = self._run(config, output_path)
        if result.is_err:
            logger.warning("Generation failed: %s", result.error)
            return result.map_err(GenerationError.wrap)

        generated = result.value
        logger.info("Generated bindings for %s (%d bytes)", generated.path, len(generated.contents))
        return Ok(generated)

    def _run(self, config: GeneratorConfig, output_path: str | None) -> Result[GeneratedFile, Exception]:
        resolved = self.resolve(config.inputs)
        if resolved.is_err:
            return resolved
        inputs = resolved.value

        root = parse_wit(inputs.world_file.contents, inputs.world_file.path)
        if root.is_err:
            return root

        # A broken package file only matters if the world needs something from it
        documents: list[WitDocument] = [root.value]
        unparsable: list[WitSyntaxError] = []
        for source in inputs.pkg_files:
            parsed = parse_wit(source.contents, source.path)
            if parsed.is_err:
                logger.info("Skipping unparsable package file %s", source.path)
                unparsable.append(parsed.error)
                continue
            documents.append(parsed.value)

        model = resolve_world(documents, unparsable=unparsable)
        if model.is_err:
            return model

        contents = generate_dart(model.value, config)
        path = output_path or inputs.world_file.path
        return Ok(GeneratedFile(
            path=path,
            contents=contents,
            reason=f"bindings for world `{model.value.name}` from {inputs.world_file.path}",
        ))


def create_dart_wit_generator(
    wasi_config: WasiConfig | None = None,
    *,
    base_path: Path | None = None,
) -> DartWitGenerator:
    """Build a generator for the given execution environment."""
    return DartWitGenerator(wasi_config, base_path=base_path)


def generate(
    config: GeneratorConfig,
    output_path: str | None = None,
    *,
    wasi_config: WasiConfig | None = None,
    base_path: Path | None = None,
) -> Result[GeneratedFile, GenerationError]:
    """One-shot convenience wrapper around ``DartWitGenerator.generate``."""
    return DartWitGenerator(wasi_config, base_path=base_path).generate(config, output_path)
