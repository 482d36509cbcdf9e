from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from importmap_manifest.aggregation import AggregationState, PassToken
from importmap_manifest.config import ImportMapOptions
from importmap_manifest.diagnostics import Diagnostic
from importmap_manifest.emit import OutputSink, emit_import_map
from importmap_manifest.hooks import ManifestHooks
from importmap_manifest.manifest import build_manifest, wrap_imports
from importmap_manifest.normalize import ModuleAssetTable, normalize_artifacts
from importmap_manifest.override import apply_override
from importmap_manifest.paths import standardize_path
from importmap_manifest.records import BuildPassInput
from importmap_manifest.rules import compile_rule_set
from importmap_manifest.stages import (
    drop_build_noise,
    filter_stage,
    map_stage,
    prefix_stage,
    rename_stage,
    resolve_base,
    sort_stage,
    standardize_stage,
)
from importmap_manifest.utils import deep_merge

logger = logging.getLogger(__name__)


@dataclass
class PassResult:
    import_map: dict[str, Any]
    target: str
    output_name: str
    final: bool
    output: bytes | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def emitted(self) -> bool:
        return self.output is not None


class ImportMapPipeline:
    def __init__(self, options: ImportMapOptions, hooks: ManifestHooks | None = None) -> None:
        self.options = options
        self.hooks = hooks or ManifestHooks()
        compiled = compile_rule_set(options.include, options.exclude)
        self.rules = compiled.value
        self.config_diagnostics = compiled.diagnostics
        for diagnostic in self.config_diagnostics:
            logger.warning("%s", diagnostic)

    def target_for(self, build: BuildPassInput) -> str:
        return os.path.join(build.output_dir, self.options.file_name)

    def output_name_for(self, build: BuildPassInput) -> str:
        target = os.path.abspath(self.target_for(build))
        return standardize_path(os.path.relpath(target, os.path.abspath(build.output_dir)))

    def start(self, build: BuildPassInput, state: AggregationState) -> PassToken:
        return state.start_pass(self.target_for(build))

    def compute(
        self,
        build: BuildPassInput,
        state: AggregationState,
        module_assets: ModuleAssetTable | None = None,
    ) -> dict[str, Any]:
        options = self.options
        table = module_assets
        if table is None:
            table = ModuleAssetTable(build.module_assets)
        records = normalize_artifacts(
            build.units,
            build.assets,
            table,
            transform_extensions=options.transform_extensions,
            use_entry_keys=options.use_entry_keys,
        )
        records = drop_build_noise(
            records, output_dir=build.output_dir, is_tracked_target=state.is_tracked
        )
        records = filter_stage(records, self.rules, options.filter)
        records = rename_stage(records, options.transform_keys, options.transform_values)
        records = prefix_stage(records, resolve_base(options.base_url, build.public_path))
        records = standardize_stage(records)
        records = map_stage(records, options.map)
        records = sort_stage(records, options.sort)
        body = build_manifest(
            records,
            seed=options.seed,
            entrypoints=build.entrypoints,
            generate=options.generate,
        )
        logger.debug("manifest built records=%s", len(records))
        return wrap_imports(body)

    def complete(
        self,
        token: PassToken,
        build: BuildPassInput,
        state: AggregationState,
        sink: OutputSink,
        module_assets: ModuleAssetTable | None = None,
    ) -> PassResult:
        diagnostics = list(self.config_diagnostics)
        output_name = self.output_name_for(build)
        try:
            import_map = self.compute(build, state, module_assets)
            import_map = self.hooks.before_emit.call(import_map)
        except Exception:
            state.complete_pass(token)
            logger.exception("pass failed target=%s serial=%s", token.target, token.serial)
            raise
        final = state.complete_pass(token)
        result = PassResult(
            import_map=import_map,
            target=token.target,
            output_name=output_name,
            final=final,
            diagnostics=diagnostics,
        )
        if not final:
            state.contribute(token.target, import_map)
        else:
            merged = self._merge_prior(
                import_map, token.target, output_name, state, sink, diagnostics
            )
            outcome = apply_override(
                merged,
                self.options.base_import_map,
                timeout_s=self.options.override_timeout_s,
            )
            diagnostics.extend(outcome.diagnostics)
            write_to_file = Path(token.target) if self.options.write_to_file_emit else None
            result.import_map = outcome.value
            result.output = emit_import_map(
                outcome.value,
                sink,
                output_name,
                serialize=self.options.serialize,
                write_to_file=write_to_file,
            )
        self.hooks.after_emit.call(result.import_map)
        return result

    def run(
        self,
        build: BuildPassInput,
        state: AggregationState,
        sink: OutputSink,
        module_assets: ModuleAssetTable | None = None,
    ) -> PassResult:
        token = self.start(build, state)
        return self.complete(token, build, state, sink, module_assets)

    def _merge_prior(
        self,
        import_map: dict[str, Any],
        target: str,
        output_name: str,
        state: AggregationState,
        sink: OutputSink,
        diagnostics: list[Diagnostic],
    ) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        existing = sink.get_asset(output_name)
        if existing is not None:
            try:
                previous = json.loads(existing.decode("utf-8"))
            except ValueError as exc:
                diagnostic = Diagnostic(
                    kind="config",
                    option="file_name",
                    message=f"existing output {output_name} is not a JSON import map: {exc}",
                )
                logger.warning("%s", diagnostic)
                diagnostics.append(diagnostic)
            else:
                if isinstance(previous, dict):
                    merged = deep_merge(merged, previous)
        for contribution in state.drain(target):
            merged = deep_merge(merged, contribution)
        if not merged:
            return import_map
        logger.info("merging prior import map output=%s", output_name)
        return deep_merge(merged, import_map)
