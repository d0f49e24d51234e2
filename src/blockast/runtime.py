"""Runtime wiring helper for the CLI and API."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from .adapters.array_schema import ArraySchema
from .adapters.keygen import CounterKey, HexKey
from .config import BlockastConfig, load_config
from .core.compiler import CompileOptions, compile
from .core.model import CompiledDocument, Node
from .core.ports import KeyGenerator, NodeSchema


@dataclass
class Runtime:
    """Container for all wired components."""
    config: BlockastConfig
    schema: NodeSchema
    keys: KeyGenerator

    def options(self) -> CompileOptions:
        return CompileOptions(
            key_generator=self.keys,
            entity_id_start=self.config.entities.start,
            empty_block_type=self.config.output.empty_block_type,
        )

    def compile(self, ast: Sequence[Any]) -> CompiledDocument:
        """Decode a wire-format AST and compile it."""
        nodes: list[Node] = self.schema.decode_many(ast)
        return compile(nodes, self.options())


def build_keys(config: BlockastConfig) -> KeyGenerator:
    if config.keys.strategy == "counter":
        return CounterKey(prefix=config.keys.prefix)
    return HexKey(nbytes=config.keys.bytes)


def build_runtime(
    config_path: Path | None = None, config: BlockastConfig | None = None
) -> Runtime:
    """Build and wire all components."""
    if config is None:
        config = load_config(config_path=config_path)
    return Runtime(config=config, schema=ArraySchema(), keys=build_keys(config))
