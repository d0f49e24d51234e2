import io
import json
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import MalformedNodeError
from ..core.model import Node
from ..core.ports import NodeSchema
from .array_schema import ArraySchema

FORMATS = ("json", "yaml")


def format_for(path: Path) -> str:
    if path.suffix.lower() in (".yaml", ".yml"):
        return "yaml"
    return "json"


def loads_ast(text: str, fmt: str = "json", schema: NodeSchema | None = None) -> list[Node]:
    """Parse a JSON or YAML document and decode it into AST nodes."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown AST format: {fmt}")
    try:
        if fmt == "yaml":
            raw: Any = yaml.safe_load(io.StringIO(text))
        else:
            raw = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MalformedNodeError("document", f"cannot parse {fmt}: {e}") from e

    if raw is None:
        raw = []
    # A document may also be wrapped as {"ast": [...]}
    if isinstance(raw, dict) and "ast" in raw:
        raw = raw["ast"]
    return (schema or ArraySchema()).decode_many(raw)


def load_ast(path: Path, schema: NodeSchema | None = None) -> list[Node]:
    text = Path(path).read_text(encoding="utf-8")
    return loads_ast(text, format_for(Path(path)), schema)


def dumps(data: Any, fmt: str = "json", indent: int = 2) -> str:
    if fmt == "yaml":
        buf = io.StringIO()
        yaml.safe_dump(data, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue()
    return json.dumps(data, indent=indent or None, ensure_ascii=False)
