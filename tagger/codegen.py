"""Write the tagged document and render the resource inventory.

Takes the context from context_builder and produces, in the output dir:
  {service}.yaml (or .json)    the document with x-stackQL-* annotations
  {service}_resources.md       resources, methods and SQL verbs
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2
import yaml

TEMPLATE_DIR = Path(__file__).parent / "templates"

OUTPUT_FORMATS = ("yaml", "json")


def render_inventory(context: dict[str, Any]) -> str:
    """Render the resource inventory template."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("resources.md.j2")
    return template.render(**context)


def dump_spec(spec: dict[str, Any], fmt: str = "yaml") -> str:
    if fmt == "json":
        return json.dumps(spec, indent=2) + "\n"
    return yaml.safe_dump(spec, sort_keys=False, allow_unicode=True)


def generate(
    context: dict[str, Any],
    spec: dict[str, Any],
    output_dir: Path,
    fmt: str = "yaml",
) -> list[Path]:
    """Write the tagged spec and inventory; return the written paths."""
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"unsupported output format {fmt!r}")

    service = context["service"]
    output_dir.mkdir(parents=True, exist_ok=True)

    spec_path = output_dir / f"{service}.{fmt}"
    spec_path.write_text(dump_spec(spec, fmt))

    inventory_path = output_dir / f"{service}_resources.md"
    inventory_path.write_text(render_inventory(context))

    print(
        f"Generated {spec_path} and {inventory_path}"
        f" ({context['operation_count']} operations, {len(context['resources'])} resources)"
    )
    return [spec_path, inventory_path]
