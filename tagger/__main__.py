"""Entry point: python -m tagger SPEC [--service NAME] [--overrides FILE]

Tags every operation in SPEC with resource, method and SQL verb, then
writes the tagged document and a resource inventory to --output-dir.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .codegen import OUTPUT_FORMATS, generate
from .context_builder import build_context
from .errors import TaggingError
from .loader import infer_service, load_spec
from .overrides import DEFAULT_OVERRIDES, load_overrides

logger = logging.getLogger("tagger")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tagger",
        description="Tag OpenAPI operations with resource, method and SQL verb.",
    )
    parser.add_argument("spec", help="OpenAPI document (path or http(s) URL, JSON or YAML)")
    parser.add_argument("--service", help="service name (default: first operationId token)")
    parser.add_argument(
        "--overrides",
        default=os.environ.get("TAGGER_OVERRIDES"),
        help="YAML overrides file layered on the built-in tables (env: TAGGER_OVERRIDES)",
    )
    parser.add_argument(
        "--replace-overrides",
        action="store_true",
        help="use the overrides file instead of the built-in tables",
    )
    parser.add_argument("--output-dir", type=Path, default=Path("generated"))
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="yaml")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    if args.replace_overrides and not args.overrides:
        parser.error("--replace-overrides requires --overrides or TAGGER_OVERRIDES")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        overrides = DEFAULT_OVERRIDES
        if args.overrides:
            overrides = load_overrides(args.overrides, merge=not args.replace_overrides)

        spec = load_spec(args.spec)
        service = args.service or infer_service(spec)
        if not service:
            logger.error("cannot infer a service name from %s, pass --service", args.spec)
            return 1

        context = build_context(spec, service, overrides)
        generate(context, spec, args.output_dir, args.format)
    except TaggingError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
