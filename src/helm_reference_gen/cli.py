"""Command line interface for helm-reference-gen."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable

from helm_reference_gen.codegen_markdown import generate_docs, render_docs
from helm_reference_gen.config import GeneratorConfig, configure_logging, load_config
from helm_reference_gen.errors import GenerationError
from helm_reference_gen.splice import is_up_to_date, splice

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, GeneratorConfig], int]


def _handle_gen_docs(args: argparse.Namespace, config: GeneratorConfig) -> int:
    """Generate the reference and print it, write it, or splice it into a page."""
    values_text = _values_path(args, config).read_text(encoding="utf-8")
    output = args.output or config.output

    if output is None:
        if args.splice:
            raise ValueError("--splice requires an output path")
        print(render_docs(values_text))
        return 0

    if not args.splice:
        generate_docs(values_text, output)
        return 0

    document = output.read_text(encoding="utf-8")
    updated = splice(document, render_docs(values_text), config.start_marker, config.end_marker)
    output.write_text(updated, encoding="utf-8")
    logger.info("updated generated section of %s", output)
    return 0


def _handle_check(args: argparse.Namespace, config: GeneratorConfig) -> int:
    """Fail when the generated section of the output page is stale."""
    values_text = _values_path(args, config).read_text(encoding="utf-8")
    output = args.output or config.output
    if output is None:
        raise ValueError("check requires an output path")

    document = output.read_text(encoding="utf-8")
    generated = render_docs(values_text)
    if is_up_to_date(document, generated, config.start_marker, config.end_marker):
        logger.info("%s is up to date", output)
        return 0
    logger.error("%s is out of date, run 'helm-reference-gen gen-docs --splice'", output)
    return 1


def _values_path(args: argparse.Namespace, config: GeneratorConfig) -> Path:
    values = args.values or config.values
    if values is None:
        raise ValueError("no values file given on the command line or in the config")
    return values


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(prog="helm-reference-gen")
    parser.add_argument("--config", type=Path, help="TOML file with generator settings")
    parser.add_argument("--log-level", help="trace, debug, info, warn or error")
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("gen-docs", help="generate the values reference")
    gen.add_argument("values", nargs="?", type=Path, help="commented values.yaml")
    gen.add_argument("-o", "--output", type=Path, help="file to write, stdout if omitted")
    gen.add_argument(
        "--splice",
        action="store_true",
        help="replace the section between the codegen markers of OUTPUT",
    )
    gen.set_defaults(func=_handle_gen_docs)

    check = subparsers.add_parser("check", help="verify the generated section is current")
    check.add_argument("values", nargs="?", type=Path, help="commented values.yaml")
    check.add_argument("-o", "--output", type=Path, help="page holding the generated section")
    check.set_defaults(func=_handle_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    handler: Handler = args.func
    try:
        config = load_config(args.config) if args.config else GeneratorConfig()
        configure_logging(args.log_level or config.log_level)
        return handler(args, config)
    except (GenerationError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
