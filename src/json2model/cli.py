# cli.py
import argparse
import logging
import sys
from pathlib import Path

from . import dart_scanner, declaration_parser
from .config import DEFAULT_OPTIONS, load_options
from .errors import GenerationError
from .formatter import format_source
from .generator import Json2ModelGenerator

logger = logging.getLogger(__name__)

GENERATED_SUFFIX = ".g.dart"
LOG_FORMAT = '%(levelname)s: [%(filename)s:%(lineno)d] %(message)s'


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="json2model",
        description="Generates Dart implementations for @JsonToModel annotated classes.")
    parser.add_argument("inputs", nargs="+",
                        help="Dart source files (.dart) or JSON declaration files (.json).")
    parser.add_argument("-o", "--output-dir", default=None,
                        help="Directory for the generated .g.dart files. Defaults to next to each input.")
    parser.add_argument("--stdout", action="store_true", help="Print generated code instead of writing files.")
    parser.add_argument("--format", action="store_true", help="Run the generated code through 'dart format'.")
    parser.add_argument("--no-primitives", action="store_true",
                        help="Decode every list item through its fromJson factory, primitives included.")
    parser.add_argument("--impl-prefix", default=None,
                        help=f"Prefix of the generated class name. Defaults to '{DEFAULT_OPTIONS.impl_prefix}'.")
    parser.add_argument("--options-json", default=None,
                        help="Path to a JSON file with generator option overrides "
                             "(implPrefix, primitiveHandling, primitiveTypes, itemFactory, listDataKey).")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging (-v info, -vv debug).")
    return parser


def load_input(path: Path):
    if path.suffix == ".json":
        logger.info(f"Parsing declarations from: {path}")
        return declaration_parser.parse_declarations(path), None
    logger.info(f"Scanning Dart source: {path}")
    return dart_scanner.scan_file(path), path.name


def output_path_for(path: Path, output_dir):
    target_dir = Path(output_dir) if output_dir else path.parent
    return target_dir / f"{path.stem}{GENERATED_SUFFIX}"


def resolve_options(args):
    options = DEFAULT_OPTIONS
    if args.options_json:
        options = load_options(args.options_json, options)
    return options.with_overrides(
        impl_prefix=args.impl_prefix,
        primitive_handling=False if args.no_primitives else None,
    )


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)

    try:
        options = resolve_options(args)
    except GenerationError as e:
        logger.error(e.message)
        return 1

    generator = Json2ModelGenerator(options)
    if args.output_dir and not args.stdout:
        Path(args.output_dir).mkdir(parents=True, exist_ok=True)

    for input_name in args.inputs:
        path = Path(input_name)
        if not path.exists():
            logger.error(f"Input file '{path}' not found.")
            return 1

        try:
            declarations, part_of = load_input(path)
            code = generator.generate_library(declarations, part_of=part_of)
        except GenerationError as e:
            logger.error(f"{path}: {e.message}")
            return 1

        if not code:
            logger.info(f"No @JsonToModel classes in {path}, nothing generated.")
            continue

        if args.format:
            code = format_source(code)

        if args.stdout:
            sys.stdout.write(code)
            continue

        target = output_path_for(path, args.output_dir)
        target.write_text(code, encoding="utf-8")
        logger.info(f"Wrote {target}")

    logger.info("Generation complete.")
    return 0
