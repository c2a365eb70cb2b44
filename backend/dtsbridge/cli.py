"""
Command line entry point.

    dtsbridge lib.d.ts typings/ -o out/ --package lib
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import get_config, setup_logging
from .config_loader import ConfigLoader
from .exceptions import ConfigurationError
from .main import DeclarationConverter


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dtsbridge',
        description='Convert TypeScript declaration files (.d.ts) to Kotlin declarations.',
    )
    parser.add_argument('paths', nargs='*', default=['.'],
                        help='Declaration files or directories to convert (default: current directory)')
    parser.add_argument('-o', '--output-dir', help='Directory for generated Kotlin files')
    parser.add_argument('--config', help='Path to a .dtsbridge.yaml or .dtsbridge.json file')
    parser.add_argument('--package', help='Kotlin package of the generated files')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING, ERROR or CRITICAL')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('--fail-fast', action='store_true', help='Stop at the first failing file')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    env = get_config()
    setup_logging(args.log_level or env['LOG_LEVEL'], args.log_file or env['LOG_FILE'])

    try:
        if args.config:
            config = ConfigLoader.load_file(args.config)
        else:
            config = ConfigLoader.load(Path.cwd())
    except ConfigurationError as e:
        logging.error(e.message)
        return 2

    overrides = {}
    if args.output_dir or env['OUTPUT_DIR']:
        overrides['output_dir'] = args.output_dir or env['OUTPUT_DIR']
    if args.package:
        overrides['package_name'] = args.package
    if args.fail_fast:
        overrides['fail_fast'] = True
    config = dataclasses.replace(config, **overrides)

    report = DeclarationConverter(config).convert_paths(args.paths)
    for failure in report.failures:
        print(f"{failure.source}: {failure.error_type}: {failure.message}", file=sys.stderr)

    return 0 if report.succeeded else 1


if __name__ == '__main__':
    sys.exit(main())
