"""plugindex - keep plugin records in sync with their Maven repository.

Without arguments every record below the root directory is reconciled and
the aggregate JSON index is rewritten. With a file argument only that record
is reconciled.

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from constants import ExitCodes, Constants
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import ConfigError, apply_cli_overrides, apply_config, load_config_file, resolve_config_path
from catalog.index import update_index
from catalog.reconciler import process_plugin_file


def process_single_file(path):
    """Reconcile one record file.

    Args:
        path (str): Record file to process.

    Returns:
        int: Exit code
    """
    if not os.path.isfile(path):
        logging.error("Specified file '%s' does not exist or is not a file", path)
        return ExitCodes.FILE_ERROR.value
    process_plugin_file(path)
    logging.info("Processed single file: %s", path)
    return ExitCodes.SUCCESS.value


def process_tree(root_dir, index_path):
    """Reconcile every record below ``root_dir`` and rewrite the index.

    Args:
        root_dir (str): Root of the record tree.
        index_path (str): Output path of the aggregate index.

    Returns:
        int: Exit code
    """
    if not os.path.isdir(root_dir):
        logging.error("Directory '%s' not found in %s", root_dir, os.path.abspath("."))
        return ExitCodes.FILE_ERROR.value
    update_index(root_dir, index_path)
    return ExitCodes.SUCCESS.value


def run(argv=None):
    """Run the CLI and return its exit code."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)

    config_path = resolve_config_path(args)
    if config_path:
        try:
            apply_config(load_config_file(config_path))
        except ConfigError as exc:
            logging.error("%s", exc)
            return ExitCodes.FILE_ERROR.value
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action="main",
                target=args.plugin_file or Constants.ROOT_DIR,
            )
        )

    if args.plugin_file:
        return process_single_file(args.plugin_file)
    return process_tree(Constants.ROOT_DIR, Constants.INDEX_FILE)


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
