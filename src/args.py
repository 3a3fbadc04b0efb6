"""Argument parsing functionality for plugindex."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="plugindex",
        description=(
            "Sync plugin records with their Maven repository and rebuild the plugin index"
        ),
        add_help=True,
    )

    parser.add_argument("plugin_file",
                        metavar="FILE",
                        nargs="?",
                        help="Process only this plugin record file (no index is written)",
                        type=str)
    parser.add_argument("-r", "--root",
                        dest="ROOT_DIR",
                        help=f"Root directory of the plugin records (default: {Constants.ROOT_DIR})",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help=f"Path of the aggregate JSON index (default: {Constants.INDEX_FILE})",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
