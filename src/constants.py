"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "PLUGINDEX_LOG_LEVEL"
    ENV_CONFIG = "PLUGINDEX_CONFIG"

    # Record store
    ROOT_DIR = "grails-plugins"
    INDEX_FILE = "grails-plugins-index.json"
    RECORD_EXTENSIONS = (".yml", ".yaml")
    YAML_WIDTH = 100

    # Remote repository
    USER_AGENT = "Grails Plugin Version Update Checker"
    CONNECT_TIMEOUT = 20  # seconds
    READ_TIMEOUT = 20  # seconds
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    METADATA_FILE = "maven-metadata.xml"
    # Tried strictly in this order: primary jar, "-plain" jar, legacy Grails 2 zip
    ARTIFACT_VARIANTS = ("{base}.jar", "{base}-plain.jar", "{base}.zip")
    DESCRIPTOR_PATHS = ("META-INF/grails-plugin.xml", "plugin.xml")
    COMPATIBILITY_ATTRIBUTE = "grailsVersion"

    # Keys that a config file may override, mapped to the attribute they set
    CONFIG_KEYS = {
        "root_dir": "ROOT_DIR",
        "index_file": "INDEX_FILE",
        "user_agent": "USER_AGENT",
        "connect_timeout": "CONNECT_TIMEOUT",
        "read_timeout": "READ_TIMEOUT",
        "record_extensions": "RECORD_EXTENSIONS",
    }
