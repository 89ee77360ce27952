# ============================================================================
# Configuration and Setup Section
# ============================================================================
# Command-line entry point. Takes a Gradle/Maven cache path (or falls back to
# the EXAMPLE environment variable, then to a built-in example) and prints the
# web URL of the matching source file.

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

#=============================================================================
# Import internal packages
#=============================================================================
from depgitrepo.config import DEFAULT_EXAMPLE
from depgitrepo.http_client import HttpClient
from depgitrepo.logging_utils import setup_logging
from depgitrepo.resolver import RESOLUTION_ERRORS, resolve

load_dotenv()

logger = logging.getLogger('main')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Resolve a dependency cache path to the web URL of its source file')
    parser.add_argument(
        'path', nargs='?',
        help='Cache path such as .../files-2.1/<group>/<artifact>/<version>/<hash>/<jar>!/<entry> '
             '(default: $EXAMPLE or a built-in example)')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    path = args.path or os.getenv("EXAMPLE") or DEFAULT_EXAMPLE

    setup_logging()
    logger.info(f"Resolving source URL for: {path}")

    client = HttpClient()
    try:
        resolution = resolve(path, client)
    except RESOLUTION_ERRORS as e:
        logger.error(f"Resolution failed: {str(e)}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()

    if not resolution.verified:
        print("Warning: no candidate could be verified, URL is a best guess", file=sys.stderr)
    print(resolution.url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
