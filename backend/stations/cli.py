"""
Station table CLI

Usage:
    weatherstar-stations                      # stations.txt -> stations.js
    weatherstar-stations in.txt out.js
"""

import argparse
import logging
import sys
from typing import List, Optional

from .generator import convert, StationFormatError

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Convert the fixed-width station list into the client's lookup table",
    )
    parser.add_argument("input", nargs="?", default="stations.txt", help="fixed-width station list")
    parser.add_argument("output", nargs="?", default="stations.js", help="JavaScript table to write")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    try:
        convert(args.input, args.output)
    except OSError as e:
        logger.error(f"[Stations] Error converting {args.input}: {e}")
        return 1
    except StationFormatError as e:
        logger.error(f"[Stations] Error parsing {args.input}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
