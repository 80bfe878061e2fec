"""CLI for building the Zettelkasten graph of a notes folder and refreshing its cache"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from zettelkit.cache.local import LocalCacheStore
from zettelkit.config import settings
from zettelkit.exceptions import ZettelkitError
from zettelkit.ingestion.orchestrator import ZettelkastenOrchestrator


def main(
    in_folder: str,
    cache_file: str,
    recurse_dir: bool,
) -> int:
    build_settings = settings.model_copy(
        update={
            "notes_dir": Path(in_folder),
            "cache_path": Path(cache_file),
            "recurse_dir": recurse_dir,
        }
    )
    orchestrator = ZettelkastenOrchestrator(
        settings=build_settings,
        cache_store=LocalCacheStore(filepath=build_settings.cache_path),
    )

    try:
        result = orchestrator.generate()
    except ZettelkitError as e:
        logger.error(str(e))
        return 1

    print(result.error_report(), end="")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--in-folder",
        type=str,
        required=False,
        help="Folder containing markdown notes",
        default=str(settings.notes_dir),
    )
    parser.add_argument(
        "--cache-file",
        type=str,
        required=False,
        help="Cache file to check and refresh",
        default=str(settings.cache_path),
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="Also discover notes in subfolders",
        default=settings.recurse_dir,
    )

    args = parser.parse_args()

    logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

    sys.exit(
        main(
            in_folder=args.in_folder,
            cache_file=args.cache_file,
            recurse_dir=args.recursive,
        )
    )
