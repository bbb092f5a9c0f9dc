"""Command-line import of vocabulary CSV exports into a chapter."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chinese_learn.io import ApiClient, ApiError, ChapterRepository, VocabularyRepository
from chinese_learn.services import CsvImportService, CsvImportSummary, SettingsManager

DEFAULT_CHAPTER = "HSK 1"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chinese-learn-import-csv",
        description="Import vocabulary CSV files from a directory into a chapter",
    )
    parser.add_argument("directory", type=Path, help="Directory containing .csv files")
    parser.add_argument(
        "--chapter",
        default=DEFAULT_CHAPTER,
        help=f"Chapter name, created when missing (default: {DEFAULT_CHAPTER})",
    )
    parser.add_argument("--description", default="", help="Description for a newly created chapter")
    parser.add_argument("--api-url", help="Backend base URL (overrides CHINESE_LEARN_API_URL)")
    return parser


def print_summary(summary: CsvImportSummary) -> None:
    print(f"Chapter: {summary.chapter.name} (id {summary.chapter.id})")
    for result in summary.files:
        if result.error:
            print(f"  {result.path.name}: skipped ({result.error})")
            continue
        line = f"  {result.path.name}: {result.created} new, {result.updated} updated"
        if result.skipped_rows:
            line += f", {result.skipped_rows} rows without Chinese skipped"
        print(line)
    print(f"Done: {summary.created} created, {summary.updated} updated")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = SettingsManager()
    logging.basicConfig(
        level=getattr(logging, settings.get_log_level(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )

    api = ApiClient(args.api_url or settings.get_api_base_url(), timeout=settings.get_request_timeout())
    service = CsvImportService(ChapterRepository(api), VocabularyRepository(api))
    try:
        summary = service.import_directory(args.directory, args.chapter, args.description)
    except ValueError as e:
        logger.error("%s", e)
        return 2
    except ApiError as e:
        logger.error("Backend request failed: %s", e.message)
        return 1
    finally:
        api.close()

    print_summary(summary)
    return 1 if any(f.error for f in summary.files) else 0


if __name__ == "__main__":
    sys.exit(main())
