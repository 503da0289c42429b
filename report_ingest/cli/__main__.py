from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, IngestConfig, load_config
from ..excel.reader import WorkbookReadError, read_workbook
from ..logging.init import log_summary, setup_logging
from ..services.orchestrator import ProcessingError, load_directory, scan_report_files
from ..services.router import classify
from ..services.summary import render_summary_line

"""CLI entrypoint.

    python -m report_ingest.cli [--config PATH] [--debug] [--inspect-data]

Loads every report workbook in the configured directory, logs one line per
file and finishes with a SUMMARY line. ``--inspect-data`` only prints the
family each file routes to and the first rows of its sheets.

Exit codes: 0 all files parsed (or skipped), 2 at least one file failed,
1 fatal (bad config, missing directory).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_ROWS = 3


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="report_ingest", description="Load retail report workbooks")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print family, sheets & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: IngestConfig) -> int:
    try:
        paths = scan_report_files(Path(cfg.source_directory), cfg.extensions)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not paths:
        print("inspect: no report files")
        return EXIT_SUCCESS_ALL
    for path in paths:
        print(f"FILE: {path.name} family={classify(path.name).value}")
        try:
            workbook = read_workbook(path, keep_na_strings=cfg.keep_na_strings)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        for name in workbook.sheet_names:
            sheet = workbook.sheet(name)
            print(f"  SHEET: {name} rows={sheet.n_rows} cols={sheet.n_cols}")
            for r in range(min(INSPECT_ROWS, sheet.n_rows)):
                # datetime cells are shown as ISO strings
                row = [v.isoformat() if hasattr(v, "isoformat") else v for v in sheet.row(r)]
                print(f"    {r}: {row}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # Only read sys.argv when called without arguments (tests pass [])
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Processing files from: {cfg.source_directory}")
    try:
        _, report = load_directory(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    # log_summary adds the "SUMMARY" label itself
    summary_line = render_summary_line(report)
    log_summary(summary_line[len("SUMMARY "):])

    if report.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
