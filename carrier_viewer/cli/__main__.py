from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from carrier_viewer.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ViewerConfig, load_config
from carrier_viewer.gviz.decoder import DecodeError, decode_response
from carrier_viewer.logging.error_log import ErrorLogBuffer
from carrier_viewer.logging.init import get_logger, log_summary, setup_logging
from carrier_viewer.models.fetch import FetchStatus
from carrier_viewer.models.fields import field_ids, get_field, lookup_field
from carrier_viewer.models.view_state import PageState, SortDirection
from carrier_viewer.services.engine import DataEngine
from carrier_viewer.services.fetcher import GvizFetcher, NetworkError
from carrier_viewer.services.formatting import pagination_caption, render_grid
from carrier_viewer.services.query_planner import plan_fetch
from carrier_viewer.services.summary import render_summary_line

"""CLI entrypoint: terminal presentation of the carrier registry grid.

Flow:
- Load .env (wins over existing environment) and the YAML config
- Build the engine, apply page size / filters / sort / page intents
- Mount (single fetch), print the grid, pagination caption and SUMMARY line
- Flush fetch diagnostics if anything failed
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_LOAD_FAILED = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; values in the file override the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="FMCSA carrier registry viewer")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--page", type=int, default=0, help="Zero-based page index")
    p.add_argument("--page-size", type=int, default=None, help="Rows per page (default: config page_size)")
    p.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="FIELD=PATTERN",
        help="Case-insensitive substring filter; may be repeated",
    )
    p.add_argument("--sort", default=None, metavar="FIELD[:asc|desc]", help="Sort the loaded page by a field")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print remote column labels & first rows then exit")
    return p.parse_args(argv)


def _parse_filter(text: str) -> tuple[str, str]:
    field_id, sep, pattern = text.partition("=")
    if not sep:
        raise ValueError(f"filter must look like FIELD=PATTERN: {text!r}")
    field_id = field_id.strip()
    get_field(field_id)
    return field_id, pattern


def _parse_sort(text: str) -> tuple[str, SortDirection]:
    field_id, _, direction = text.partition(":")
    field_id = field_id.strip()
    get_field(field_id)
    return field_id, SortDirection((direction or "asc").strip().lower())


def _inspect_data(fetcher: GvizFetcher, page_size: int) -> int:
    try:
        descriptor = plan_fetch(PageState(index=0, size=page_size))
    except ValueError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    try:
        table = decode_response(fetcher(descriptor))
    except (NetworkError, DecodeError) as e:
        print(f"inspect: fetch_error: {e}")
        return EXIT_LOAD_FAILED
    recognized = [c for c in table.columns if lookup_field(c) is not None]
    ignored = [c for c in table.columns if lookup_field(c) is None]
    print(f"COLUMNS: {table.columns}")
    print(f"  recognized={recognized} ignored={ignored}")
    missing = sorted(set(field_ids()) - {lookup_field(c).id for c in recognized})
    if missing:
        print(f"  missing_fields={missing}")
    for pairs in table.rows[:3]:
        print("    sample_row=", dict(pairs))
    return EXIT_SUCCESS


def _run_engine(args: argparse.Namespace, cfg: ViewerConfig, fetcher: GvizFetcher) -> int:
    logger = get_logger()
    try:
        filters = [_parse_filter(f) for f in args.filter]
        sort = _parse_sort(args.sort) if args.sort else None
        page_size = args.page_size if args.page_size is not None else cfg.page_size
        engine = DataEngine(
            fetcher,
            page_size=page_size,
            nominal_count=cfg.nominal_count,
            diagnostics=ErrorLogBuffer(),
        )
        # mount 前の intent は状態のみ更新 (fetch は mount 時の 1 回)
        for field_id, pattern in filters:
            engine.set_filter(field_id, pattern)
        if sort is not None:
            engine.set_sort(*sort)
        engine.set_page(args.page)
    except (KeyError, ValueError) as e:
        logger.error(f"arguments: {e}")
        return EXIT_FATAL

    engine.mount()
    snap = engine.snapshot()

    if snap.error:
        logger.error(snap.error)
    print(render_grid(snap.rows, loading=snap.loading))
    print(pagination_caption(snap.page, snap.total_count))

    summary_line = render_summary_line(snap)
    log_summary(summary_line[len("SUMMARY "):])

    if engine.diagnostics is not None:
        path = engine.diagnostics.flush()
        if path is not None:
            logger.info(f"fetch diagnostics written to {path}")

    return EXIT_LOAD_FAILED if snap.status is FetchStatus.FAILED else EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: 空リスト [] はそのまま使う (None のときのみ sys.argv を読む)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    config_path = args.config if args.config is not None else DEFAULT_CONFIG_PATH
    try:
        cfg = load_config(config_path, required=args.config is not None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        logger = setup_logging(debug=True)
        logger.debug("debug mode enabled")

    logger.info(f"Source spreadsheet: {cfg.spreadsheet_id}")

    with GvizFetcher(cfg.spreadsheet_id, base_url=cfg.base_url, timeout=cfg.timeout_seconds) as fetcher:
        if args.inspect_data:
            return _inspect_data(fetcher, args.page_size if args.page_size is not None else cfg.page_size)
        return _run_engine(args, cfg, fetcher)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
