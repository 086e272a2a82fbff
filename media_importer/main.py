import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import Optional

from . import config
from .core import MediaImporterApp
from .events import LoggingEventSink, TqdmEventSink
from .exceptions import MediaImporterError

EXIT_CANCELLED = 130


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Media Importer: copy photos and videos, renamed by capture time")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import media from SRC into DEST")
    imp.add_argument("src", type=Path, help="Source directory to scan")
    imp.add_argument("dest", type=Path, help="Destination directory")
    imp.add_argument("-t", "--template", default=config.DEFAULT_TEMPLATE,
                     help=f"strftime-style filename template (default: {config.DEFAULT_TEMPLATE.replace('%', '%%')})")
    imp.add_argument("--no-progress", action="store_true", help="Log progress lines instead of a progress bar")

    prev = sub.add_parser("preview", help="Show the filename a template produces right now")
    prev.add_argument("template")

    sub.add_parser("default-source", help="Suggest a source directory (removable disk first)")

    return p.parse_args(argv)


def run_import(app: MediaImporterApp, src: Path, dest: Path, template: str) -> int:
    """Runs the import on a worker thread so Ctrl-C can request a stop."""
    outcome = {}

    def worker():
        try:
            outcome['result'] = app.start(src, dest, template)
        except MediaImporterError as e:
            logging.error(str(e))
        except Exception:
            logging.exception("Fatal error during import.")

    thread = threading.Thread(target=worker, name="media-import", daemon=True)
    thread.start()
    try:
        while thread.is_alive():
            thread.join(timeout=0.2)
    except KeyboardInterrupt:
        logging.warning("Stopping import, finishing the current file...")
        app.stop()
        thread.join()

    if "result" not in outcome:
        return 1

    result = outcome['result']
    print(f"Imported: {result.imported}  Skipped: {result.skipped}  Failed: {result.failed}")
    if result.cancelled:
        logging.warning("Operation cancelled by user.")
        return EXIT_CANCELLED
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    if args.command == "preview":
        example = MediaImporterApp().preview_filename_template(args.template)
        if not example:
            logging.error(f"Invalid filename template: {args.template!r}")
            return 1
        print(example)
        return 0

    if args.command == "default-source":
        try:
            print(MediaImporterApp().default_source())
        except MediaImporterError as e:
            logging.error(str(e))
            return 1
        return 0

    src_root = args.src.resolve()
    dest_root = args.dest.resolve()

    logging.info("=== Media Importer Started ===")
    logging.info(f"Source: {src_root}")
    logging.info(f"Dest:   {dest_root}")

    if not MediaImporterApp().preview_filename_template(args.template):
        logging.error(f"Invalid filename template: {args.template!r}")
        return 1

    sink = LoggingEventSink() if args.no_progress else TqdmEventSink(verbose=args.verbose)
    app = MediaImporterApp(sink)
    try:
        return run_import(app, src_root, dest_root, args.template)
    finally:
        if isinstance(sink, TqdmEventSink):
            sink.close()


if __name__ == "__main__":
    sys.exit(main())
