import argparse
import logging
import sys
from pathlib import Path

from .core.advisor import PumpAdvisor
from .core.catalog import PumpCatalog, seed_catalog
from .core.db import get_database_manager
from .core.model import build_chat_llm
from .core.selection import SelectionService
from .setting import get_settings


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.ERROR)
    logging.getLogger("uvicorn").setLevel(logging.INFO)


logger = logging.getLogger(__name__)


def _add_server_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    """Server flags, accepted both before and after the ``serve`` command.

    With ``suppress`` the flags get no defaults, so a value given before
    the subcommand is not overwritten by the subparser.
    """
    def default(value):
        return argparse.SUPPRESS if suppress else value

    parser.add_argument("--host", type=str, default=default("0.0.0.0"), help="Bind address")
    parser.add_argument("--port", type=int, default=default(9005), help="Port for the API server")
    parser.add_argument("--seed", action="store_true", default=default(False),
                        help="Seed the catalog before serving")
    _add_logging_options(parser, suppress)


def _add_logging_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        default=argparse.SUPPRESS if suppress else "INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Debug logging and SQL echo"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="WellPump - water-well pump selection")
    _add_server_options(parser)
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the API server (default)")
    _add_server_options(serve, suppress=True)

    seed = sub.add_parser("seed", help="Load the pump seed document into the database")
    seed.add_argument("--file", type=str, default=None, help="Seed JSON (default: PUMP_SEED_PATH)")
    seed.add_argument("--clear", action="store_true", help="Delete all pumps first")
    _add_logging_options(seed, suppress=True)

    return parser


def run_seed(seed_file: str = None, clear: bool = False, debug: bool = False) -> int:
    settings = get_settings()
    path = Path(seed_file or settings.selection.seed_path)
    db_manager = get_database_manager(echo=True if debug else None)
    try:
        count = seed_catalog(PumpCatalog(db_manager), path, clear=clear)
        logger.info(f"Database seeded successfully with {count} pumps")
        return count
    finally:
        db_manager.close()


def run_server(host: str, port: int, log_level: str, seed: bool = False, debug: bool = False) -> None:
    settings = get_settings()

    db_manager = get_database_manager(echo=True if debug else None)
    catalog = PumpCatalog(db_manager)

    if seed:
        try:
            seed_catalog(catalog, settings.selection.seed_path)
        except Exception as e:
            logger.error(f"Failed to seed pump catalog: {e}")

    advisor = PumpAdvisor(
        llm=build_chat_llm(settings.llm),
        image_base_url=settings.selection.image_base_url,
    )
    selection = SelectionService(catalog, advisor)

    # Build FastAPI app
    from .api.app import create_app
    app = create_app(
        db_manager=db_manager,
        pump_catalog=catalog,
        pump_advisor=advisor,
        selection_service=selection,
        cors_origins=settings.cors_origins,
    )

    # Launch with uvicorn
    import uvicorn

    logger.info(f"Starting FastAPI server on http://{host}:{port}")
    print(f"\n  WellPump is running at: http://localhost:{port}")
    print(f"  API docs at: http://localhost:{port}/docs\n")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level.lower(),
    )


def main(argv=None):
    """Main entry point for WellPump."""
    args = _build_parser().parse_args(argv)
    log_level = "DEBUG" if args.debug else args.log_level
    setup_logging(log_level)

    if args.command == "seed":
        run_seed(args.file, clear=args.clear, debug=args.debug)
        return

    run_server(
        host=args.host,
        port=args.port,
        log_level=log_level,
        seed=args.seed,
        debug=args.debug,
    )


if __name__ == "__main__":
    main()
