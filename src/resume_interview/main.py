"""
Main entry point for the Resume Interview application.
"""

import argparse
import asyncio
import logging
import sys

from resume_interview.config import get_settings
from resume_interview.io.text_interface import TextInterface
from resume_interview.orchestrator.interview_service import build_interview_service


def setup_logging() -> None:
    """Configure application logging."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="resume-interview")
    parser.add_argument(
        "--mode",
        choices=["text", "api"],
        default="text",
        help="Run an interactive terminal session or serve the HTTP API",
    )
    parser.add_argument(
        "--resume",
        default=None,
        help="Resume file (.txt or .docx) for text mode; prompts for pasted text if omitted",
    )
    parser.add_argument("--host", default=settings.api_host, help="Bind address for api mode")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Bind port for api mode")
    return parser


async def run_interview(document_path: str | None) -> None:
    """
    Run an interactive interview session in the terminal.

    Args:
        document_path: Resume file to load, or None to paste text.
    """
    settings = get_settings()
    logger = logging.getLogger(__name__)

    logger.info("Initializing Resume Interview...")
    logger.debug(f"Using completion model: {settings.completion_model}")

    service = build_interview_service(settings)
    try:
        await TextInterface(service, document_path=document_path).run()
    finally:
        await service.close()


def serve(host: str, port: int) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from resume_interview.api import create_app

    # Logging is configured by setup_logging; keep uvicorn from replacing it.
    uvicorn.run(create_app(), host=host, port=port, log_config=None)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    setup_logging()
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)

    try:
        if args.mode == "api":
            serve(args.host, args.port)
        else:
            asyncio.run(run_interview(args.resume))
    except KeyboardInterrupt:
        print("\nInterview session terminated by user.")
        sys.exit(0)
    except Exception as e:
        logging.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
