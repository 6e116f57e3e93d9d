#!/usr/bin/env python3
"""Main entry point for inspection video review automation"""

import asyncio
import sys
import argparse
from loguru import logger
from dotenv import load_dotenv

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def configure_logging(debug: bool = False):
    """Console sink plus a rotating JSON log file"""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO", format=LOG_FORMAT)
    logger.add("logs/review_json_{time}.log", rotation="1 day", retention="7 days", level="DEBUG", serialize=True)


configure_logging()

# Load environment variables
load_dotenv()

from src.config.settings import ConfigurationError, DEFAULT_CONFIG_PATH, load_settings
from src.review.runner import run_review_batch


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Inspection Video Review Automation')
    parser.add_argument('--csv', dest='csv_path', type=str, help='CSV/TSV file with FileName, BOWNumber, Comment columns (default: videos.csv)')
    parser.add_argument('--config', type=str, default=DEFAULT_CONFIG_PATH, help='Optional YAML config with portal/timing overrides')
    parser.add_argument('--headless', action='store_true', default=None, help='Run browser in headless mode (no UI)')
    parser.add_argument('--report', dest='report_path', type=str, help='Write a per-video CSV report to this path')
    parser.add_argument('--debug', action='store_true', help='Enable verbose logging')
    return parser.parse_args(argv)


async def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    if args.debug:
        configure_logging(debug=True)
        logger.debug("DEBUG mode enabled (verbose logging active)")

    try:
        settings = load_settings(
            config_path=args.config,
            overrides={
                'csv_path': args.csv_path,
                'headless': args.headless,
                'report_path': args.report_path,
            },
        )
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Set PORTAL_USERNAME and PORTAL_PASSWORD in the environment or .env file")
        return 1

    settings.log_summary()

    report = await run_review_batch(settings)

    report.log_summary()
    if settings.report_path:
        try:
            report.save_csv(settings.report_path)
        except OSError as e:
            logger.error(f"Error saving CSV report: {e}")

    if report.fatal_error:
        return 1
    return 0


def run(argv=None) -> int:
    """Run main() to completion and map Ctrl-C to exit code 130"""
    try:
        return asyncio.run(main(argv))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(run())
