#!/usr/bin/env python3
"""
CLI Router for the Link Checker.

Modular command architecture for checking links.
"""

import argparse
import logging
import sys
from typing import Optional, List

from commands import get_command, COMMANDS
from core.config import get_config_manager
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for link checking commands.

    Command structure:
    - python run.py check page https://example.com --concurrency 5
    - python run.py check urls links.txt --output report.json
    - python run.py integrations status
    """

    def __init__(self):
        """Initialize CLI router."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Link Checker - validate hyperlinks with bounded parallelism",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_check_parser(subparsers)
        self._add_integrations_parser(subparsers)

        return parser

    def _add_run_options(self, parser: argparse.ArgumentParser) -> None:
        """Options shared by every check subcommand."""
        parser.add_argument('--concurrency', type=int, default=None, help='Maximum concurrent checks (default: CONCURRENT_CHECKS or 5)')
        parser.add_argument('--timeout', type=float, default=None, help='Per-probe timeout in seconds (default: CHECK_TIMEOUT or 10)')
        parser.add_argument('--retries', type=int, default=None, help='HEAD retries on network errors and timeouts (default: MAX_RETRIES or 1)')
        parser.add_argument('--retry-delay-ms', dest='retry_delay_ms', type=int, default=None, help='Delay between retries in milliseconds (default: RETRY_DELAY_MS or 500)')
        parser.add_argument('--output', default=None, help='Write a report file (.json or .csv)')
        parser.add_argument('--slack', action='store_true', help='Send the summary to Slack (requires SLACK_WEBHOOK_URL)')
        parser.add_argument('--verbose', action='store_true', help='Verbose output')

    def _add_check_parser(self, subparsers):
        """Add check command parser."""
        check_parser = subparsers.add_parser(
            'check',
            help='Check links on a page or in a URL list'
        )

        check_subparsers = check_parser.add_subparsers(
            dest='subcommand',
            help='Check operations',
            metavar='{page,urls}'
        )

        # Page subcommand
        page_parser = check_subparsers.add_parser('page', help='Check all links on a web page or local HTML file')
        page_parser.add_argument('source', help='Page URL or path to an HTML file')
        page_parser.add_argument('--base-url', dest='base_url', default=None, help='Base URL for resolving relative links')
        page_parser.add_argument('--include-all', dest='include_all', action='store_true', help='Also report fragment-only and non-HTTP(S) links as skipped')
        page_parser.add_argument('--unique', action='store_true', help='Check each distinct URL once')
        self._add_run_options(page_parser)

        # URLs subcommand
        urls_parser = check_subparsers.add_parser('urls', help='Check URLs listed in a text file (one per line)')
        urls_parser.add_argument('file', help='Path to the URL list')
        self._add_run_options(urls_parser)

    def _add_integrations_parser(self, subparsers):
        """Add integrations command parser."""
        integrations_parser = subparsers.add_parser(
            'integrations',
            help='External integration management'
        )

        integrations_subparsers = integrations_parser.add_subparsers(
            dest='subcommand',
            help='Integration operations',
            metavar='{test,status}'
        )

        integrations_subparsers.add_parser('test', help='Send a test message to Slack')
        integrations_subparsers.add_parser('status', help='Show integration status')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  python run.py check page https://example.com
  python run.py check page saved.html --base-url https://example.com --unique
  python run.py check urls links.txt --concurrency 10 --output report.csv
  python run.py check page https://example.com --slack

  python run.py integrations status
  python run.py integrations test

Exit codes: 0 all links reachable, 3 broken links found, other non-zero on errors.
"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args = self.parser.parse_args(args)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            if getattr(parsed_args, 'verbose', False):
                get_config_manager().update_logging(verbose=True)

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self.parser.print_help()
            return 1

        command = get_command(args.command)
        return command.execute(subcommand, args)


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        get_config_manager().update_logging()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 22

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
