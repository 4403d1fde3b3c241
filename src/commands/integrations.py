#!/usr/bin/env python3
"""
Integrations command endpoints for managing external service connections.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.config import get_config_manager

logger = logging.getLogger(__name__)

INTEGRATION_ENV_VARS = {
    'slack_webhook': 'SLACK_WEBHOOK_URL',
}


class IntegrationsCommand(BaseCommand):
    """Handle external integration operations."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute integrations subcommand."""
        try:
            if subcommand == "test":
                return self.test(args)
            elif subcommand == "status":
                return self.status(args)
            else:
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1

        except Exception as e:
            return self.handle_error(e, f"integrations {subcommand}")

    def test(self, args: Namespace) -> int:
        """Send a test message through every configured integration."""
        print("🔍 Testing integrations...")
        slack_status = self._test_slack()

        print(f"\n=== Integration Test Results ===")
        print(f"💬 Slack webhook: {'✅ Connected' if slack_status else '❌ Failed'}")
        return 0 if slack_status else 1

    def status(self, args: Namespace) -> int:
        """Show status of all integrations."""
        status = get_config_manager().get_integration_status()

        print("📊 Integration Status:")
        print(f"🔑 Environment Variables:")
        for key, available in status.items():
            name = INTEGRATION_ENV_VARS.get(key, key)
            print(f"   • {name}: {'✅ Set' if available else '❌ Missing'}")
        return 0

    def _test_slack(self) -> bool:
        """Test Slack connection."""
        from integrations.slack_notifier import SlackNotifier
        try:
            client = SlackNotifier(self.config.integrations.slack_webhook_url)
        except ValueError as e:
            self.logger.warning(f"Slack test skipped: {e}")
            return False
        return client.test_connection()
