#!/usr/bin/env python3
"""
Slack integration for sending link check reports.

Posts run summaries and alerts to a Slack channel via an incoming webhook.
"""

import os
import logging
from typing import Dict, Optional, Any
from datetime import datetime

import requests

from core.models.run_state import RunSummary

logger = logging.getLogger(__name__)


class SlackNotifier:
    """Handles sending notifications to Slack."""

    def __init__(self, webhook_url: Optional[str] = None, max_listed_links: int = 20):
        """
        Initialize Slack notifier.

        Args:
            webhook_url: Slack webhook URL. If None, tries to get from environment.
            max_listed_links: Broken links listed in a summary before truncating
        """
        self.webhook_url = webhook_url or os.getenv('SLACK_WEBHOOK_URL')
        if not self.webhook_url:
            raise ValueError("Slack webhook URL not provided and not found in SLACK_WEBHOOK_URL environment variable")

        self.timeout = 10
        self.max_message_length = 4000
        self.max_listed_links = max_listed_links

    def send_message(self, text: str, channel: Optional[str] = None, username: str = "LinkChecker") -> bool:
        """
        Send a simple text message to Slack.

        Args:
            text: Message text
            channel: Optional channel override
            username: Bot username for the message

        Returns:
            True if sent successfully, False otherwise
        """
        if len(text) > self.max_message_length:
            text = text[:self.max_message_length - 3] + "..."

        payload = {
            "text": text,
            "username": username,
            "icon_emoji": ":link:"
        }

        if channel:
            payload["channel"] = channel

        return self._send_webhook_message(payload)

    def format_run_summary(self, summary: RunSummary, source: str = "") -> Dict[str, Any]:
        """Build a Block Kit payload for a run summary."""
        header = "🔗 Link check: all links reachable" if not summary.has_broken else \
            f"🔗 Link check: {summary.broken} broken of {summary.total}"

        context = f"📅 {summary.finished_at.strftime('%Y-%m-%d %H:%M')} | ⏱️ {summary.duration:.1f}s"
        if source:
            context += f" | {source}"

        blocks = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": header, "emoji": True}
            },
            {
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": context}]
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"✅ OK: *{summary.ok}*   ❌ Broken: *{summary.broken}*   ⏭️ Skipped: *{summary.skipped}*"
                }
            }
        ]

        if summary.broken_links:
            listed = summary.broken_links[:self.max_listed_links]
            lines = [f"• <{link.url}|{link.url[:70]}> ({link.reason})" for link in listed]
            remaining = len(summary.broken_links) - len(listed)
            if remaining > 0:
                lines.append(f"_...and {remaining} more_")
            text = "\n".join(lines)
            if len(text) > self.max_message_length:
                text = text[:self.max_message_length - 3] + "..."
            blocks.append({
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"*Broken links*\n{text}"}
            })

        return {
            "text": summary.headline(),
            "blocks": blocks,
            "username": "LinkChecker",
            "icon_emoji": ":link:"
        }

    def send_run_summary(self, summary: RunSummary, source: str = "") -> bool:
        """Send a formatted run summary to Slack."""
        return self._send_webhook_message(self.format_run_summary(summary, source))

    def _send_webhook_message(self, payload: Dict[str, Any]) -> bool:
        """
        Send a message via Slack webhook.

        Args:
            payload: Slack message payload

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            response = requests.post(
                self.webhook_url,
                json=payload,
                timeout=self.timeout,
                verify=True,
                headers={"Content-Type": "application/json"}
            )

            if response.status_code == 200:
                logger.info("Slack message sent successfully")
                return True
            else:
                logger.error(f"Slack webhook failed with status {response.status_code}: {response.text}")
                return False

        except requests.RequestException as e:
            logger.error(f"Failed to send Slack message: {e}")
            return False

    def test_connection(self) -> bool:
        """Test Slack webhook connection."""
        test_message = {
            "text": f"🧪 Test message from LinkChecker - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "username": "LinkChecker Test",
            "icon_emoji": ":test_tube:"
        }

        success = self._send_webhook_message(test_message)

        if success:
            logger.info("Slack connection test successful")
        else:
            logger.error("Slack connection test failed")

        return success
