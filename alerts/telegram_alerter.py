"""
Telegram push notifications for supply spike alerts.

Setup:
1. Create bot via @BotFather on Telegram
2. Get bot token and your chat ID
3. Add to .env:
   TELEGRAM_BOT_TOKEN=your_bot_token
   TELEGRAM_CHAT_ID=your_chat_id
   TELEGRAM_ALERTS_ENABLED=true

Every alert is also written to the structured event log, so a failed push
never loses the alert.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Optional

import requests

from alerts.sink import LogAlertSink
from monitor.sample import AlertPayload

logger = logging.getLogger(__name__)


class TelegramAlertSink:
    """
    Telegram notification sink.

    Sends formatted messages to a Telegram chat via bot API.
    """

    def __init__(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[str] = None,
        enabled: bool = True,
        timeout_seconds: float = 10,
    ):
        self.bot_token = bot_token or os.getenv("TELEGRAM_BOT_TOKEN")
        self.chat_id = chat_id or os.getenv("TELEGRAM_CHAT_ID")
        self.enabled = enabled and os.getenv("TELEGRAM_ALERTS_ENABLED", "false").lower() == "true"
        self.timeout_seconds = timeout_seconds
        self.fallback = LogAlertSink()

        if self.enabled and (not self.bot_token or not self.chat_id):
            logger.warning("Telegram alerts enabled but missing BOT_TOKEN or CHAT_ID")
            self.enabled = False

    @staticmethod
    def format_message(payload: AlertPayload) -> str:
        return (
            f"<b>SUPPLY SPIKE</b>\n\n"
            f"Token: <code>{payload.token}</code>\n"
            f"Old supply: {payload.old_supply}\n"
            f"New supply: {payload.new_supply}\n"
            f"Increase: {payload.increase}\n"
            f"Time: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC"
        )

    def send_message(self, text: str, parse_mode: str = "HTML") -> bool:
        """
        Send message via Telegram Bot API.

        Returns:
            True if sent successfully
        """
        if not self.enabled:
            return False

        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        data = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "disable_web_page_preview": True,
        }
        try:
            resp = requests.post(url, data=data, timeout=self.timeout_seconds)
            resp.raise_for_status()
            return bool(resp.json().get("ok", False))
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Telegram send failed: {e}")
            return False

    def emit(self, payload: AlertPayload) -> None:
        self.fallback.emit(payload)
        self.send_message(self.format_message(payload))
