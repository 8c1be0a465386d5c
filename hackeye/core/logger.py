"""
HackeyeBot - Logger Module
==========================

Tree-style logging with Eastern timestamps and daily rotation.

DESIGN:
    A raid shows up as a burst of assessments within seconds, so every
    assessment, incident and store failure is written as one small tree
    block. A block is appended to the day's file in a single write and
    cannot be split by another block.

    Layout under LOGS_DIR:
        <YYYY-MM-DD>/Hackeye-<date>.log          everything
        <YYYY-MM-DD>/Hackeye-Errors-<date>.log   error and critical only
        errors/                                  critical error context

    Dated folders older than LOG_RETENTION_DAYS are removed at startup.
    Errors with details are also posted to the error webhook, if set.
"""

import asyncio
import os
import shutil
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Set, Tuple

import aiohttp

from hackeye.core.config import NY_TZ


# =============================================================================
# Constants
# =============================================================================

LOGS_DIR = Path(os.getenv("HACKEYE_LOGS_DIR", "logs"))
"""Root of all log output. Tests point this at a temp directory."""

LOG_RETENTION_DAYS = 7

WEBHOOK_TIMEOUT = 10
WEBHOOK_COLORS = {
    "error": 0xE74C3C,
    "critical": 0x8B0000,
}

Details = Optional[List[Tuple[str, str]]]


# =============================================================================
# Tree Logger Class
# =============================================================================

class TreeLogger:
    """
    Console and file logger with ├─ └─ detail trees.

    Attributes:
        run_id: Short id written into every session header and webhook.
        log_file: Day's main log.
        error_file: Day's error-only log.
    """

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self.run_id: str = uuid.uuid4().hex[:8]
        self._logs_dir = logs_dir
        self._webhook_url: Optional[str] = None
        self._webhook_tasks: Set[asyncio.Task] = set()

        today = datetime.now(NY_TZ).strftime("%Y-%m-%d")
        self.log_dir = logs_dir / today
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / f"Hackeye-{today}.log"
        self.error_file = self.log_dir / f"Hackeye-Errors-{today}.log"

        removed = self._cleanup_old_logs()
        self._append([
            "",
            "=" * 60,
            f"NEW SESSION - RUN ID: {self.run_id}",
            datetime.now(NY_TZ).strftime("[%Y-%m-%d %I:%M:%S %p %Z]"),
            "=" * 60,
        ])
        if removed:
            self.info("Old Logs Removed", [("Directories", str(removed))])

    def set_webhook(self, url: Optional[str]) -> None:
        self._webhook_url = url

    # =========================================================================
    # Files
    # =========================================================================

    def _cleanup_old_logs(self) -> int:
        """Delete dated folders past retention. Returns the count."""
        today = datetime.now(NY_TZ).replace(tzinfo=None)
        removed = 0
        for item in self._logs_dir.iterdir():
            if not item.is_dir():
                continue
            try:
                folder_date = datetime.strptime(item.name, "%Y-%m-%d")
            except ValueError:
                continue
            if (today - folder_date).days > LOG_RETENTION_DAYS:
                shutil.rmtree(item, ignore_errors=True)
                removed += 1
        return removed

    def _append(self, lines: List[str], is_error: bool = False) -> None:
        block = "\n".join(lines) + "\n"
        targets = [self.log_file, self.error_file] if is_error else [self.log_file]
        for path in targets:
            with open(path, "a", encoding="utf-8") as f:
                f.write(block)

    # =========================================================================
    # Formatting
    # =========================================================================

    @staticmethod
    def _detail_lines(details: Details) -> List[str]:
        if not details:
            return []
        last = len(details) - 1
        return [
            f"  {'└─' if i == last else '├─'} {key}: {value}"
            for i, (key, value) in enumerate(details)
        ]

    def _emit(self, emoji: str, msg: str, details: Details = None, is_error: bool = False) -> None:
        stamp = datetime.now(NY_TZ).strftime("[%I:%M:%S %p %Z]")
        lines = [f"{stamp} {emoji} {msg}"] + self._detail_lines(details)
        print("\n".join(lines))
        self._append(lines, is_error=is_error)

    def tree(self, title: str, items: List[Tuple[str, str]], emoji: str = "📦") -> None:
        """
        Log a titled block of key/value pairs.

        Example output:
            [02:30:45 PM EST] 🛡️ Raid Risk Assessed
              ├─ Guild: Test Server
              ├─ Risk: 52.6%
              └─ Level: MEDIUM
        """
        self._emit(emoji, title, items)
        self._append([""])

    # =========================================================================
    # Log Levels
    # =========================================================================

    def debug(self, msg: str, details: Details = None) -> None:
        """Only written when the DEBUG environment variable is set."""
        if os.getenv("DEBUG"):
            self._emit("🔍", msg, details)

    def info(self, msg: str, details: Details = None) -> None:
        self._emit("ℹ️", msg, details)

    def success(self, msg: str, details: Details = None) -> None:
        self._emit("✅", msg, details)

    def warning(self, msg: str, details: Details = None) -> None:
        self._emit("⚠️", msg, details)

    def error(self, msg: str, details: Details = None) -> None:
        self._emit("❌", msg, details, is_error=True)
        if details:
            self._forward("error", msg, details)

    def critical(self, msg: str, details: Details = None) -> None:
        self._emit("🚨", msg, details, is_error=True)
        if details:
            self._forward("critical", msg, details)

    # =========================================================================
    # Webhook Integration
    # =========================================================================

    def _forward(self, level: str, title: str, details: List[Tuple[str, str]]) -> None:
        """Post to the webhook in the background; needs a running loop."""
        if not self._webhook_url:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self._send_webhook(level, title, details))
        self._webhook_tasks.add(task)
        task.add_done_callback(self._webhook_tasks.discard)

    async def _send_webhook(self, level: str, title: str, details: List[Tuple[str, str]]) -> None:
        payload = {
            "embeds": [{
                "title": f"{level.upper()}: {title}",
                "description": "\n".join(f"**{k}:** {v}" for k, v in details)[:4000],
                "color": WEBHOOK_COLORS.get(level, WEBHOOK_COLORS["error"]),
                "timestamp": datetime.now(NY_TZ).isoformat(),
                "footer": {"text": f"Run ID: {self.run_id}"},
            }]
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=WEBHOOK_TIMEOUT),
                ) as resp:
                    if resp.status >= 300:
                        print(f"[WEBHOOK] Error webhook returned {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"[WEBHOOK] Error webhook failed: {e}")


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger()
"""Global logger instance shared by every module."""


__all__ = [
    "logger",
    "TreeLogger",
    "LOGS_DIR",
    "NY_TZ",
]
