"""
Monitoring Utilities
Dispatch counters, system metrics and health reporting
"""

import os
import platform
import time
from typing import Any, Dict, List, Optional

import psutil


class HealthStatus:
    """Health status result."""

    def __init__(
        self,
        healthy: bool,
        status: str,
        checks: Dict[str, bool],
        timestamp: str,
    ):
        self.healthy = healthy
        self.status = status
        self.checks = checks
        self.timestamp = timestamp


class Monitoring:
    """Counts dispatch outcomes and reports process health."""

    def __init__(self, client: Optional[Any] = None):
        self.client = client
        self.start_time = time.time()
        self.metrics = {
            "commandsExecuted": 0,
            "commandsRejected": 0,
            "commandsFailed": 0,
            "messagesProcessed": 0,
            "eventsProcessed": 0,
            "errors": 0,
        }

    def record_command(self) -> None:
        """Record a successful command execution."""
        self.metrics["commandsExecuted"] += 1

    def record_rejection(self) -> None:
        """Record an invocation stopped by the policy chain."""
        self.metrics["commandsRejected"] += 1

    def record_failure(self) -> None:
        """Record a failed command execution."""
        self.metrics["commandsFailed"] += 1
        self.record_error()

    def record_message(self) -> None:
        """Record message processed."""
        self.metrics["messagesProcessed"] += 1

    def record_event(self) -> None:
        """Record a gateway event routed through the event registry."""
        self.metrics["eventsProcessed"] += 1

    def record_error(self) -> None:
        """Record error."""
        self.metrics["errors"] += 1

    def get_system_metrics(self) -> Dict[str, Any]:
        """
        Get system metrics.

        Returns:
            Dict with memory, CPU, uptime, and platform info
        """
        process = psutil.Process()
        memory_info = process.memory_info()
        virtual = psutil.virtual_memory()
        load_avg = os.getloadavg() if hasattr(os, "getloadavg") else (0.0, 0.0, 0.0)

        return {
            "memory": {
                "used": round(memory_info.rss / 1024 / 1024),
                "systemTotal": round(virtual.total / 1024 / 1024),
                "systemFree": round(virtual.available / 1024 / 1024),
            },
            "cpu": {
                "loadAvg1m": round(load_avg[0], 2),
                "cores": psutil.cpu_count(),
            },
            "uptime": {
                "process": self.format_duration(int(time.time() - process.create_time())),
                "bot": self.format_duration(int(time.time() - self.start_time)),
            },
            "platform": {
                "python": platform.python_version(),
                "os": f"{platform.system()} {platform.release()}",
            },
        }

    def get_discord_metrics(self) -> Dict[str, Any]:
        """
        Get Discord client metrics.

        Returns:
            Dict with readiness, ping and guild count
        """
        client = self.client
        if client is None:
            return {"ready": False, "ping": 0.0, "guilds": 0}

        latency = getattr(client, "latency", 0.0) or 0.0
        if latency != latency or latency == float("inf"):
            # NaN/inf before the first heartbeat
            latency = 0.0

        return {
            "ready": bool(client.is_ready()) if hasattr(client, "is_ready") else False,
            "ping": latency * 1000,
            "guilds": len(getattr(client, "guilds", []) or []),
        }

    def get_app_metrics(self) -> Dict[str, Any]:
        """
        Get application metrics.

        Returns:
            Dict with metrics and hourly rates
        """
        hours = (time.time() - self.start_time) / 3600
        return {
            **self.metrics,
            "commandsPerHour": round(self.metrics["commandsExecuted"] / hours) if hours > 0 else 0,
        }

    def get_health_status(self) -> HealthStatus:
        """
        Get health status.

        Returns:
            HealthStatus with overall health and individual checks
        """
        system = self.get_system_metrics()
        discord = self.get_discord_metrics()

        attempted = self.metrics["commandsExecuted"] + self.metrics["commandsFailed"]

        checks = {
            "memory": system["memory"]["used"] < system["memory"]["systemTotal"] * 0.8,
            "discord": discord["ready"],
            "ping": discord["ping"] < 500,
            # More than a fifth of invocations failing points at a broken handler or backend
            "commands": self.metrics["commandsFailed"] <= max(5, attempted // 5),
            "errors": self.metrics["errors"] < 100,
        }

        healthy = all(checks.values())

        return HealthStatus(
            healthy=healthy,
            status="healthy" if healthy else "degraded",
            checks=checks,
            timestamp=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        )

    def format_health_status(self) -> str:
        """
        Format health status for display.

        Returns:
            Formatted health status string
        """
        health = self.get_health_status()
        system = self.get_system_metrics()
        discord = self.get_discord_metrics()
        app = self.get_app_metrics()

        status_icon = "🟢" if health.healthy else "🟡"

        lines = [
            f"{status_icon} **Bot Health Status: {health.status.upper()}**",
            "",
            "📊 **System:**",
            f"Memory: {system['memory']['used']}MB / {system['memory']['systemTotal']}MB",
            f"CPU Load: {system['cpu']['loadAvg1m']} ({system['cpu']['cores']} cores)",
            "",
            "🤖 **Discord:**",
            f"Ready: {'yes' if discord['ready'] else 'no'}",
            f"Ping: {discord['ping']:.0f}ms",
            f"Guilds: {discord['guilds']}",
            "",
            "📈 **Dispatch:**",
            f"Replied: {app['commandsExecuted']} ({app['commandsPerHour']}/hr)",
            f"Rejected: {app['commandsRejected']} | Failed: {app['commandsFailed']}",
            f"Messages: {app['messagesProcessed']} | Events: {app['eventsProcessed']}",
            f"Errors: {app['errors']}",
            "",
            "🩺 **Checks:**",
            " ".join(f"{name} {'✅' if ok else '❌'}" for name, ok in health.checks.items()),
            "",
            "⏱️ **Uptime:**",
            f"Bot: {system['uptime']['bot']}",
        ]

        return "\n".join(lines)

    @staticmethod
    def format_duration(seconds: int) -> str:
        """
        Format duration in human readable format.

        Args:
            seconds: Duration in seconds

        Returns:
            Formatted duration string
        """
        days = seconds // 86400
        hours = (seconds % 86400) // 3600
        mins = (seconds % 3600) // 60
        secs = seconds % 60

        parts: List[str] = []
        if days > 0:
            parts.append(f"{days}d")
        if hours > 0:
            parts.append(f"{hours}h")
        if mins > 0:
            parts.append(f"{mins}m")
        if secs > 0 or not parts:
            parts.append(f"{secs}s")

        return " ".join(parts)
