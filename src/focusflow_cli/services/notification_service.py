"""Notifier implementations for phase-change alerts.

Delivery is best-effort everywhere: a missing notification backend or a
denied permission silently drops the alert.
"""

from __future__ import annotations

import logging
import threading

from rich.console import Console

from focusflow_cli.models.config_models import NotificationConfig
from focusflow_cli.repositories.repository import Notifier

logger = logging.getLogger(__name__)

APP_NAME = "FocusFlow"


def _plyer_notify_func():
    """Return plyer's notify callable, or None when no backend is usable."""
    try:
        from plyer import notification as plyer_notification
    except ImportError:
        return None
    notify_func = getattr(plyer_notification, "notify", None)
    return notify_func if callable(notify_func) else None


class DesktopNotifier(Notifier):
    """Desktop notifications through plyer, sent without blocking."""

    def __init__(self, enabled: bool = True, timeout: int = 10):
        self.enabled = enabled
        self.timeout = timeout
        self.permission = "default"
        self._notify_func = None

    def request_permission(self) -> None:
        if self.permission != "default":
            return
        notify_func = _plyer_notify_func() if self.enabled else None
        if notify_func is None:
            self.permission = "denied"
            logger.debug("desktop notifications unavailable")
            return
        self._notify_func = notify_func
        self.permission = "granted"

    def notify(self, title: str, body: str) -> None:
        if self.permission != "granted" or self._notify_func is None:
            return

        notify_func = self._notify_func

        def _do():
            try:
                notify_func(
                    title=title,
                    message=body,
                    timeout=self.timeout,
                    app_name=APP_NAME,
                )
            except Exception as e:
                # Platforms without a notification daemon raise here
                logger.debug("desktop notification failed: %s", e)

        threading.Thread(target=_do, daemon=True).start()


class ConsoleNotifier(Notifier):
    """Prints alerts to the terminal, optionally ringing the bell."""

    def __init__(self, console: Console | None = None, enabled: bool = True, sound: bool = True):
        self.console = console or Console()
        self.enabled = enabled
        self.sound = sound
        self.permission = "default"

    def request_permission(self) -> None:
        if self.permission == "default":
            self.permission = "granted" if self.enabled else "denied"

    def notify(self, title: str, body: str) -> None:
        if self.permission != "granted":
            return
        self.console.print(f"[bold magenta]🔔 {title}[/bold magenta] {body}")
        if self.sound:
            self.console.bell()


class CompositeNotifier(Notifier):
    """Fans alerts out to several notifiers; one failing does not stop the rest."""

    def __init__(self, *notifiers: Notifier):
        self.notifiers = list(notifiers)

    @property
    def permission(self):
        permissions = [n.permission for n in self.notifiers]
        if "granted" in permissions:
            return "granted"
        if permissions and all(p == "denied" for p in permissions):
            return "denied"
        return "default"

    def request_permission(self) -> None:
        for notifier in self.notifiers:
            try:
                notifier.request_permission()
            except Exception as e:
                logger.debug("permission request failed for %s: %s", notifier, e)

    def notify(self, title: str, body: str) -> None:
        for notifier in self.notifiers:
            try:
                notifier.notify(title, body)
            except Exception as e:
                logger.debug("notification failed for %s: %s", notifier, e)


def build_notifier(config: NotificationConfig, console: Console | None = None) -> Notifier:
    """Create the notifier described by the configuration."""
    console_notifier = ConsoleNotifier(
        console=console, enabled=config.enabled, sound=config.sound
    )
    if not config.desktop:
        return console_notifier
    return CompositeNotifier(
        console_notifier,
        DesktopNotifier(enabled=config.enabled),
    )
