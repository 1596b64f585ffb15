# region Docstring
"""
clipstash.service
Install and control the monitor daemon as a per-user background service.
Overview:
- macOS: a launchd agent plist in ~/Library/LaunchAgents, driven with launchctl.
- Linux: a systemd user unit in ~/.config/systemd/user, driven with systemctl --user.
- Any other platform raises ServiceError.
- The service runs `<python> -m clipstash daemon`, i.e. the hidden `daemon` command.
Design notes:
- All external commands go through `runner` (subprocess.run by default) so they
    can be replaced in tests.
"""
# endregion
# region Imports
import logging
import plistlib
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from clipstash.errors import ServiceError

# endregion

logger = logging.getLogger("clipstash").getChild("service")

LAUNCHD_LABEL = "io.clipstash.daemon"
SYSTEMD_UNIT = "clipstash-daemon.service"

LAUNCHD = "launchd"
SYSTEMD = "systemd"


def default_command() -> list[str]:
    return [sys.executable, "-m", "clipstash", "daemon"]


class DaemonService:
    """
    Per-user service wrapper for the monitor daemon.

    Attributes:
        platform (str): sys.platform value to target.
        home (Path): Home directory the unit file is written under.
        runner (Callable): subprocess.run compatible callable.
    """

    def __init__(
        self,
        platform: Optional[str] = None,
        home: Optional[Path] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.platform = platform or sys.platform
        self.home = Path(home) if home else Path.home()
        self.runner = runner

    # region Platform

    @property
    def supported(self) -> bool:
        return self.platform == "darwin" or self.platform.startswith("linux")

    @property
    def manager(self) -> str:
        if self.platform == "darwin":
            return LAUNCHD
        if self.platform.startswith("linux"):
            return SYSTEMD
        raise ServiceError(
            f"Background service is not supported on platform {self.platform!r}. "
            "Run 'clipstash daemon' under your own supervisor instead."
        )

    @property
    def unit_path(self) -> Path:
        if self.manager == LAUNCHD:
            return self.home / "Library" / "LaunchAgents" / f"{LAUNCHD_LABEL}.plist"
        return self.home / ".config" / "systemd" / "user" / SYSTEMD_UNIT

    @property
    def log_dir(self) -> Path:
        return self.home / ".local" / "share" / "clipstash"

    def render_unit(self, command: Optional[Sequence[str]] = None) -> str:
        """Text of the plist or unit file that runs `command`."""
        command = list(command or default_command())
        if self.manager == LAUNCHD:
            plist = {
                "Label": LAUNCHD_LABEL,
                "ProgramArguments": command,
                "RunAtLoad": True,
                "KeepAlive": True,
                "StandardOutPath": str(self.log_dir / "daemon.log"),
                "StandardErrorPath": str(self.log_dir / "daemon.err"),
            }
            return plistlib.dumps(plist).decode("utf-8")

        return "\n".join(
            [
                "[Unit]",
                "Description=clipstash clipboard history daemon",
                "",
                "[Service]",
                f"ExecStart={shlex.join(command)}",
                "Restart=on-failure",
                "RestartSec=2",
                "",
                "[Install]",
                "WantedBy=default.target",
                "",
            ]
        )

    # endregion
    # region Commands

    def _run(self, args: list[str], check: bool = True) -> subprocess.CompletedProcess:
        logger.debug(f"Running {shlex.join(args)}")
        try:
            result = self.runner(args, capture_output=True, text=True)
        except OSError as e:
            raise ServiceError(f"Could not run {args[0]}", original_error=e)
        if check and result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ServiceError(
                f"{shlex.join(args)} failed with exit code {result.returncode}"
                + (f": {stderr}" if stderr else "")
            )
        return result

    def _systemctl(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        return self._run(["systemctl", "--user", *args], check=check)

    def _launchctl(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        return self._run(["launchctl", *args], check=check)

    def is_installed(self) -> bool:
        return self.unit_path.exists()

    def _require_installed(self) -> None:
        if not self.is_installed():
            raise ServiceError("Daemon is not installed. Run 'clipstash install' first.")

    def install(self, command: Optional[Sequence[str]] = None) -> Path:
        """Write the unit file and register it so the daemon starts at login."""
        path = self.unit_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(self.render_unit(command), encoding="utf-8")
        except OSError as e:
            raise ServiceError(f"Could not write {path}", original_error=e)
        logger.info(f"Wrote service definition to {path}")

        if self.manager == LAUNCHD:
            self._launchctl("load", "-w", str(path))
        else:
            self._systemctl("daemon-reload")
            self._systemctl("enable", SYSTEMD_UNIT)
        return path

    def uninstall(self) -> bool:
        """Unregister and delete the unit file. Returns False if nothing was installed."""
        if not self.is_installed():
            return False
        path = self.unit_path
        if self.manager == LAUNCHD:
            self._launchctl("unload", "-w", str(path), check=False)
        else:
            self._systemctl("disable", "--now", SYSTEMD_UNIT, check=False)
        path.unlink()
        if self.manager == SYSTEMD:
            self._systemctl("daemon-reload", check=False)
        logger.info(f"Removed service definition {path}")
        return True

    def start(self) -> None:
        self._require_installed()
        if self.manager == LAUNCHD:
            self._launchctl("load", "-w", str(self.unit_path))
        else:
            self._systemctl("start", SYSTEMD_UNIT)

    def stop(self) -> None:
        self._require_installed()
        if self.manager == LAUNCHD:
            self._launchctl("unload", str(self.unit_path))
        else:
            self._systemctl("stop", SYSTEMD_UNIT)

    def restart(self) -> None:
        self._require_installed()
        if self.manager == LAUNCHD:
            self._launchctl("unload", str(self.unit_path), check=False)
            self._launchctl("load", "-w", str(self.unit_path))
        else:
            self._systemctl("restart", SYSTEMD_UNIT)

    def is_running(self) -> bool:
        if self.manager == LAUNCHD:
            result = self._launchctl("list", check=False)
            return result.returncode == 0 and LAUNCHD_LABEL in (result.stdout or "")
        result = self._systemctl("is-active", "--quiet", SYSTEMD_UNIT, check=False)
        return result.returncode == 0

    # endregion


__all__ = ["DaemonService", "LAUNCHD_LABEL", "SYSTEMD_UNIT", "default_command"]
