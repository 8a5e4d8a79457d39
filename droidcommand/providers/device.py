from __future__ import annotations

import subprocess
from typing import Optional

from ..core.config import config
from ..core.errors import ADBError


class Device:
    """Lightweight wrapper around `adb` for interacting with a single Android device.

    Only a running ``adb`` binary (bundled with the Android SDK) is required;
    every call goes through :mod:`subprocess`.
    """

    def __init__(self, serial: str, adb_path: Optional[str] = None, timeout: Optional[int] = None):
        self.serial = serial
        self.adb_path = adb_path or config.adb_path
        self.timeout = timeout if timeout is not None else config.adb_timeout

    # ---------------------------------------------------------------------
    # Factory helpers
    # ---------------------------------------------------------------------
    @classmethod
    def list_devices(cls, adb_path: Optional[str] = None) -> list[str]:
        """Return a list of connected device/emulator serial numbers."""
        try:
            output = subprocess.check_output([adb_path or config.adb_path, "devices"], encoding="utf-8")
        except (OSError, subprocess.CalledProcessError) as e:
            raise ADBError(f"Could not list devices: {e}") from e
        lines = output.strip().splitlines()[1:]  # Skip the header
        serials: list[str] = []
        for line in lines:
            if not line.strip():
                continue
            parts = line.split("\t")
            if len(parts) >= 2 and parts[1] == "device":
                serials.append(parts[0])
        return serials

    @classmethod
    def connect(cls, serial: Optional[str] = None, adb_path: Optional[str] = None) -> Device:
        """Return a ``Device`` for ``serial``, or for the first attached device.

        Emulators are preferred when no serial is given.

        Raises:
            ADBError: If the device is not attached or none is detected.

        """
        serials = cls.list_devices(adb_path)
        if serial:
            if serial not in serials:
                raise ADBError(f"Device {serial} is not attached")
            return cls(serial, adb_path)
        if not serials:
            raise ADBError("No Android device detected. Ensure 'adb devices' lists it.")
        emulators = [s for s in serials if s.startswith("emulator-")]
        return cls((emulators or serials)[0], adb_path)

    # ---------------------------------------------------------------------
    # Basic operations
    # ---------------------------------------------------------------------
    def shell(self, command: str) -> str:
        """Execute an ADB shell command and return stdout as a string."""
        cmd = [self.adb_path, "-s", self.serial, "shell", command]
        try:
            return subprocess.check_output(cmd, encoding="utf-8", timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            raise ADBError(f"adb shell {command!r} failed: {e}") from e

    def __repr__(self) -> str:  # pragma: no cover - string representation only
        return f"<Device serial={self.serial!r}>"
