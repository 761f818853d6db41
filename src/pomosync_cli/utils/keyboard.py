"""Non-blocking single-key input for the interactive timer."""

from __future__ import annotations

import sys


class KeyboardHandler:
    """Reads single keypresses from a POSIX terminal without blocking."""

    def __init__(self):
        self.fd = None
        self.old_settings = None
        self._setup()

    def _setup(self) -> None:
        """Put the terminal in cbreak mode when stdin is a tty."""
        try:
            import termios
            import tty

            self.fd = sys.stdin.fileno()
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except (ImportError, OSError, ValueError):
            # Not a terminal (piped input, tests) or not POSIX
            self.old_settings = None

    def get_key(self) -> str | None:
        """Return the pressed key (lower-cased) or None."""
        if self.old_settings is None:
            return None

        import select

        if select.select([sys.stdin], [], [], 0)[0]:
            return sys.stdin.read(1).lower()
        return None

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.old_settings is not None:
            import termios

            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            self.old_settings = None

    def __enter__(self) -> "KeyboardHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()


class WindowsKeyboardHandler:
    """Keyboard handler for Windows using msvcrt."""

    def __init__(self):
        import msvcrt

        self.msvcrt = msvcrt

    def get_key(self) -> str | None:
        if self.msvcrt.kbhit():
            key = self.msvcrt.getch()
            if isinstance(key, bytes):
                key = key.decode("utf-8", errors="ignore")
            return key.lower()
        return None

    def stop(self) -> None:
        pass

    def __enter__(self) -> "WindowsKeyboardHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()


def get_keyboard_handler() -> KeyboardHandler | WindowsKeyboardHandler:
    if sys.platform == "win32":
        return WindowsKeyboardHandler()
    return KeyboardHandler()
