from __future__ import annotations
import asyncio
import logging
import os
import shlex
from typing import ClassVar, Optional, Sequence

import libtmux
from libtmux.exc import LibTmuxException

from KubeStatus.core.exceptions import TerminalLaunchError

log = logging.getLogger(__name__)


class TmuxManager:
    """Launches interactive commands in new windows of the dashboard's tmux session."""

    # --- Singleton Pattern ---
    _instance: ClassVar[TmuxManager | None] = None

    @classmethod
    def get_instance(cls, session_name: str, socket_path: Optional[str] = None) -> TmuxManager:
        """Returns the singleton instance of the TmuxManager."""
        if cls._instance is None:
            cls._instance = TmuxManager(session_name, socket_path)
            log.info("TmuxManager singleton initialized.")
        return cls._instance

    def __init__(self, session_name: str, socket_path: Optional[str] = None) -> None:
        self.session_name = session_name
        self.socket_path = socket_path

    def _find_session(self) -> libtmux.Session:
        server = libtmux.Server(socket_path=self.socket_path)
        session = server.sessions.get(session_name=self.session_name, default=None)
        if session is None and os.environ.get("TMUX_PANE"):
            # Started by hand inside some other tmux session; use that one.
            pane = server.panes.get(pane_id=os.environ["TMUX_PANE"], default=None)
            session = pane.session if pane is not None else None
        if session is None:
            raise TerminalLaunchError(
                f"No tmux session '{self.session_name}' found; start KubeStatus through its launcher."
            )
        return session

    def _launch(self, command: str, window_name: str) -> None:
        session = self._find_session()
        window = session.windows.get(window_name=window_name, default=None)
        if window is not None:
            window.select()
            return
        session.new_window(window_name=window_name, attach=True, window_shell=command)

    async def launch_command_in_new_window(self, argv: Sequence[str], window_name: str) -> str:
        """Starts ``argv`` in a new tmux window and returns the shell command used.

        The command runs detached from the dashboard; its exit status is only
        visible in its own window.
        """
        command = shlex.join(argv)
        window_shell = (
            f"{command}; "
            "exit_code=$?; "
            "if [ $exit_code -ne 0 ]; then "
            'echo; echo "--- exited with code $exit_code ---"; '
            "read -p 'Press Enter to close this window...' _; "
            "fi"
        )
        log.info("Launching in tmux window '%s': %s", window_name, command)
        try:
            await asyncio.to_thread(self._launch, window_shell, window_name)
        except LibTmuxException as e:
            log.error(f"Failed to launch command in tmux window '{window_name}': {e}")
            raise TerminalLaunchError(f"Could not open tmux window '{window_name}': {e}") from e
        return command
