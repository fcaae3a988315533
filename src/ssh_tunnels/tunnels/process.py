"""Control-socket command executor for ssh multiplexing masters."""

import os
import shutil
import subprocess
import threading
from collections import defaultdict
from pathlib import Path
from typing import TYPE_CHECKING

from ..common.exceptions import BinaryNotFoundError
from ..common.logging import get_logger, tunnel_context
from .forward import forward_arguments
from .models import ControlCommand, TunnelDefinition
from .resolver import resolve_tunnel
from .state import OverrideStateStore
from .validator import validate_tunnel

if TYPE_CHECKING:
    from ..config import SSHTunnelsConfig

logger = get_logger(__name__)


class ControlSocketExecutor:
    """Drives the ssh client through a per-tunnel control socket.

    Each tunnel's master connection is addressed by a control socket named
    after the tunnel and living in the configured temporary directory. The
    executor never holds a process handle: whether a tunnel is running is
    always asked of the client itself.
    """

    def __init__(self, config: "SSHTunnelsConfig", overrides: OverrideStateStore):
        """Initialize the executor.

        Args:
            config: Client settings (binary, temporary directory, timeout)
            overrides: Store updated by run and kill

        Raises:
            BinaryNotFoundError: If the ssh client cannot be found
        """
        self.config = config
        self.overrides = overrides
        self.ssh_binary = self._find_ssh_binary()
        self.temp_directory = Path(config.temp_directory).expanduser()
        self.temp_directory.mkdir(parents=True, exist_ok=True)
        self._locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()
        logger.info(
            "ControlSocketExecutor initialized",
            ssh_binary=self.ssh_binary,
            temp_directory=str(self.temp_directory),
        )

    def _find_ssh_binary(self) -> str:
        """Locate the ssh client.

        Returns:
            Path to the ssh binary

        Raises:
            BinaryNotFoundError: If the binary is missing or not executable
        """
        ssh_binary = shutil.which(self.config.ssh_program)
        if ssh_binary is None:
            raise BinaryNotFoundError(
                f"ssh client '{self.config.ssh_program}' not found or not executable. "
                "Install OpenSSH or set ssh_program to the client's path."
            )
        return ssh_binary

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[name]

    def build_command(
        self, definition: TunnelDefinition, command: ControlCommand
    ) -> list[str]:
        """Build the client argv for one control-socket verb.

        The control path is the bare tunnel name; it resolves against the
        temporary directory the client runs in.

        Args:
            definition: Tunnel to address
            command: Verb to issue

        Returns:
            Argument list, starting with the ssh binary

        Raises:
            ForwardSpecError: If RUN needs a forward spec that cannot be built
        """
        if command == ControlCommand.RUN:
            resolved = resolve_tunnel(definition, self.overrides)
            return [
                self.ssh_binary,
                "-M",
                "-S",
                definition.name,
                "-f",
                "-N",
                "-T",
                *forward_arguments(resolved),
                resolved.login,
            ]

        action = "check" if command == ControlCommand.CHECK else "exit"
        return [self.ssh_binary, "-S", definition.name, "-O", action, definition.login]

    def _execute(self, args: list[str], detached: bool = False) -> bool:
        """Run the client and report whether it exited with status 0.

        Detached invocations start a master that forks into the background;
        its standard streams are sent to /dev/null so the background process
        does not keep pipes open and block the caller.
        """
        logger.debug("Invoking ssh client", command=args)
        try:
            if detached:
                result = subprocess.run(
                    args,
                    cwd=self.temp_directory,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    timeout=self.config.command_timeout,
                    check=False,
                )
            else:
                result = subprocess.run(
                    args,
                    cwd=self.temp_directory,
                    stdin=subprocess.DEVNULL,
                    capture_output=True,
                    text=True,
                    timeout=self.config.command_timeout,
                    check=False,
                )
        except subprocess.TimeoutExpired:
            logger.error("ssh client timed out", timeout=self.config.command_timeout)
            return False
        except OSError as e:
            logger.error("Failed to launch ssh client", error=str(e))
            return False

        stderr = (getattr(result, "stderr", None) or "").strip()
        logger.debug("ssh client finished", returncode=result.returncode, stderr=stderr)
        return result.returncode == 0

    def run(self, definition: TunnelDefinition, local_port: int | None = None) -> bool:
        """Start the tunnel's master connection in the background.

        The local endpoint actually used (the ad-hoc port if one is given) is
        recorded in the override store before the client is launched, and
        keeps precedence until the tunnel is killed.

        Args:
            definition: Tunnel to start
            local_port: Ad-hoc local port for this run only

        Returns:
            True if the client exited with status 0

        Raises:
            TunnelConfigError: If the definition is invalid
            ForwardSpecError: If no forward spec can be built
        """
        validate_tunnel(definition)
        if local_port is not None:
            definition = definition.with_local_port(local_port)

        with tunnel_context(definition.name), self._lock_for(definition.name):
            self.overrides.remove(definition.name)
            args = self.build_command(definition, ControlCommand.RUN)
            resolved = resolve_tunnel(definition, self.overrides)
            if resolved.local_endpoint is not None:
                self.overrides.set(definition.name, resolved.local_endpoint)

            logger.info("Starting tunnel", login=resolved.login)
            success = self._execute(args, detached=True)

            if success:
                logger.info("Tunnel started")
            else:
                logger.error("Failed to start tunnel")
        return success

    def check(self, definition: TunnelDefinition) -> bool:
        """Ask the master connection whether it is alive.

        Any non-zero exit, including a missing control socket, counts as not
        running.

        Returns:
            True if the tunnel is running
        """
        with tunnel_context(definition.name):
            args = self.build_command(definition, ControlCommand.CHECK)
            return self._execute(args)

    def kill(self, definition: TunnelDefinition) -> bool:
        """Tell the master connection to exit.

        The override is removed whatever the client reports, so that a later
        run starts from the stored definition.

        Returns:
            True if the client exited with status 0
        """
        with tunnel_context(definition.name), self._lock_for(definition.name):
            args = self.build_command(definition, ControlCommand.KILL)
            logger.info("Stopping tunnel")
            try:
                success = self._execute(args)
            finally:
                self.overrides.remove(definition.name)

            if success:
                logger.info("Tunnel stopped")
            else:
                logger.warning("ssh client reported a failed exit")
        return success

    def control_socket_path(self, definition: TunnelDefinition) -> str:
        """Absolute path of the tunnel's control socket."""
        return os.fspath(self.temp_directory / definition.name)
