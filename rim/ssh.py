"""
SSH connection handling for RIM.

Remote commands run through the OpenSSH client in a subprocess. Connection
problems (DNS, refused, timeout, authentication) make ssh exit with 255 and
are reported as HostConnectionError; any other non-zero exit comes from the
remote command and is reported as CommandExecutionError.

Authentication tries the password first, when one is configured, and falls
back to keys offered by ssh-agent. The password reaches ssh through a small
SSH_ASKPASS helper script that echoes it from the environment, so it never
shows up on a command line.
"""

import logging
import os
import subprocess
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from rim.config import (
    ASKPASS_PASSWORD_ENV,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_USER,
    REMOTE_COMMAND,
    SSH_AUTH_SOCK_ENV,
    SSH_BIN,
    SSH_CONNECTION_FAILED_EXIT,
)
from rim.errors import CommandExecutionError, ErrorCode, HostConnectionError

ASKPASS_SCRIPT = f'#!/bin/sh\nprintf \'%s\\n\' "${ASKPASS_PASSWORD_ENV}"\n'


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Credentials and connection settings shared by every host of a run.

    Instances are immutable and read concurrently by all workers.

    Attributes:
        username: Remote user name.
        password: Optional password, tried before agent keys.
        use_agent: Offer keys from ssh-agent.
        agent_socket: ssh-agent socket path; None keeps the inherited one.
        connect_timeout: Seconds allowed to establish the connection.
        command_timeout: Optional limit for the whole remote command.
        ssh_options: Extra "-o" options passed verbatim to ssh.
        ssh_bin: ssh client executable.
    """
    username: str = DEFAULT_SSH_USER
    password: Optional[str] = field(default=None, repr=False)
    use_agent: bool = True
    agent_socket: Optional[str] = None
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    command_timeout: Optional[float] = None
    ssh_options: Tuple[str, ...] = ()
    ssh_bin: str = SSH_BIN

    @classmethod
    def from_environment(cls, username: str = DEFAULT_SSH_USER, password: Optional[str] = None,
                         use_agent: bool = True, **kwargs) -> 'ConnectionConfig':
        """Build a config, picking up the ssh-agent socket from SSH_AUTH_SOCK."""
        agent_socket = os.environ.get(SSH_AUTH_SOCK_ENV) if use_agent else None
        return cls(
            username=username,
            password=password or None,
            use_agent=use_agent and bool(agent_socket),
            agent_socket=agent_socket or None,
            **kwargs
        )

    def auth_methods(self) -> List[str]:
        methods = []
        if self.password:
            methods.append("password")
        if self.use_agent:
            methods.append("agent")
        return methods


def normalize_destination(address: str, default_port: int = DEFAULT_SSH_PORT) -> str:
    """
    Return address as "host:port", appending the default port when missing.

    Bare IPv6 literals are wrapped in brackets: "fe80::1" -> "[fe80::1]:22".
    """
    address = address.strip()
    if address.startswith("["):
        if "]:" in address:
            return address
        return f"{address}:{default_port}"
    colons = address.count(":")
    if colons == 0:
        return f"{address}:{default_port}"
    if colons == 1:
        return address
    return f"[{address}]:{default_port}"


def split_destination(destination: str) -> Tuple[str, int]:
    """Split a normalized "host:port" destination into its parts."""
    if destination.startswith("["):
        hostname, _, rest = destination[1:].partition("]")
        port_text = rest.lstrip(":")
    else:
        hostname, _, port_text = destination.rpartition(":")
    try:
        port = int(port_text)
    except ValueError:
        port = -1
    if not hostname or not 0 < port < 65536:
        raise HostConnectionError(
            f"Invalid destination: {destination}",
            host=destination,
            reason="expected <hostname>[:port]"
        )
    return hostname, port


@dataclass(frozen=True)
class HostTarget:
    """A host to sample plus the shared, read-only connection settings."""
    address: str
    config: ConnectionConfig = field(default_factory=ConnectionConfig)

    @property
    def destination(self) -> str:
        return normalize_destination(self.address)


class SSHConnector:
    """Runs commands on remote hosts with the OpenSSH client.

    One connector is shared by all tasks of a run. Its settings are fixed at
    construction time and every run() keeps its own askpass helper, so
    concurrent use needs no locking and nothing has to be closed.

    Usage:
        connector = SSHConnector(config)
        output = connector.run(HostTarget("fw1.example.com", config))
    """

    def __init__(self, config: ConnectionConfig, runner: Optional[Callable] = None, logger=None):
        """
        Args:
            config: Connection settings used for every host.
            runner: Replacement for subprocess.run, mainly for tests.
            logger: Logger instance for messages.
        """
        self.config = config
        self.runner = runner or subprocess.run
        self.logger = logger or logging.getLogger(__name__)

    @contextmanager
    def askpass_script(self) -> Iterator[Optional[str]]:
        """Yield the path of a temporary SSH_ASKPASS helper, or None without a password.

        The helper is removed on exit, whether or not ssh succeeded.
        """
        if not self.config.password:
            yield None
            return
        fd, path = tempfile.mkstemp(prefix="rim-askpass-", suffix=".sh")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(ASKPASS_SCRIPT)
            os.chmod(path, 0o700)
            yield path
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass

    def build_command(self, hostname: str, port: int, remote_cmd: str) -> List[str]:
        """Build the ssh command line with options suitable for automation."""
        cmd = [
            self.config.ssh_bin,
            '-p', str(port),
            '-o', f'ConnectTimeout={self.config.connect_timeout}',
            '-o', 'StrictHostKeyChecking=accept-new',
            '-o', 'LogLevel=ERROR',
        ]
        if self.config.password:
            cmd.extend([
                '-o', 'PreferredAuthentications=password,keyboard-interactive,publickey',
                '-o', 'NumberOfPasswordPrompts=1',
            ])
        else:
            cmd.extend(['-o', 'BatchMode=yes'])
        if not self.config.use_agent:
            cmd.extend(['-o', 'IdentityAgent=none'])
        for option in self.config.ssh_options:
            cmd.extend(['-o', option])
        cmd.extend(['-l', self.config.username, hostname, remote_cmd])
        return cmd

    def build_env(self, askpass_path: Optional[str] = None) -> Dict[str, str]:
        """Environment for the ssh process carrying agent and password settings."""
        env = dict(os.environ)
        if self.config.use_agent and self.config.agent_socket:
            env[SSH_AUTH_SOCK_ENV] = self.config.agent_socket
        elif not self.config.use_agent:
            env.pop(SSH_AUTH_SOCK_ENV, None)
        if askpass_path and self.config.password:
            env[ASKPASS_PASSWORD_ENV] = self.config.password
            env['SSH_ASKPASS'] = askpass_path
            env['SSH_ASKPASS_REQUIRE'] = 'force'
            # OpenSSH before 8.4 only consults SSH_ASKPASS when DISPLAY is set
            env.setdefault('DISPLAY', ':0')
        return env

    def run(self, target: HostTarget, remote_cmd: str = REMOTE_COMMAND) -> str:
        """
        Execute remote_cmd on the target and return its standard output.

        Raises:
            HostConnectionError: If the host cannot be reached or rejects
                every authentication method.
            CommandExecutionError: If the remote command exits non-zero or
                exceeds the command timeout.
        """
        destination = target.destination
        hostname, port = split_destination(destination)
        cmd = self.build_command(hostname, port, remote_cmd)
        self.logger.debug(
            f'Running probe on {destination} as {self.config.username} '
            f'(auth: {", ".join(self.config.auth_methods()) or "default keys"})'
        )

        with self.askpass_script() as askpass_path:
            try:
                result = self.runner(
                    cmd,
                    capture_output=True,
                    text=True,
                    stdin=subprocess.DEVNULL,
                    env=self.build_env(askpass_path),
                    timeout=self.config.command_timeout
                )
            except FileNotFoundError as e:
                raise HostConnectionError(
                    "SSH client not found",
                    host=destination,
                    reason=str(e),
                    code=ErrorCode.SSH_CLIENT_MISSING
                ) from e
            except subprocess.TimeoutExpired as e:
                raise CommandExecutionError(
                    f"Probe command timed out after {self.config.command_timeout}s",
                    host=destination,
                    code=ErrorCode.COMMAND_TIMEOUT
                ) from e
            except OSError as e:
                raise HostConnectionError(
                    "Unable to start SSH client",
                    host=destination,
                    reason=str(e)
                ) from e

        stderr = (result.stderr or "").strip()
        if result.returncode == SSH_CONNECTION_FAILED_EXIT:
            code = ErrorCode.SSH_CONNECTION_FAILED
            if "timed out" in stderr.lower():
                code = ErrorCode.SSH_CONNECT_TIMEOUT
            raise HostConnectionError(
                f"Connection to {destination} failed",
                host=destination,
                reason=stderr or f"ssh exited with code {result.returncode}",
                code=code
            )
        if result.returncode != 0:
            raise CommandExecutionError(
                "Probe command failed",
                host=destination,
                exit_code=result.returncode,
                stderr=stderr
            )
        return result.stdout


__all__ = [
    "ConnectionConfig",
    "HostTarget",
    "SSHConnector",
    "normalize_destination",
    "split_destination",
]
