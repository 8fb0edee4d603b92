from __future__ import annotations
import asyncio
import json
import logging
import shlex
from typing import Any, AsyncIterator, List, Optional, Sequence

from KubeStatus.config import AppConfig
from KubeStatus.core.exceptions import KubectlError, KubectlNotFoundError, MalformedOutputError

log = logging.getLogger(__name__)

ALL_NAMESPACES = "all"


# --- Command templates ---
# Argument vectors without the binary; KubectlClient prepends it together with
# any global flags.


def _namespace_flag(namespace: Optional[str]) -> List[str]:
    return ["--namespace", namespace] if namespace else []


def list_args(kind: str, namespace: Optional[str], namespaced: bool = True) -> List[str]:
    """``get <kind> -o json [--namespace <ns> | --all-namespaces]``."""
    args = ["get", kind, "-o", "json"]
    if not namespaced:
        return args
    if namespace is None or namespace in ("", ALL_NAMESPACES):
        args.append("--all-namespaces")
    else:
        args.extend(_namespace_flag(namespace))
    return args


def delete_args(kind: str, name: str, namespace: Optional[str]) -> List[str]:
    return ["delete", *_namespace_flag(namespace), f"{kind}/{name}"]


def view_args(kind: str, name: str, namespace: Optional[str]) -> List[str]:
    return ["get", *_namespace_flag(namespace), f"{kind}/{name}", "-o", "yaml"]


def logs_args(
    name: str,
    namespace: Optional[str],
    container: str,
    tail: Optional[int] = None,
    follow: bool = False,
) -> List[str]:
    args = ["logs", *_namespace_flag(namespace), "-c", container]
    if tail is not None:
        args.extend(["--tail", str(tail)])
    if follow:
        args.append("-f")
    args.append(name)
    return args


def exec_args(name: str, namespace: Optional[str], container: str, shell: str = "sh") -> List[str]:
    return ["exec", "-it", *_namespace_flag(namespace), "-c", container, name, shell]


class KubectlClient:
    """Runs kubectl as an opaque subprocess."""

    def __init__(
        self,
        binary: str = "kubectl",
        context: Optional[str] = None,
        kubeconfig: Optional[str] = None,
    ) -> None:
        self.binary = binary
        self.context = context
        self.kubeconfig = kubeconfig

    @classmethod
    def from_config(cls, config: AppConfig) -> KubectlClient:
        return cls(
            binary=config.kubectl_binary,
            context=config.kube_context,
            kubeconfig=config.kubeconfig,
        )

    def argv(self, args: Sequence[str]) -> List[str]:
        """Full argument vector including the binary and global flags."""
        command = [self.binary]
        if self.kubeconfig:
            command.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            command.extend(["--context", self.context])
        command.extend(args)
        return command

    def command_string(self, args: Sequence[str]) -> str:
        return shlex.join(self.argv(args))

    async def run(self, args: Sequence[str]) -> str:
        """Runs kubectl to completion and returns stdout.

        Raises KubectlError on a non-zero exit, with the full command and the
        captured output.
        """
        argv = self.argv(args)
        log.debug("Running: %s", shlex.join(argv))
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise KubectlNotFoundError(argv) from e

        try:
            stdout, stderr = await process.communicate()
        finally:
            if process.returncode is None:
                log.debug("Terminating cancelled command: %s", shlex.join(argv))
                process.terminate()
                await process.wait()
        out =stdout.decode(errors="replace")
        if process.returncode != 0:
            err = stderr.decode(errors="replace").strip() or out.strip()
            log.warning("Command failed (%s): %s", process.returncode, shlex.join(argv))
            raise KubectlError(argv, process.returncode or 1, err)
        return out

    async def run_json(self, args: Sequence[str]) -> Any:
        """Runs kubectl and decodes its stdout as JSON."""
        output = await self.run(args)
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise MalformedOutputError(self.argv(args), output, str(e)) from e

    async def stream(self, args: Sequence[str]) -> AsyncIterator[str]:
        """Yields combined stdout/stderr lines of a long-running kubectl command.

        Failures are reported in-band as a final line rather than raised. The
        subprocess is terminated if the consumer stops iterating early.
        """
        argv = self.argv(args)
        log.debug("Streaming: %s", shlex.join(argv))
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError:
            yield f"[executable '{argv[0]}' not found]"
            return

        assert process.stdout is not None
        try:
            async for raw_line in process.stdout:
                yield raw_line.decode(errors="replace").rstrip("\n")
            returncode = await process.wait()
            if returncode != 0:
                yield f"[{shlex.join(argv)} exited with code {returncode}]"
        finally:
            if process.returncode is None:
                log.debug("Terminating stream: %s", shlex.join(argv))
                process.terminate()
                await process.wait()
