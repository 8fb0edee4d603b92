from __future__ import annotations
import os
import logging
from dataclasses import dataclass, replace
from typing import Any, ClassVar, Mapping

from KubeStatus.core.exceptions import ConfigurationError


log = logging.getLogger(__name__)


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class AppConfig:
    """Manages application-wide configuration settings."""

    _instance: ClassVar[AppConfig | None] = None

    session_name: str = "KubeStatus"
    kubectl_binary: str = "kubectl"
    gcloud_binary: str = "gcloud"
    kube_context: str | None = None
    kubeconfig: str | None = None
    initial_resource: str = "pod"
    initial_namespace: str | None = None
    log_tail_lines: int = 1000
    stream_tail_lines: int = 10
    exec_shell: str = "sh"
    tmux_socket_path: str | None = None
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> AppConfig:
        """Builds a configuration from environment variables."""
        env = os.environ if env is None else env
        return cls(
            session_name=env.get("KUBESTATUS_SESSION_NAME", cls.session_name),
            kubectl_binary=env.get("KUBECTL", cls.kubectl_binary),
            gcloud_binary=env.get("GCLOUD", cls.gcloud_binary),
            kube_context=env.get("KUBE_CONTEXT") or None,
            kubeconfig=env.get("KUBECONFIG") or None,
            initial_resource=env.get("KUBESTATUS_RESOURCE") or cls.initial_resource,
            initial_namespace=env.get("KUBESTATUS_NAMESPACE") or None,
            log_tail_lines=_env_int(env, "KUBESTATUS_LOG_TAIL", cls.log_tail_lines),
            stream_tail_lines=_env_int(env, "KUBESTATUS_STREAM_TAIL", cls.stream_tail_lines),
            exec_shell=env.get("KUBESTATUS_SHELL") or cls.exec_shell,
            tmux_socket_path=env.get("KUBESTATUS_SOCKET_PATH") or None,
            log_level=(env.get("LOG_LEVEL") or cls.log_level).upper(),
            log_file=env.get("KUBESTATUS_LOG_FILE") or None,
        )

    @classmethod
    def get_instance(cls) -> AppConfig:
        """Returns the singleton instance of the AppConfig."""
        if cls._instance is None:
            cls._instance = cls.from_env()
            log.info("AppConfig singleton initialized.")
        return cls._instance

    @classmethod
    def set_instance(cls, config: AppConfig) -> None:
        cls._instance = config

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Returns a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def session_environment(self) -> dict[str, str]:
        """Environment variables that recreate this configuration in a child process."""
        values = {
            "KUBESTATUS_SESSION_NAME": self.session_name,
            "KUBECTL": self.kubectl_binary,
            "GCLOUD": self.gcloud_binary,
            "KUBE_CONTEXT": self.kube_context,
            "KUBECONFIG": self.kubeconfig,
            "KUBESTATUS_RESOURCE": self.initial_resource,
            "KUBESTATUS_NAMESPACE": self.initial_namespace,
            "KUBESTATUS_LOG_TAIL": str(self.log_tail_lines),
            "KUBESTATUS_STREAM_TAIL": str(self.stream_tail_lines),
            "KUBESTATUS_SHELL": self.exec_shell,
            "KUBESTATUS_SOCKET_PATH": self.tmux_socket_path,
            "LOG_LEVEL": self.log_level,
            "KUBESTATUS_LOG_FILE": self.log_file,
        }
        return {k: v for k, v in values.items() if v}
