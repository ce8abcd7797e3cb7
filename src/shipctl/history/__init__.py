"""Revision history stores for shipctl.

A history store is selected once per invocation by backend name through
``HISTORY_BACKENDS``.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from shipctl.history.base import BaseHistoryStore, history_key
from shipctl.lib.errors import InvalidArgumentError
from shipctl.models.settings import ShipctlSettings

HistoryStoreFactory = Callable[[str, str, ShipctlSettings], BaseHistoryStore]


def _create_ssm_store(
    cluster: str, service_name: str, settings: ShipctlSettings
) -> BaseHistoryStore:
    from shipctl.history.ssm import SSMHistoryStore

    return SSMHistoryStore(
        cluster, service_name, prefix=settings.ssm_prefix, region=settings.region
    )


def _create_file_store(
    cluster: str, service_name: str, settings: ShipctlSettings
) -> BaseHistoryStore:
    from shipctl.history.file import FileHistoryStore

    return FileHistoryStore(
        cluster,
        service_name,
        prefix=settings.ssm_prefix,
        state_dir=Path(settings.state_dir),
    )


def _create_memory_store(
    cluster: str, service_name: str, settings: ShipctlSettings
) -> BaseHistoryStore:
    from shipctl.history.memory import MemoryHistoryStore

    return MemoryHistoryStore(cluster, service_name, prefix=settings.ssm_prefix)


HISTORY_BACKENDS: dict[str, HistoryStoreFactory] = {
    "SSM": _create_ssm_store,
    "FILE": _create_file_store,
    "MEMORY": _create_memory_store,
}


def create_history_store(
    backend: str,
    cluster: str,
    service_name: str,
    settings: ShipctlSettings | None = None,
) -> BaseHistoryStore:
    """Create the history store registered under ``backend``.

    Args:
        backend: Backend name, matched case-insensitively
        cluster: Cluster the history belongs to
        service_name: Service the history belongs to
        settings: Settings carrying backend options (defaults when omitted)

    Raises:
        InvalidArgumentError: If no backend is registered under that name
    """
    factory = HISTORY_BACKENDS.get(backend.strip().upper())
    if factory is None:
        supported = ", ".join(sorted(HISTORY_BACKENDS))
        raise InvalidArgumentError(
            "backend",
            f"Unsupported history backend: {backend!r} (supported: {supported})",
        )
    return factory(cluster, service_name, settings or ShipctlSettings())


__all__ = [
    "HISTORY_BACKENDS",
    "BaseHistoryStore",
    "create_history_store",
    "history_key",
]
