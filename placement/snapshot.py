"""
Snapshot Loader
YAML 스냅샷 문서를 WorkloadRequest 와 Node 목록으로 변환합니다.
"""

import logging
from typing import Any, Dict, List, Mapping, Tuple

import yaml

from .exceptions import SnapshotError
from .resource_model import Container, Node, WorkloadRequest

logger = logging.getLogger(__name__)


def _quantity(data: Mapping[str, Any], key: str, default: Any = None) -> int:
    """음이 아닌 정수 필드를 읽습니다."""
    value = data.get(key, default)
    if value is None:
        raise SnapshotError(f"Missing required field: {key}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"Field {key} must be an integer, got {value!r}")
    if value < 0:
        raise SnapshotError(f"Field {key} must be non-negative, got {value}")
    return value


def _labels(data: Mapping[str, Any]) -> Dict[str, str]:
    labels = data.get("labels") or {}
    if not isinstance(labels, dict):
        raise SnapshotError(f"labels must be a mapping, got {type(labels).__name__}")
    return {str(key): str(value) for key, value in labels.items()}


def _parse_request(data: Mapping[str, Any]) -> WorkloadRequest:
    return WorkloadRequest.from_labels(
        cpu_shares=_quantity(data, "cpu_shares", 0),
        memory_bytes=_quantity(data, "memory_bytes", 0),
        labels=_labels(data),
    )


def _parse_node(data: Mapping[str, Any]) -> Node:
    if not isinstance(data, dict):
        raise SnapshotError(f"Node entry must be a mapping, got {type(data).__name__}")
    name = data.get("name")
    if not name:
        raise SnapshotError("Node entry is missing a name")

    health = data.get("health_indicator", 0)
    if isinstance(health, bool) or not isinstance(health, int):
        raise SnapshotError(f"Node {name}: health_indicator must be an integer")

    containers = []
    for index, container in enumerate(data.get("containers") or []):
        if not isinstance(container, dict):
            raise SnapshotError(f"Node {name}: container #{index} must be a mapping")
        containers.append(
            Container(
                name=str(container.get("name", f"{name}-{index}")),
                request=_parse_request(container),
            )
        )

    try:
        return Node(
            node_id=str(data.get("id", name)),
            name=str(name),
            total_cpus=_quantity(data, "total_cpus"),
            used_cpus=_quantity(data, "used_cpus", 0),
            total_memory=_quantity(data, "total_memory"),
            used_memory=_quantity(data, "used_memory", 0),
            health_indicator=health,
            containers=tuple(containers),
            labels=_labels(data),
        )
    except SnapshotError as e:
        raise SnapshotError(f"Node {name}: {e}") from e


def parse_snapshot(document: Mapping[str, Any]) -> Tuple[WorkloadRequest, List[Node]]:
    """스냅샷 문서(dict)를 파싱합니다."""
    if not isinstance(document, dict):
        raise SnapshotError("Snapshot must be a mapping with 'workload' and 'nodes'")

    workload = document.get("workload") or {}
    if not isinstance(workload, dict):
        raise SnapshotError("workload must be a mapping")

    nodes_data = document.get("nodes")
    if not isinstance(nodes_data, list):
        raise SnapshotError("nodes must be a list")

    request = _parse_request(workload)
    nodes = [_parse_node(node) for node in nodes_data]

    logger.debug(f"Parsed snapshot with {len(nodes)} nodes")
    return request, nodes


def load_snapshot(path: str) -> Tuple[WorkloadRequest, List[Node]]:
    """YAML 스냅샷 파일을 읽어 파싱합니다."""
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SnapshotError(f"Failed to parse snapshot {path}: {e}") from e
    except OSError as e:
        raise SnapshotError(f"Failed to read snapshot {path}: {e}") from e

    logger.info(f"Snapshot loaded from {path}")
    return parse_snapshot(document)
