"""
Resource Model for Placement
노드의 용량/사용량과 워크로드의 리소스 요청을 표현하는 데이터 모듈입니다.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from .config import Config

logger = logging.getLogger(__name__)

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


def parse_weight_label(value: Optional[str]) -> Optional[int]:
    """weight 라벨 값을 양의 정수로 변환합니다. 유효하지 않으면 None 을 반환합니다."""
    if value is None:
        return None
    if not _DECIMAL_RE.fullmatch(value):
        logger.warning(f"Ignoring non-numeric weight label: {value!r}")
        return None
    weight = int(value)
    if weight <= 0:
        logger.warning(f"Ignoring non-positive weight label: {value!r}")
        return None
    return weight


@dataclass(frozen=True)
class WorkloadRequest:
    """배치 대상 워크로드의 리소스 요청"""

    cpu_shares: int = 0
    memory_bytes: int = 0
    labels: Mapping[str, str] = field(default_factory=dict, hash=False)
    class_marker: bool = False
    weight_override: Optional[int] = None

    @classmethod
    def from_labels(
        cls, cpu_shares: int, memory_bytes: int, labels: Optional[Mapping[str, str]] = None
    ) -> "WorkloadRequest":
        """원시 라벨 맵에서 class marker 와 weight 를 한 번만 해석합니다."""
        labels = dict(labels or {})
        return cls(
            cpu_shares=cpu_shares,
            memory_bytes=memory_bytes,
            labels=labels,
            class_marker=Config.CLASS_MARKER_LABEL in labels,
            weight_override=parse_weight_label(labels.get(Config.WEIGHT_LABEL)),
        )

    @property
    def has_cpu_reservation(self) -> bool:
        return self.cpu_shares > 0

    @property
    def has_memory_reservation(self) -> bool:
        return self.memory_bytes > 0


@dataclass(frozen=True)
class Container:
    """노드에서 실행 중인 컨테이너"""

    name: str
    request: WorkloadRequest = field(default_factory=WorkloadRequest)


@dataclass(frozen=True)
class Node:
    """클러스터 노드 스냅샷. 랭킹 중에는 읽기만 합니다."""

    node_id: str
    name: str
    total_cpus: int
    used_cpus: int
    total_memory: int
    used_memory: int
    health_indicator: int = 0
    containers: Tuple[Container, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict, hash=False)

    @property
    def free_cpus(self) -> int:
        return self.total_cpus - self.used_cpus

    @property
    def free_memory(self) -> int:
        return self.total_memory - self.used_memory

    @property
    def container_count(self) -> int:
        return len(self.containers)


def jenkins_weight(request: WorkloadRequest) -> int:
    """
    Jenkins 빌드 에이전트 워크로드의 상대 가중치를 반환합니다.

    class marker 가 없거나 CPU/메모리 예약이 있으면 0, 그 외에는 weight 라벨
    값(기본값 1)입니다.
    """
    if (
        not request.class_marker
        or request.has_cpu_reservation
        or request.has_memory_reservation
    ):
        return 0
    if request.weight_override is None:
        return Config.DEFAULT_CLASS_WEIGHT
    return request.weight_override


def summarize_labels(labels: Mapping[str, str]) -> Dict[str, str]:
    """로그 출력용으로 placement 관련 라벨만 추려냅니다."""
    return {
        key: value
        for key, value in labels.items()
        if key == Config.CLASS_MARKER_LABEL or key.startswith(Config.LABEL_NAMESPACE)
    }
