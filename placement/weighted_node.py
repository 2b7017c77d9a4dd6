"""
Weighted Node Scoring
노드별 점수 계산과 모든 전략이 공유하는 4단계 정렬 규칙을 정의합니다.
"""

import functools
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .config import Config
from .exceptions import NoFeasibleNodeError
from .resource_model import Node, WorkloadRequest, jenkins_weight

logger = logging.getLogger(__name__)


@dataclass
class WeightedNode:
    """정렬용 점수를 가진 노드. 랭킹 호출마다 새로 만들어집니다."""

    node: Node
    # 낮을수록 우선
    score: int
    # 2차 정렬 키 (컨테이너 수 또는 가중 컨테이너 수)
    tie_break_count: int


def compare_weighted_nodes(a: WeightedNode, b: WeightedNode) -> int:
    """두 노드를 비교합니다. a 가 앞서면 음수, 뒤면 양수, 모든 키가 같으면 0."""
    if a.score != b.score:
        return -1 if a.score < b.score else 1
    if a.tie_break_count != b.tie_break_count:
        return -1 if a.tie_break_count < b.tie_break_count else 1
    if a.node.free_cpus != b.node.free_cpus:
        return -1 if a.node.free_cpus > b.node.free_cpus else 1
    if a.node.free_memory != b.node.free_memory:
        return -1 if a.node.free_memory > b.node.free_memory else 1
    return 0


def sort_weighted_nodes(weighted_nodes: Sequence[WeightedNode]) -> List[Node]:
    """점수가 매겨진 노드를 정렬하고 Node 참조만 순서대로 반환합니다."""
    # 안정 정렬이므로 모든 키가 같은 노드는 입력 순서를 유지한다
    ordered = sorted(weighted_nodes, key=functools.cmp_to_key(compare_weighted_nodes))
    return [weighted.node for weighted in ordered]


def _truncating_div(numerator: int, denominator: int) -> int:
    """0 방향으로 버림하는 정수 나눗셈"""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _fits(request: WorkloadRequest, node: Node) -> bool:
    return (
        node.total_memory >= request.memory_bytes
        and node.total_cpus >= request.cpu_shares
    )


def _utilization_scores(request: WorkloadRequest, node: Node) -> Tuple[int, int]:
    """배치 이후의 CPU/메모리 사용률 점수를 계산합니다. 예약이 없으면 100 입니다."""
    cpu_score = Config.MAX_UTILIZATION_SCORE
    memory_score = Config.MAX_UTILIZATION_SCORE

    if request.has_cpu_reservation:
        cpu_score = (node.used_cpus + request.cpu_shares) * 100 // node.total_cpus
    if request.has_memory_reservation:
        memory_score = (node.used_memory + request.memory_bytes) * 100 // node.total_memory

    return cpu_score, memory_score


def filter_feasible_nodes(request: WorkloadRequest, nodes: Sequence[Node]) -> List[Node]:
    """요청을 수용할 수 있고 배치 후 용량을 넘지 않는 노드만 남깁니다."""
    feasible = []
    for node in nodes:
        if not _fits(request, node):
            logger.debug(f"Skipping node {node.name}: smaller than requested resources")
            continue

        cpu_score, memory_score = _utilization_scores(request, node)
        if (
            cpu_score > Config.MAX_UTILIZATION_SCORE
            or memory_score > Config.MAX_UTILIZATION_SCORE
        ):
            logger.debug(
                f"Skipping node {node.name}: overcommitted "
                f"(cpu: {cpu_score}, memory: {memory_score})"
            )
            continue

        feasible.append(node)
    return feasible


def weigh_nodes(
    request: WorkloadRequest, nodes: Sequence[Node], health_factor: int
) -> List[WeightedNode]:
    """사용률 기반 점수(cpu + memory + health_factor * health)를 매깁니다."""
    weighted_nodes = []

    for node in filter_feasible_nodes(request, nodes):
        cpu_score, memory_score = _utilization_scores(request, node)
        weighted_nodes.append(
            WeightedNode(
                node=node,
                score=cpu_score + memory_score + health_factor * node.health_indicator,
                tie_break_count=node.container_count,
            )
        )

    if not weighted_nodes:
        raise NoFeasibleNodeError()

    return weighted_nodes


def weigh_nodes_uniformly(
    request: WorkloadRequest, nodes: Sequence[Node], base_score: int
) -> List[WeightedNode]:
    """모든 배치 가능 노드에 같은 점수를 주고 정렬의 2차 키에 순서를 맡깁니다."""
    weighted_nodes = [
        WeightedNode(node=node, score=base_score, tie_break_count=node.container_count)
        for node in filter_feasible_nodes(request, nodes)
    ]

    if not weighted_nodes:
        raise NoFeasibleNodeError()

    return weighted_nodes


def weigh_nodes_by_capacity(
    request: WorkloadRequest, nodes: Sequence[Node], health_factor: int
) -> List[WeightedNode]:
    """
    여유 CPU 를 노드의 Jenkins 가중치 합으로 나눈 값으로 점수를 매깁니다.

    여유 CPU 가 많을수록 점수가 더 음수가 되어 앞쪽으로 정렬됩니다. 같은 종류의
    워크로드가 이미 많은 노드는 가중치 합이 커져 점수의 크기가 줄어듭니다.
    """
    weighted_nodes = []

    weight = jenkins_weight(request)
    for node in nodes:
        total_weight = weight + sum(
            jenkins_weight(container.request) for container in node.containers
        )
        if total_weight == 0:
            logger.debug(f"Skipping node {node.name}: total weight is zero")
            continue

        # 정규화하지 않은 값. 노드 용량에 비례해 분산된다
        cpu_score = -_truncating_div(node.free_cpus, total_weight)
        if cpu_score == 0:
            logger.debug(f"Skipping node {node.name}: no free cpu per weight")
            continue

        weighted_nodes.append(
            WeightedNode(
                node=node,
                score=cpu_score + health_factor * node.health_indicator,
                tie_break_count=total_weight,
            )
        )

    if not weighted_nodes:
        raise NoFeasibleNodeError()

    return weighted_nodes
