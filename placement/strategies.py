"""
Placement Strategies
워크로드 요청과 노드 스냅샷으로부터 선호도 순 노드 목록을 만드는 전략들입니다.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Type

from .config import Config
from .exceptions import UnknownStrategyError
from .resource_model import Node, WorkloadRequest, summarize_labels
from .weighted_node import (
    sort_weighted_nodes,
    weigh_nodes,
    weigh_nodes_by_capacity,
    weigh_nodes_uniformly,
)

logger = logging.getLogger(__name__)


class PlacementStrategy(ABC):
    """모든 배치 전략이 구현하는 인터페이스"""

    def initialize(self) -> None:
        """요청 상태와 무관한 1회성 초기화"""

    @property
    @abstractmethod
    def name(self) -> str:
        """전략 선택에 사용하는 고정 식별자"""

    @abstractmethod
    def rank_and_sort(self, request: WorkloadRequest, nodes: Sequence[Node]) -> List[Node]:
        """선호도 순으로 정렬된 노드 목록을 반환합니다. 후보가 없으면 NoFeasibleNodeError."""


class BinpackPlacementStrategy(PlacementStrategy):
    """배치 후 사용률 기준으로 노드를 촘촘히 채우는 전략"""

    @property
    def name(self) -> str:
        return "binpack"

    def rank_and_sort(self, request: WorkloadRequest, nodes: Sequence[Node]) -> List[Node]:
        weighted_nodes = weigh_nodes(request, nodes, Config.BINPACK_HEALTH_FACTOR)
        return sort_weighted_nodes(weighted_nodes)


class SpreadPlacementStrategy(PlacementStrategy):
    """컨테이너 수가 적고 여유 용량이 많은 노드를 우선하는 전략"""

    @property
    def name(self) -> str:
        return "spread"

    def rank_and_sort(self, request: WorkloadRequest, nodes: Sequence[Node]) -> List[Node]:
        weighted_nodes = weigh_nodes_uniformly(request, nodes, Config.SPREAD_BASE_SCORE)
        return sort_weighted_nodes(weighted_nodes)


class JenkinsPlacementStrategy(PlacementStrategy):
    """
    Jenkins 빌드 에이전트를 여유 CPU 가 많은 노드로 분산하는 전략

    CPU 와 메모리 예약을 모두 가진 워크로드는 binpack 에, Jenkins 표시가 없는
    워크로드는 spread 에 그대로 위임합니다.
    """

    def __init__(self):
        self._binpack = BinpackPlacementStrategy()
        self._spread = SpreadPlacementStrategy()

    def initialize(self) -> None:
        self._binpack.initialize()
        self._spread.initialize()

    @property
    def name(self) -> str:
        return "jenkins"

    def rank_and_sort(self, request: WorkloadRequest, nodes: Sequence[Node]) -> List[Node]:
        if request.has_cpu_reservation and request.has_memory_reservation:
            logger.debug("Workload reserves cpu and memory, delegating to binpack")
            return self._binpack.rank_and_sort(request, nodes)

        if not request.class_marker:
            logger.debug("Workload is not a jenkins agent, delegating to spread")
            return self._spread.rank_and_sort(request, nodes)

        logger.debug(f"Ranking jenkins agent with labels {summarize_labels(request.labels)}")
        # health 가 좋은 노드의 점수를 낮춰 선택될 확률을 높인다
        weighted_nodes = weigh_nodes_by_capacity(
            request, nodes, Config.JENKINS_HEALTH_FACTOR
        )
        return sort_weighted_nodes(weighted_nodes)


_STRATEGIES: Dict[str, Type[PlacementStrategy]] = {
    "binpack": BinpackPlacementStrategy,
    "spread": SpreadPlacementStrategy,
    "jenkins": JenkinsPlacementStrategy,
}


def available_strategies() -> List[str]:
    """등록된 전략 이름 목록을 반환합니다."""
    return sorted(_STRATEGIES)


def new_strategy(name: str) -> PlacementStrategy:
    """이름으로 전략을 생성하고 초기화합니다."""
    strategy_class = _STRATEGIES.get(name.lower())
    if strategy_class is None:
        raise UnknownStrategyError(name)

    strategy = strategy_class()
    strategy.initialize()
    logger.debug(f"Initialized placement strategy: {strategy.name}")
    return strategy
