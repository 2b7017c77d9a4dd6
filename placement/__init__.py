"""
Placement Package
컨테이너 배치 스케줄러의 노드 랭킹 전략 모음
"""

__version__ = "1.0.0"
__description__ = "워크로드 요청과 노드 스냅샷으로 배치 우선순위를 계산하는 랭킹 전략"

from .config import Config
from .exceptions import (
    NoFeasibleNodeError,
    PlacementError,
    SnapshotError,
    UnknownStrategyError,
)
from .resource_model import Container, Node, WorkloadRequest, jenkins_weight
from .strategies import (
    BinpackPlacementStrategy,
    JenkinsPlacementStrategy,
    PlacementStrategy,
    SpreadPlacementStrategy,
    available_strategies,
    new_strategy,
)

__all__ = [
    "Config",
    "Container",
    "Node",
    "WorkloadRequest",
    "jenkins_weight",
    "PlacementStrategy",
    "BinpackPlacementStrategy",
    "SpreadPlacementStrategy",
    "JenkinsPlacementStrategy",
    "available_strategies",
    "new_strategy",
    "PlacementError",
    "NoFeasibleNodeError",
    "UnknownStrategyError",
    "SnapshotError",
]
