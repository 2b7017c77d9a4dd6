"""
Placement Exceptions
노드 랭킹 과정에서 호출자에게 전달되는 예외들입니다.
"""


class PlacementError(Exception):
    """placement 패키지의 기본 예외"""


class NoFeasibleNodeError(PlacementError):
    """필터링과 점수 계산 후 배치 가능한 노드가 하나도 남지 않았을 때 발생합니다."""

    def __init__(self, message: str = "no resources available to schedule container"):
        super().__init__(message)


class UnknownStrategyError(PlacementError):
    """등록되지 않은 전략 이름을 요청했을 때 발생합니다."""

    def __init__(self, name: str):
        super().__init__(f"unknown placement strategy: {name}")
        self.name = name


class SnapshotError(PlacementError):
    """스냅샷 문서의 형식이 잘못되었을 때 발생합니다."""
