"""
pytest 공통 설정 및 Fixture 정의
"""

import os
import sys
import tempfile

import pytest

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from placement.config import Config
from placement.resource_model import Container, Node, WorkloadRequest

JENKINS_LABELS = {Config.CLASS_MARKER_LABEL: "jenkins-1"}


def make_request(cpu_shares=0, memory_bytes=0, labels=None) -> WorkloadRequest:
    """테스트용 WorkloadRequest 생성"""
    return WorkloadRequest.from_labels(cpu_shares, memory_bytes, labels or {})


def make_jenkins_request(cpu_shares=0, memory_bytes=0, weight=None) -> WorkloadRequest:
    """Jenkins 에이전트 요청 생성"""
    labels = dict(JENKINS_LABELS)
    if weight is not None:
        labels[Config.WEIGHT_LABEL] = weight
    return make_request(cpu_shares, memory_bytes, labels)


def make_node(
    name,
    total_cpus=10,
    used_cpus=0,
    total_memory=100,
    used_memory=0,
    health_indicator=0,
    containers=(),
) -> Node:
    """테스트용 Node 생성"""
    return Node(
        node_id=f"id-{name}",
        name=name,
        total_cpus=total_cpus,
        used_cpus=used_cpus,
        total_memory=total_memory,
        used_memory=used_memory,
        health_indicator=health_indicator,
        containers=tuple(containers),
    )


def make_container(name, request=None) -> Container:
    return Container(name=name, request=request or make_request())


@pytest.fixture
def example_nodes():
    """Node1(여유 많음), Node2(여유 적음). 컨테이너 없음"""
    return [
        make_node("node-1", total_cpus=10, used_cpus=2, total_memory=100, used_memory=20),
        make_node("node-2", total_cpus=10, used_cpus=8, total_memory=100, used_memory=80),
    ]


@pytest.fixture
def jenkins_nodes():
    """Node1, Node2 에 각각 기본 가중치 Jenkins 컨테이너가 하나씩 있음"""
    return [
        make_node(
            "node-1",
            total_cpus=10,
            used_cpus=2,
            total_memory=100,
            used_memory=20,
            containers=[make_container("agent-a", make_jenkins_request())],
        ),
        make_node(
            "node-2",
            total_cpus=10,
            used_cpus=8,
            total_memory=100,
            used_memory=80,
            containers=[make_container("agent-b", make_jenkins_request())],
        ),
    ]


@pytest.fixture
def snapshot_file():
    """임시 스냅샷 파일"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(
            f"""
workload:
  cpu_shares: 4
  memory_bytes: 40
nodes:
  - name: node-1
    total_cpus: 10
    used_cpus: 2
    total_memory: 100
    used_memory: 20
  - name: node-2
    total_cpus: 10
    used_cpus: 8
    total_memory: 100
    used_memory: 80
    health_indicator: 3
    labels:
      zone: b
    containers:
      - name: agent-b
        labels:
          {Config.CLASS_MARKER_LABEL}: "jenkins-1"
          {Config.WEIGHT_LABEL}: "2"
        """
        )
        temp_file = f.name

    yield temp_file

    # 정리
    os.unlink(temp_file)


_CONFIG_ATTRIBUTES = [
    "DEFAULT_STRATEGY",
    "LOG_LEVEL",
    "LOG_FILE",
    "NAMESPACES",
    "BINPACK_HEALTH_FACTOR",
    "JENKINS_HEALTH_FACTOR",
    "SPREAD_BASE_SCORE",
]


@pytest.fixture(autouse=True)
def reset_config():
    """각 테스트 후 설정 초기화"""
    saved = {name: getattr(Config, name) for name in _CONFIG_ATTRIBUTES}
    yield
    for name, value in saved.items():
        setattr(Config, name, value)


# 테스트 마커 등록
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
