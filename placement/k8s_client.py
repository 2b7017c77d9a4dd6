"""
Kubernetes Client for Placement
Kubernetes API 에서 노드와 Pod 를 조회해 랭킹용 노드 스냅샷을 만듭니다.
"""

import logging
from typing import Any, Dict, List

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from .config import Config
from .resource_model import Container, Node, WorkloadRequest

logger = logging.getLogger(__name__)

_ACTIVE_POD_PHASES = ("Running", "Pending")

_BINARY_SUFFIXES = {
    "Ki": 1024,
    "Mi": 1024 ** 2,
    "Gi": 1024 ** 3,
    "Ti": 1024 ** 4,
    "Pi": 1024 ** 5,
    "Ei": 1024 ** 6,
}
_DECIMAL_SUFFIXES = {
    "k": 1000,
    "M": 1000 ** 2,
    "G": 1000 ** 3,
    "T": 1000 ** 4,
    "P": 1000 ** 5,
    "E": 1000 ** 6,
}


def parse_cpu_shares(quantity) -> int:
    """CPU Quantity 를 CPU share 로 변환합니다 (1 core = 1024 shares)."""
    if quantity is None:
        return 0

    quantity_str = str(quantity)
    try:
        if quantity_str.endswith("m"):  # millicores
            return int(float(quantity_str[:-1]) * Config.CPU_SHARES_PER_CORE / 1000)
        return int(float(quantity_str) * Config.CPU_SHARES_PER_CORE)
    except ValueError:
        logger.warning(f"Failed to parse cpu quantity: {quantity_str}")
        return 0


def parse_memory_bytes(quantity) -> int:
    """메모리 Quantity 를 바이트로 변환합니다."""
    if quantity is None:
        return 0

    quantity_str = str(quantity)
    try:
        for suffix, multiplier in _BINARY_SUFFIXES.items():
            if quantity_str.endswith(suffix):
                return int(float(quantity_str[: -len(suffix)]) * multiplier)
        for suffix, multiplier in _DECIMAL_SUFFIXES.items():
            if quantity_str.endswith(suffix):
                return int(float(quantity_str[: -len(suffix)]) * multiplier)
        if quantity_str.endswith("m"):  # milli-bytes
            return int(float(quantity_str[:-1]) / 1000)
        return int(float(quantity_str))
    except ValueError:
        logger.warning(f"Failed to parse memory quantity: {quantity_str}")
        return 0


def workload_from_pod_manifest(manifest: Dict[str, Any]) -> WorkloadRequest:
    """Pod manifest(dict)의 컨테이너 요청 합계로 WorkloadRequest 를 만듭니다."""
    labels = manifest.get("metadata", {}).get("labels", {}) or {}
    containers = manifest.get("spec", {}).get("containers", []) or []

    cpu_shares = 0
    memory_bytes = 0
    for container in containers:
        requests = (container.get("resources") or {}).get("requests") or {}
        cpu_shares += parse_cpu_shares(requests.get("cpu"))
        memory_bytes += parse_memory_bytes(requests.get("memory"))

    return WorkloadRequest.from_labels(
        cpu_shares=cpu_shares,
        memory_bytes=memory_bytes,
        labels={str(k): str(v) for k, v in labels.items()},
    )


class KubernetesClient:
    """노드 스냅샷을 만들기 위한 Kubernetes API 클라이언트"""

    def __init__(self):
        """Kubernetes 클라이언트를 초기화합니다."""
        try:
            if Config.KUBECONFIG_PATH:
                config.load_kube_config(Config.KUBECONFIG_PATH)
                logger.info(f"Kubernetes config loaded from {Config.KUBECONFIG_PATH}")
            else:
                config.load_incluster_config()
                logger.info("Kubernetes config loaded from in-cluster")

            self.core_v1 = client.CoreV1Api()
            logger.info("Kubernetes client initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Kubernetes client: {e}")
            raise

    def get_nodes(self) -> List[Node]:
        """클러스터의 모든 노드를 랭킹용 Node 로 변환해 반환합니다."""
        try:
            nodes = self.core_v1.list_node()
        except ApiException as e:
            logger.error(f"Failed to get nodes: {e}")
            return []

        snapshot = []
        for node in nodes.items:
            pods = self.get_node_pods(node.metadata.name)
            snapshot.append(self._to_node(node, pods))

        logger.info(f"Built snapshot of {len(snapshot)} nodes")
        return snapshot

    def get_node_pods(self, node_name: str) -> List[Any]:
        """노드에 바인딩된 Running/Pending Pod 를 조회합니다."""
        field_selector = f"spec.nodeName={node_name}"
        namespaces = Config.get_namespaces()
        try:
            if namespaces:
                pods = []
                for namespace in namespaces:
                    pods.extend(
                        self.core_v1.list_namespaced_pod(
                            namespace=namespace, field_selector=field_selector
                        ).items
                    )
            else:
                pods = self.core_v1.list_pod_for_all_namespaces(
                    field_selector=field_selector
                ).items
        except ApiException as e:
            logger.error(f"Failed to get pods on node {node_name}: {e}")
            return []

        return [pod for pod in pods if pod.status.phase in _ACTIVE_POD_PHASES]

    def _to_node(self, node, pods: List[Any]) -> Node:
        """Kubernetes 노드 객체와 Pod 목록을 Node 로 변환합니다."""
        allocatable = node.status.allocatable or {}
        containers = tuple(self._to_container(pod) for pod in pods)

        return Node(
            node_id=node.metadata.uid or node.metadata.name,
            name=node.metadata.name,
            total_cpus=parse_cpu_shares(allocatable.get("cpu")),
            used_cpus=sum(c.request.cpu_shares for c in containers),
            total_memory=parse_memory_bytes(allocatable.get("memory")),
            used_memory=sum(c.request.memory_bytes for c in containers),
            health_indicator=self._health_indicator(node),
            containers=containers,
            labels=node.metadata.labels or {},
        )

    def _to_container(self, pod) -> Container:
        """Pod 의 요청 합계와 라벨로 Container 를 만듭니다."""
        cpu_shares = 0
        memory_bytes = 0
        for container in pod.spec.containers:
            requests = self._container_requests(container)
            cpu_shares += parse_cpu_shares(requests.get("cpu"))
            memory_bytes += parse_memory_bytes(requests.get("memory"))

        return Container(
            name=f"{pod.metadata.namespace}/{pod.metadata.name}",
            request=WorkloadRequest.from_labels(
                cpu_shares=cpu_shares,
                memory_bytes=memory_bytes,
                labels=pod.metadata.labels or {},
            ),
        )

    def _container_requests(self, container) -> Dict[str, Any]:
        if container.resources and container.resources.requests:
            return container.resources.requests
        return {}

    def _health_indicator(self, node) -> int:
        """Ready 조건이 True 이면 HEALTHY_INDICATOR, 아니면 0 을 반환합니다."""
        for condition in node.status.conditions or []:
            if condition.type == "Ready":
                return Config.HEALTHY_INDICATOR if condition.status == "True" else 0
        return 0
