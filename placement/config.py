"""
Placement Configuration
노드 랭킹 전략에서 사용하는 정책 상수와 실행 설정을 정의합니다.
"""

import logging
import os
from typing import Any, Dict, List

import yaml

logger = logging.getLogger(__name__)


class Config:
    """Placement 설정 클래스"""

    # Kubernetes 관련 설정
    KUBECONFIG_PATH = os.getenv("KUBECONFIG_PATH", "")
    NAMESPACES = [
        ns.strip()
        for ns in os.getenv("PLACEMENT_NAMESPACES", "").split(",")
        if ns.strip()
    ]

    # 기본 전략
    DEFAULT_STRATEGY = os.getenv("PLACEMENT_DEFAULT_STRATEGY", "spread")

    # 라벨 규약
    LABEL_NAMESPACE = "com.docker.swarm"
    CLASS_MARKER_LABEL = "com.nirima.jenkins.plugins.docker.JenkinsId"
    WEIGHT_LABEL = f"{LABEL_NAMESPACE}.weight"
    DEFAULT_CLASS_WEIGHT = 1

    # 전략별 health 가중치 (score += factor * health_indicator)
    # health_indicator 가 클수록 건강한 노드이므로 음수 factor 가 앞 순위로 올린다
    BINPACK_HEALTH_FACTOR = -10
    JENKINS_HEALTH_FACTOR = -5
    SPREAD_BASE_SCORE = 0

    # 사용률 점수 상한 (%)
    MAX_UTILIZATION_SCORE = 100

    # Kubernetes 노드 변환 설정
    HEALTHY_INDICATOR = 100
    CPU_SHARES_PER_CORE = 1024

    # 로깅 설정
    LOG_LEVEL = os.getenv("PLACEMENT_LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("PLACEMENT_LOG_FILE", "")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def get_namespaces(cls) -> List[str]:
        """Pod 를 조회할 네임스페이스 목록을 반환합니다. 비어 있으면 전체 네임스페이스입니다."""
        return list(cls.NAMESPACES)

    @classmethod
    def load_file(cls, config_path: str) -> Dict[str, Any]:
        """YAML 설정 파일의 값으로 클래스 속성을 덮어씁니다."""
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

        applied = {}
        for key, value in config_data.items():
            if isinstance(key, str) and key.isupper() and hasattr(cls, key):
                setattr(cls, key, value)
                applied[key] = value
                logger.info(f"Loaded config: {key} = {value}")
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        logger.info(f"Configuration loaded from {config_path}")
        return applied
