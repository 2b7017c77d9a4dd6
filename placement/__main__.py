"""
Main Entry Point for Placement
스냅샷 파일이나 클러스터 상태로 노드 랭킹을 계산하는 CLI 입니다.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from . import __version__
from .config import Config
from .exceptions import PlacementError
from .resource_model import Node
from .snapshot import load_snapshot
from .strategies import available_strategies, new_strategy

logger = logging.getLogger("placement")


def setup_logging(log_level: str = None):
    """로깅을 설정합니다."""
    if log_level is None:
        log_level = Config.LOG_LEVEL

    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    handlers = [logging.StreamHandler(sys.stderr)]
    if Config.LOG_FILE:
        handlers.append(logging.FileHandler(Config.LOG_FILE))

    logging.basicConfig(
        level=numeric_level,
        format=Config.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def parse_arguments(argv: Optional[List[str]] = None):
    """명령행 인수를 파싱합니다."""
    parser = argparse.ArgumentParser(
        prog="placement-rank",
        description="Rank candidate nodes for a workload placement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 스냅샷 파일로 랭킹
  python -m placement --snapshot snapshot.yaml --strategy jenkins

  # 클러스터 상태로 랭킹
  python -m placement --from-cluster --workload pod.yaml

  # 전략 목록
  python -m placement --list-strategies
        """,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--snapshot", type=str, help="워크로드와 노드를 담은 YAML 스냅샷")
    source.add_argument(
        "--from-cluster",
        action="store_true",
        help="Kubernetes 클러스터에서 노드 스냅샷을 조회",
    )

    parser.add_argument("--workload", type=str, help="--from-cluster 용 Pod manifest YAML")
    parser.add_argument(
        "--strategy",
        default=None,
        help="배치 전략 이름 (기본값: Config.DEFAULT_STRATEGY)",
    )
    parser.add_argument(
        "--list-strategies", action="store_true", help="등록된 전략 목록 출력"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="로그 레벨 설정 (기본값: INFO)",
    )
    parser.add_argument("--config", type=str, help="설정 파일 경로")
    parser.add_argument(
        "--version", action="version", version=f"placement v{__version__}"
    )

    args = parser.parse_args(argv)
    if args.from_cluster and not args.workload:
        parser.error("--from-cluster requires --workload")
    if not args.list_strategies and not (args.snapshot or args.from_cluster):
        parser.error("one of --snapshot or --from-cluster is required")
    return args


def load_cluster_input(workload_path: str):
    """클러스터 노드와 Pod manifest 로 랭킹 입력을 만듭니다."""
    # kubernetes 패키지는 클러스터 모드에서만 필요하다
    from .k8s_client import KubernetesClient, workload_from_pod_manifest

    with open(workload_path, "r") as f:
        manifest = yaml.safe_load(f) or {}

    request = workload_from_pod_manifest(manifest)
    nodes = KubernetesClient().get_nodes()
    return request, nodes


def print_ranking(nodes: List[Node]):
    """랭킹 결과를 출력합니다."""
    for rank, node in enumerate(nodes, start=1):
        print(
            f"{rank}\t{node.name}\t"
            f"free_cpus={node.free_cpus}\tfree_memory={node.free_memory}\t"
            f"containers={node.container_count}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    """메인 함수"""
    args = parse_arguments(argv)

    if args.config:
        setup_logging(args.log_level)
        try:
            Config.load_file(args.config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config file {args.config}: {e}")
            return 1

    setup_logging(args.log_level)

    if args.list_strategies:
        for name in available_strategies():
            print(name)
        return 0

    strategy_name = args.strategy or Config.DEFAULT_STRATEGY

    try:
        strategy = new_strategy(strategy_name)

        if args.snapshot:
            request, nodes = load_snapshot(args.snapshot)
        else:
            request, nodes = load_cluster_input(args.workload)

        logger.info(
            f"Ranking {len(nodes)} nodes with strategy {strategy.name} "
            f"(cpu_shares: {request.cpu_shares}, memory_bytes: {request.memory_bytes})"
        )
        ranked = strategy.rank_and_sort(request, nodes)

    except PlacementError as e:
        logger.error(f"Placement failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Failed to read input: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1

    print_ranking(ranked)
    logger.info(f"Ranked {len(ranked)}/{len(nodes)} nodes, best: {ranked[0].name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
