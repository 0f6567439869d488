#!/usr/bin/env python3
"""
Freelancer AGNES Clustering Runner

Loads freelancer skill vectors, clusters them with AGNES and writes the
assignments, merge history and distance matrix to the output directory.

Usage:
    python run_clustering.py --k 3                       # Target 3 clusters
    python run_clustering.py --single                    # Merge down to one cluster
    python run_clustering.py --k 3 --linkage average --metric cosine
    python run_clustering.py --optimal-k                 # Pick k by silhouette
    python run_clustering.py --skills                    # Cluster one-hot skill sets
    python run_clustering.py --check                     # Validate config only
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from src.agnes import AgglomerativeClusterer, AgnesError, DistanceMatrix
from src.data_loaders import SkillEncoder, SpreadsheetLoader
from src.evaluation import find_optimal_k, silhouette, silhouette_per_cluster
from config import (
    AGNES_SETTINGS,
    DATA_CONFIG,
    FREELANCER_MAPPING,
    OUTPUT_CONFIG,
    get_output_path,
)


def check_config() -> bool:
    """Check if configuration is valid."""
    report = AGNES_SETTINGS.validate()

    for warning in report["warnings"]:
        print(f"[WARN] {warning}")

    if report["errors"]:
        print("[ERROR] Configuration errors:")
        for err in report["errors"]:
            print(f"    - {err}")
        return False

    print("[OK] Column mapping:")
    for column, source in FREELANCER_MAPPING.to_dict().items():
        print(f"    {column} <- {source}")

    print("\n[OK] Clustering settings:")
    print(f"    Linkage: {AGNES_SETTINGS.linkage}")
    print(f"    Metric: {AGNES_SETTINGS.metric}")
    print(f"    k: {AGNES_SETTINGS.k if AGNES_SETTINGS.k else 'single'}")
    print(f"    Normalize: {AGNES_SETTINGS.normalize}")
    return True


def load_data(args):
    """Load freelancer vectors (or one-hot skill vectors with --skills)."""
    print("Loading data...")
    loader = SpreadsheetLoader(
        data_path=args.input,
        sheet_name=DATA_CONFIG["sheet_name"],
        mapping=FREELANCER_MAPPING,
        expected_dimension=args.dimension,
        normalize=args.normalize,
        encoding=DATA_CONFIG["encoding"],
    )

    if args.skills:
        dataset = SkillEncoder().encode(loader.load_skills())
        print(f"  Encoded {len(dataset)} freelancers over {dataset.vectors.shape[1]} skills")
        return dataset

    dataset = loader.load_vectors()
    print(dataset.stats.print_report())
    return dataset


def print_matrix_stats(matrix: DistanceMatrix):
    stats = matrix.stats()
    print(f"\n  Distance matrix: {stats['n_points']} points ({matrix.metric_name})")
    print(f"    Min: {stats['min']:.4f}, Max: {stats['max']:.4f}, Mean: {stats['mean']:.4f}")


def run_single(dataset, matrix, args, output_dir: Path):
    """Cluster once with a fixed stop criterion."""
    print("\n" + "=" * 60)
    print("AGNES CLUSTERING")
    print("=" * 60)

    config = AGNES_SETTINGS.to_clustering_config(
        linkage=args.linkage,
        metric=args.metric,
        n_clusters=None if args.single else args.k,
    )
    clusterer = AgglomerativeClusterer.from_config(config)
    result = clusterer.cluster_matrix(
        matrix,
        linkage=config.linkage,
        stop=config.stop_criterion(),
        ids=dataset.ids,
    )
    result.config = config
    result.silhouette_score = silhouette(result)

    print(f"  Linkage: {result.linkage}, stop: {result.stop}")
    print(f"  Merges performed: {len(result.merges)}")
    print(f"  Clusters: {result.n_clusters}")
    if result.silhouette_score is not None:
        print(f"  Silhouette: {result.silhouette_score:.4f}")

    per_cluster = silhouette_per_cluster(result)
    for label in range(result.n_clusters):
        members = result.get_cluster_ids(label)
        shown = f", silhouette={per_cluster[label]:.4f}" if label in per_cluster else ""
        print(f"\n  Cluster {label + 1} ({len(members)} freelancers{shown})")
        print(f"    {', '.join(members)}")

    run_dir = output_dir / OUTPUT_CONFIG["clustering"] / f"{result.stop}_{result.linkage}"
    result.save(str(run_dir))
    print(f"\n  Results saved to: {run_dir}")
    return result


def run_optimal_k(dataset, matrix, args, output_dir: Path):
    """Cluster once per candidate k and keep the best silhouette."""
    print("\n" + "=" * 60)
    print("OPTIMAL K SEARCH")
    print("=" * 60)

    k_values = args.k_values or AGNES_SETTINGS.k_values
    clusterer = AgglomerativeClusterer(
        max_iterations=AGNES_SETTINGS.max_iterations,
        deadline_seconds=AGNES_SETTINGS.deadline_seconds,
    )
    search = find_optimal_k(
        k_values=k_values,
        linkage=args.linkage,
        ids=dataset.ids,
        matrix=matrix,
        clusterer=clusterer,
        show_progress=True,
    )

    if search.best_k is None:
        print("\n  No k produced a defined silhouette score")
    else:
        print(f"\n  Best k={search.best_k} with silhouette score={search.best_score:.4f}")

    run_dir = output_dir / OUTPUT_CONFIG["optimal_k"]
    run_dir.mkdir(parents=True, exist_ok=True)
    with open(run_dir / "optimal_k.json", "w") as f:
        json.dump(search.to_dict(), f, indent=2)

    best = search.best_result()
    if best is not None:
        best.save(str(run_dir / f"k{search.best_k}_{best.linkage}"))
    print(f"  Results saved to: {run_dir}")
    return search


def main():
    parser = argparse.ArgumentParser(description="Freelancer AGNES clustering")
    parser.add_argument("--input", default=DATA_CONFIG["data_path"], help="Freelancer spreadsheet")
    parser.add_argument("--k", type=int, default=AGNES_SETTINGS.k, help="Target cluster count")
    parser.add_argument("--single", action="store_true", help="Merge down to a single cluster")
    parser.add_argument("--linkage", choices=["complete", "average"], default=AGNES_SETTINGS.linkage)
    parser.add_argument("--metric", choices=["euclidean", "cosine"], default=AGNES_SETTINGS.metric)
    parser.add_argument("--dimension", type=int, default=AGNES_SETTINGS.expected_dimension,
                        help="Keep only vectors of this length")
    parser.add_argument("--normalize", action=argparse.BooleanOptionalAction,
                        default=AGNES_SETTINGS.normalize, help="Scale vectors to unit length")
    parser.add_argument("--skills", action="store_true", help="Cluster one-hot skill sets instead of vectors")
    parser.add_argument("--optimal-k", action="store_true", help="Search k by silhouette score")
    parser.add_argument("--k-values", type=int, nargs="+", help="Candidate k values for --optimal-k")
    parser.add_argument("--output", default=OUTPUT_CONFIG["root_dir"], help="Output directory")
    parser.add_argument("--check", action="store_true", help="Validate configuration and exit")

    args = parser.parse_args()

    if not check_config() or args.check:
        return

    output_dir = Path(args.output) if args.output else get_output_path()
    output_dir.mkdir(parents=True, exist_ok=True)
    print(f"\n[CONFIG] Output directory: {output_dir.absolute()}\n")

    try:
        dataset = load_data(args)
        metric = AGNES_SETTINGS.to_clustering_config(metric=args.metric).get_metric()
        matrix = DistanceMatrix.build(dataset.vectors, metric)
        print_matrix_stats(matrix)

        if args.optimal_k:
            run_optimal_k(dataset, matrix, args, output_dir)
        else:
            run_single(dataset, matrix, args, output_dir)
    except (AgnesError, FileNotFoundError, ValueError) as e:
        print(f"\n[ERROR] {e}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("CLUSTERING COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
