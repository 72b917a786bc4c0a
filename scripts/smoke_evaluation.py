"""
Quick Smoke Run for the Evaluation System
=========================================
Exercises the evaluation package end to end without a prediction model.
Builds dummy predictions from saved projects by jittering, dropping and
adding boxes, then runs evaluation, plotting and file output.

Usage:
    python scripts/smoke_evaluation.py --projects data/ui-annotation-projects.json
"""

import argparse
import random
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from annotation_eval.boxes import Label
from annotation_eval.evaluator import evaluate_projects
from annotation_eval.io import load_projects, save_metrics, save_summary_csv
from annotation_eval.matching import MatchStrategy
from annotation_eval.metrics import result_to_dict
from annotation_eval.plots import plot_all_metrics


def create_dummy_predictions(projects, keep_rate=0.85, fp_rate=0.1, jitter=5.0):
    """
    Create dummy predictions from ground truth annotations.

    Args:
        projects: Saved projects (ground truth)
        keep_rate: Chance that a GT box gets a (jittered) prediction
        fp_rate: Chance per GT box of an extra random box
        jitter: Max offset in pixels applied to kept boxes

    Returns:
        Dict mapping project id to annotation records
    """
    labels = [label.value for label in Label]
    predictions = {}

    for project in projects:
        annotations = []

        for ann in project.get('annotations', []):
            if random.random() < keep_rate:
                annotations.append({
                    'label': ann['label'],
                    'x': ann['x'] + random.uniform(-jitter, jitter),
                    'y': ann['y'] + random.uniform(-jitter, jitter),
                    'width': max(0.0, ann['width'] + random.uniform(-jitter / 2, jitter / 2)),
                    'height': max(0.0, ann['height'] + random.uniform(-jitter / 2, jitter / 2)),
                })

            # Random false positive
            if random.random() < fp_rate:
                annotations.append({
                    'label': random.choice(labels),
                    'x': random.uniform(0, 500),
                    'y': random.uniform(0, 400),
                    'width': random.uniform(30, 130),
                    'height': random.uniform(20, 70),
                })

        predictions[str(project['id'])] = annotations

    return predictions


def main():
    parser = argparse.ArgumentParser(description="Smoke-run the evaluation package on dummy predictions")
    parser.add_argument("--projects", type=str, required=True, help="Path to saved projects JSON file")
    parser.add_argument("--output_dir", type=str, default="evaluation/results/quick_test/")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    print("=" * 70)
    print("QUICK SMOKE RUN - EVALUATION SYSTEM")
    print("=" * 70)

    if not Path(args.projects).exists():
        print(f"❌ Projects file not found: {args.projects}")
        return 1

    print("\nLoading projects...")
    projects = load_projects(args.projects)
    print(f"✓ Loaded {len(projects)} projects")

    print("\nCreating dummy predictions (with noise)...")
    random.seed(args.seed)
    predictions = create_dummy_predictions(projects)
    print(f"✓ Created predictions for {len(predictions)} projects")

    print("\n" + "=" * 70)
    print("RUNNING EVALUATION")
    print("=" * 70)

    evaluations = {}
    for strategy in MatchStrategy:
        try:
            evaluations[strategy] = evaluate_projects(projects, predictions, strategy=strategy)
        except Exception as e:
            print(f"❌ Error ({strategy.value}): {e}")
            return 1
        summary = evaluations[strategy]['summary']
        print(f"✓ {strategy.value:<8} avg P={summary['precision']:.3f} "
              f"R={summary['recall']:.3f} F1={summary['f1']:.3f}")

    combined = evaluations[MatchStrategy.GREEDY]['combined']

    print("\n" + "=" * 70)
    print("PLOTS AND FILE I/O")
    print("=" * 70)

    try:
        plot_all_metrics(combined, args.output_dir, run_name="Quick Test (Dummy Predictions)")
        save_metrics(
            {s.value: result_to_dict(e['combined']) for s, e in evaluations.items()},
            Path(args.output_dir) / "test_metrics.json"
        )
        save_summary_csv(combined, Path(args.output_dir) / "test_summary.csv")
    except Exception as e:
        print(f"❌ Error writing outputs: {e}")
        return 1

    print("\n" + "=" * 70)
    print("✅ SMOKE RUN PASSED")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
