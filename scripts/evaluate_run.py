"""
Evaluate Run - Score Predicted Annotations Against Saved Projects
=================================================================
Run evaluation on saved annotation projects and a predictions file.

This script:
1. Loads projects (ground truth) and predictions from JSON files
2. Matches boxes per project and computes per-label P/R/F1
3. Saves metrics.json, summary.csv and plots

Usage:
    # Evaluate with defaults (IoU 0.5, greedy matching)
    python scripts/evaluate_run.py \\
        --projects data/ui-annotation-projects.json \\
        --predictions data/predictions.json \\
        --output_dir evaluation/results/run/

    # With a YAML config and an override
    python scripts/evaluate_run.py \\
        --projects data/ui-annotation-projects.json \\
        --predictions data/predictions.json \\
        --config configs/eval.yaml \\
        --strategy optimal
"""

import argparse
from pathlib import Path
import sys

from tqdm import tqdm

# Add parent directory to path to import annotation_eval
sys.path.insert(0, str(Path(__file__).parent.parent))

from annotation_eval.boxes import AnnotationError
from annotation_eval.config import EvalConfig, load_config, save_config
from annotation_eval.evaluator import evaluate_projects
from annotation_eval.io import load_predictions, load_projects, save_metrics, save_summary_csv
from annotation_eval.matching import MatchStrategy
from annotation_eval.metrics import result_to_dict


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Evaluate predicted UI annotations against saved projects"
    )

    # Required arguments
    parser.add_argument(
        "--projects",
        type=str,
        required=True,
        help="Path to saved projects JSON file (ground truth)"
    )
    parser.add_argument(
        "--predictions",
        type=str,
        required=True,
        help="Path to predictions JSON file"
    )

    # Optional arguments
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with evaluation settings (flags below override it)"
    )
    parser.add_argument(
        "--output_dir",
        type=str,
        default=None,
        help="Output directory for results (default: evaluation/results/run/)"
    )
    parser.add_argument(
        "--run_name",
        type=str,
        default=None,
        help="Name for this evaluation run (for plot titles)"
    )
    parser.add_argument(
        "--iou_threshold",
        type=float,
        default=None,
        help="IoU threshold for matching (default: 0.5)"
    )
    parser.add_argument(
        "--strategy",
        type=str,
        choices=[s.value for s in MatchStrategy],
        default=None,
        help="Matching strategy (default: greedy)"
    )
    parser.add_argument(
        "--no_validate",
        action="store_true",
        help="Skip geometry validation (accept negative sizes and non-finite coordinates; labels are still checked)"
    )
    parser.add_argument(
        "--no_plots",
        action="store_true",
        help="Don't generate plots"
    )

    return parser.parse_args(argv)


def build_config(args) -> EvalConfig:
    config = load_config(args.config) if args.config else EvalConfig()
    return config.updated(
        iou_threshold=args.iou_threshold,
        strategy=args.strategy,
        output_dir=args.output_dir,
        run_name=args.run_name,
        validate=False if args.no_validate else None,
        plots=False if args.no_plots else None,
    )


def main(argv=None):
    args = parse_args(argv)

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Invalid configuration: {e}")
        return 1

    print("=" * 70)
    print("EVALUATE RUN")
    print("=" * 70)
    print(f"Projects:      {args.projects}")
    print(f"Predictions:   {args.predictions}")
    print(f"Output Dir:    {config.output_dir}")
    print(f"IoU Threshold: {config.iou_threshold}")
    print(f"Strategy:      {config.strategy.value}")
    print("=" * 70)

    # Load ground truth
    print(f"\nLoading projects from {args.projects}...")
    try:
        projects = load_projects(args.projects)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Could not load projects: {e}")
        return 1
    print(f"✓ Loaded {len(projects)} projects")

    # Load predictions
    print(f"\nLoading predictions from {args.predictions}...")
    try:
        predictions = load_predictions(args.predictions)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Could not load predictions: {e}")
        return 1
    print(f"✓ Loaded predictions for {len(predictions)} projects")

    project_ids = {str(p['id']) for p in projects}
    missing = project_ids - set(predictions)
    orphans = set(predictions) - project_ids
    if missing:
        print(f"\n⚠ WARNING: {len(missing)} projects have no predictions (all their boxes count as FN)")
    if orphans:
        print(f"⚠ WARNING: {len(orphans)} prediction entries match no project (ignored)")

    # Run evaluation
    print("\n" + "=" * 70)
    print("RUNNING EVALUATION")
    print("=" * 70)

    try:
        evaluation = evaluate_projects(
            projects, predictions,
            iou_threshold=config.iou_threshold,
            strategy=config.strategy,
            validate=config.validate,
            progress=lambda items: tqdm(items, desc="Evaluating", unit="project"),
        )
    except AnnotationError as e:
        print(f"\n❌ Invalid annotation: {e}")
        return 1

    combined = evaluation['combined']
    summary = evaluation['summary']

    run_name = config.run_name or Path(args.predictions).stem

    # Compile results
    results = {
        'run_name': run_name,
        'projects_path': str(args.projects),
        'predictions_path': str(args.predictions),
        'evaluation_settings': config.to_dict(),
        'combined': result_to_dict(combined),
        'summary': summary,
        'projects': [
            {
                'id': report['id'],
                'name': report['name'],
                'num_ground_truth': report['num_ground_truth'],
                'num_predictions': report['num_predictions'],
                'has_predictions': report['has_predictions'],
                'per_label': result_to_dict(report['results']),
                'summary': report['summary'],
            }
            for report in evaluation['projects']
        ],
    }

    # Save results
    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("\n" + "=" * 70)
    print("SAVING RESULTS")
    print("=" * 70)

    save_metrics(results, output_dir / "metrics.json")
    save_summary_csv(combined, output_dir / "summary.csv")
    save_config(config, output_dir / "eval_config.yaml")

    if config.plots:
        print("\nGenerating plots...")
        # Imported here so --no_plots runs don't need a matplotlib backend
        from annotation_eval.plots import plot_all_metrics
        plot_all_metrics(combined, str(output_dir), run_name=run_name)

    # Final summary
    print("\n" + "=" * 70)
    print("EVALUATION COMPLETE")
    print("=" * 70)
    print(f"\nResults saved to: {output_dir}/")
    print("\nPer-label results (all projects):")
    for label, metrics in combined.items():
        print(f"  {label.value:<7} GT: {metrics.total_ground_truth:>4}  "
              f"TP: {metrics.true_positives:>4}  FP: {metrics.false_positives:>4}  "
              f"FN: {metrics.false_negatives:>4}  "
              f"P: {metrics.precision:.4f}  R: {metrics.recall:.4f}  F1: {metrics.f1_score:.4f}")
    print(f"\n  Average Precision: {summary['precision']:.4f}")
    print(f"  Average Recall:    {summary['recall']:.4f}")
    print(f"  Average F1-score:  {summary['f1']:.4f}")

    print("\n✓ All done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
