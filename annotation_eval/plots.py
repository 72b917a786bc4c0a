"""
Visualization functions for annotation evaluation results.
"""

from pathlib import Path
import matplotlib.pyplot as plt
import matplotlib
import numpy as np

from .metrics import EvaluationResult

# Use non-interactive backend for server environments
matplotlib.use('Agg')

PRF_COLORS = {
    'Precision': '#3498db',
    'Recall': '#2ecc71',
    'F1-score': '#e67e22',
}


def _save(fig, output_path: str) -> Path:
    plt.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return output_path


def plot_metrics_by_label(
    result: EvaluationResult,
    output_path: str,
    title: str = "Metrics by Label"
):
    """
    Plot grouped Precision/Recall/F1 bars for every label.

    Args:
        result: Dict from evaluate() or combine_results()
        output_path: Path to save figure
        title: Plot title

    Example:
        >>> results = evaluate(gt_boxes, pred_boxes)
        >>> plot_metrics_by_label(results, "figures/metrics_by_label.png")
    """
    labels = [label.value for label in result]
    series = {
        'Precision': [m.precision for m in result.values()],
        'Recall': [m.recall for m in result.values()],
        'F1-score': [m.f1_score for m in result.values()],
    }

    x = np.arange(len(labels))
    width = 0.25

    fig, ax = plt.subplots(figsize=(10, 6))

    for i, (name, values) in enumerate(series.items()):
        bars = ax.bar(x + (i - 1) * width, values, width, label=name,
                      color=PRF_COLORS[name], edgecolor='black', linewidth=0.5)
        for bar, value in zip(bars, values):
            ax.text(bar.get_x() + bar.get_width() / 2, value + 0.01,
                    f'{value:.2f}', ha='center', va='bottom', fontsize=8)

    ax.set_xticks(x)
    ax.set_xticklabels(labels, fontsize=11)
    ax.set_ylabel('Score', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_ylim([0, 1.1])
    ax.legend(fontsize=11)
    ax.grid(axis='y', alpha=0.3)

    output_path = _save(fig, output_path)
    print(f"✓ Saved metrics-by-label plot: {output_path}")


def plot_counts_by_label(
    result: EvaluationResult,
    output_path: str,
    title: str = "TP / FP / FN by Label"
):
    """
    Plot stacked TP/FN bars (ground truth) next to FP bars for every label.

    Args:
        result: Dict from evaluate() or combine_results()
        output_path: Path to save figure
        title: Plot title
    """
    labels = [label.value for label in result]
    tps = [m.true_positives for m in result.values()]
    fns = [m.false_negatives for m in result.values()]
    fps = [m.false_positives for m in result.values()]

    x = np.arange(len(labels))
    width = 0.35

    fig, ax = plt.subplots(figsize=(10, 6))

    ax.bar(x - width / 2, tps, width, label='TP', color='#2ecc71', edgecolor='black', linewidth=0.5)
    ax.bar(x - width / 2, fns, width, bottom=tps, label='FN', color='#95a5a6', edgecolor='black', linewidth=0.5)
    ax.bar(x + width / 2, fps, width, label='FP', color='#e74c3c', edgecolor='black', linewidth=0.5)

    ax.set_xticks(x)
    ax.set_xticklabels(labels, fontsize=11)
    ax.set_ylabel('Boxes', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(fontsize=11)
    ax.grid(axis='y', alpha=0.3)

    output_path = _save(fig, output_path)
    print(f"✓ Saved counts-by-label plot: {output_path}")


def plot_all_metrics(
    result: EvaluationResult,
    output_dir: str,
    run_name: str = "evaluation"
):
    """
    Generate all evaluation plots in one call.

    Args:
        result: Per-label metrics to plot
        output_dir: Directory to save all plots
        run_name: Name to include in titles
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    # 1. P/R/F1 per label
    plot_metrics_by_label(
        result,
        output_dir / "metrics_by_label.png",
        title=f"{run_name}: Metrics by Label"
    )

    # 2. TP/FP/FN per label
    plot_counts_by_label(
        result,
        output_dir / "counts_by_label.png",
        title=f"{run_name}: TP / FP / FN by Label"
    )

    print(f"\n✓ All plots saved to: {output_dir}/")
