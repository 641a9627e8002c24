from __future__ import annotations

"""
CLI entrypoint for the multiclass experiments. Pick experiment via
--experiment: reductions_tree (OVA/AVA over decision trees), reductions_lr
(OVA/AVA over binary LR vs. softmax LR), lr_tuning (softmax LR sweeps),
binary_lr (plain binary LR accuracy).
"""

import argparse
from pathlib import Path

import pandas as pd

from multiclass_lr import (
    CSVFILE,
    DECISION_TREE,
    LOGISTIC_REGRESSION,
    TEXTFILE,
    AVAClassifier,
    ClassifierFactory,
    DataSet,
    DecisionTreeClassifier,
    LRClassifier,
    MultiLRClassifier,
    OVAClassifier,
    PreconditionError,
    accuracy,
    cross_validated_accuracy,
    evaluate,
    holdout_accuracy,
)
from multiclass_lr.data import same_label
from multiclass_lr.constants import (
    DEFAULT_BEST_DEPTH,
    DEFAULT_DEPTHS,
    DEFAULT_FOLDS,
    DEFAULT_L2,
    DEFAULT_LEARNING_RATE,
    DEFAULT_RANDOM_STATE,
    DEFAULT_REPEATS,
    DEFAULT_SWEEP_ITERATIONS,
    DEFAULT_SWEEP_LEARNING_RATES,
    FINE_TUNE_MAX_ITERATIONS,
    FINE_TUNE_STEP,
)


def parse_list(value: str, cast=int) -> list:
    return [cast(v.strip()) for v in value.split(",") if v.strip()]


def describe_dataset(dataset: DataSet, path: Path):
    """Print a short summary of dataset size, classes, and features."""
    print(f"Dataset: {path}")
    print(f"Loaded dataset with {len(dataset)} examples")
    print(f"Number of classes: {len(dataset.get_labels())}")
    print(f"Features: {len(dataset.get_all_feature_indices())}")


def print_accuracy(label: str, acc: float):
    print(f"{label}: {acc:.4f} ({acc * 100:.2f}%)")


def print_table(title: str, table: pd.DataFrame):
    print(f"\n{title}")
    print("=" * len(title))
    print(table.to_string(float_format=lambda v: f"{v:.4f}", na_rep="-"))


def build_arg_parser():
    """CLI parser with knobs for data, folds, sweeps, and experiment choice."""
    parser = argparse.ArgumentParser(
        description="Cross-validated accuracy of logistic regression and multiclass reductions."
    )
    parser.add_argument("--data-path", type=Path, default=Path("data/wines.train"))
    parser.add_argument("--format", choices=[TEXTFILE, CSVFILE], default=TEXTFILE)
    parser.add_argument(
        "--label-column", type=str, default=None, help="CSV label column (default: last)."
    )
    parser.add_argument(
        "--experiment",
        choices=["reductions_tree", "reductions_lr", "lr_tuning", "binary_lr"],
        default="reductions_tree",
    )
    parser.add_argument("--folds", type=int, default=DEFAULT_FOLDS)
    parser.add_argument(
        "--depths",
        type=str,
        default=",".join(str(d) for d in DEFAULT_DEPTHS),
        help="Comma-separated tree depths for the OVA/AVA sweep.",
    )
    parser.add_argument(
        "--best-depth", type=int, default=DEFAULT_BEST_DEPTH, help="Depth of the multiclass tree."
    )
    parser.add_argument(
        "--iterations",
        type=str,
        default=",".join(str(i) for i in DEFAULT_SWEEP_ITERATIONS),
        help="Comma-separated SGD pass counts.",
    )
    parser.add_argument(
        "--learning-rates",
        type=str,
        default=",".join(str(r) for r in DEFAULT_SWEEP_LEARNING_RATES),
        help="Comma-separated learning rates for lr_tuning.",
    )
    parser.add_argument("--lr", type=float, default=DEFAULT_LEARNING_RATE, help="SGD learning rate.")
    parser.add_argument("--l2", type=float, default=DEFAULT_L2, help="L2 strength for regularized MultiLR.")
    parser.add_argument("--repeats", type=int, default=DEFAULT_REPEATS, help="Holdout repetitions.")
    parser.add_argument("--random-state", type=int, default=DEFAULT_RANDOM_STATE)
    parser.add_argument("--plot-dir", type=Path, default=None, help="Write figures here.")
    parser.add_argument("--verbose", action="store_true", help="Print per-pass training loss.")
    return parser


def load_plots():
    """Switch matplotlib to the file-only backend and import the figure helpers."""
    import matplotlib

    matplotlib.use("Agg")
    from multiclass_lr import plots

    return plots


def maybe_plot_curves(args: argparse.Namespace, table: pd.DataFrame, name: str, xlabel: str):
    if args.plot_dir is None:
        return

    args.plot_dir.mkdir(parents=True, exist_ok=True)
    load_plots().plot_accuracy_curves(table, args.plot_dir / f"{name}.png", xlabel=xlabel, title=name)
    print(f"Saved {args.plot_dir / f'{name}.png'}")


def run_reductions_tree(args: argparse.Namespace, dataset: DataSet):
    """OVA and AVA over depth-limited trees vs. one multiclass tree, k-fold CV."""
    depths = parse_list(args.depths)
    cv_set = dataset.get_cross_validation_set(args.folds, random_state=args.random_state)
    print(f"Created {args.folds}-fold cross validation\n")

    rows = {}
    for name, reduction in (("OVA", OVAClassifier), ("AVA", AVAClassifier)):
        print(f"Testing {name} with Decision Trees (depths {', '.join(map(str, depths))})")
        rows[name] = {}
        for depth in depths:
            factory = ClassifierFactory(DECISION_TREE, depth)
            acc = cross_validated_accuracy(lambda: reduction(factory), cv_set)
            rows[name][depth] = acc
            print_accuracy(f"{name} Depth {depth}", acc)
        print()

    tree_acc = cross_validated_accuracy(
        lambda: DecisionTreeClassifier(depth_limit=args.best_depth), cv_set
    )
    print_accuracy(f"Multiclass DT Depth {args.best_depth}", tree_acc)

    table = pd.DataFrame(rows).T
    table.columns = [f"Depth {d}" for d in depths]
    table["Best"] = table.max(axis=1)
    table.loc["Multiclass DT", "Best"] = tree_acc
    print_table("Summary Table:", table)

    overall = table["Best"].max()
    print(f"\nOverall Best Accuracy: {overall:.4f} ({overall * 100:.2f}%)")
    curves = table.drop(index="Multiclass DT").drop(columns="Best").T.set_axis(depths)
    maybe_plot_curves(args, curves, "reductions_tree", "Depth")
    return table


def run_reductions_lr(args: argparse.Namespace, dataset: DataSet):
    """OVA/AVA over binary LR against softmax LR (plain and L2), k-fold CV."""
    iterations = parse_list(args.iterations)
    cv_set = dataset.get_cross_validation_set(args.folds, random_state=args.random_state)
    print(f"Created {args.folds}-fold cross validation\n")

    builders = {
        "OVA (LR)": lambda t: OVAClassifier(
            ClassifierFactory(LOGISTIC_REGRESSION, t, learning_rate=args.lr)
        ),
        "AVA (LR)": lambda t: AVAClassifier(
            ClassifierFactory(LOGISTIC_REGRESSION, t, learning_rate=args.lr)
        ),
        "MultiLR": lambda t: MultiLRClassifier(
            learning_rate=args.lr, iterations=t, strict_labels=False, verbose=args.verbose
        ),
        "MultiLR (L2)": lambda t: MultiLRClassifier(
            learning_rate=args.lr, iterations=t, l2=args.l2, strict_labels=False,
            verbose=args.verbose,
        ),
    }

    results = {}
    for name, make in builders.items():
        results[name] = {}
        for t in iterations:
            acc = cross_validated_accuracy(lambda: make(t), cv_set)
            results[name][t] = acc
            print_accuracy(f"{name} with {t:3d} iterations", acc)
        print()

    table = pd.DataFrame(results)
    table.index.name = "iterations"
    print_table("Summary Table:", table)
    maybe_plot_curves(args, table, "reductions_lr", "Iterations")
    return table


def fine_tune_iterations(best: int, sweep: list[int]) -> list[int]:
    """
    Pass counts one step either side of `best`. A neighbour beyond the swept
    range is dropped, as is anything outside (0, FINE_TUNE_MAX_ITERATIONS].
    """
    candidates = [best - FINE_TUNE_STEP, best, best + FINE_TUNE_STEP]
    if best == sweep[0]:
        candidates = candidates[1:]
    elif best == sweep[-1]:
        candidates = candidates[:-1]
    return [t for t in candidates if 0 < t <= FINE_TUNE_MAX_ITERATIONS]


def run_lr_tuning(args: argparse.Namespace, dataset: DataSet):
    """
    Softmax LR: sweep pass counts at the base learning rate, then learning
    rates at the best pass count, then pass counts around the best one at the
    best rate. Each setting is scored by repeated 80/20 holdout.
    """
    iterations = parse_list(args.iterations)
    learning_rates = parse_list(args.learning_rates, cast=float)

    def score(t: int, rate: float) -> float:
        return holdout_accuracy(
            lambda: MultiLRClassifier(
                learning_rate=rate, iterations=t, strict_labels=False, verbose=args.verbose
            ),
            dataset,
            repeats=args.repeats,
            random_state=args.random_state,
        )

    print(f"Step 1: Finding optimal iteration count (learning rate = {args.lr:.3f})")
    print("-" * 64)
    by_iterations = {}
    for t in iterations:
        by_iterations[t] = score(t, args.lr)
        print(f"{t:3d} iterations, learning rate = {args.lr:.3f}, {by_iterations[t]:.4f}")
    best_iterations = max(by_iterations, key=by_iterations.get)
    print(f"\nBest iteration count: {best_iterations} (accuracy: {by_iterations[best_iterations]:.4f})\n")

    print(f"Step 2: Finding optimal learning rate (iterations = {best_iterations})")
    print("-" * 64)
    best_rate, best_acc = args.lr, by_iterations[best_iterations]
    for rate in learning_rates:
        acc = score(best_iterations, rate)
        print(f"{best_iterations:3d} iterations, learning rate = {rate:.3f}, {acc:.4f}")
        if acc > best_acc:
            best_rate, best_acc = rate, acc
    print(f"\nBest learning rate: {best_rate:.3f} (accuracy: {best_acc:.4f})\n")

    print("Step 3: Fine-tuning with combinations around best parameters")
    print("-" * 64)
    for t in fine_tune_iterations(best_iterations, iterations):
        acc = score(t, best_rate)
        print(f"{t:3d} iterations, learning rate = {best_rate:.3f}, {acc:.4f}")
        if acc > best_acc:
            best_iterations, best_acc = t, acc

    print("\n=== Best MultiLR Configuration ===")
    print(f"  Iterations: {best_iterations}")
    print(f"  Learning Rate: {best_rate:.3f}")
    print(f"  Accuracy: {best_acc:.4f} ({best_acc * 100:.2f}%)")

    table = pd.Series(by_iterations, name="accuracy").to_frame()
    table.index.name = "iterations"
    maybe_plot_curves(args, table, "lr_tuning", "Iterations")
    return {"iterations": best_iterations, "learning_rate": best_rate, "accuracy": best_acc}


def to_signed_labels(dataset: DataSet) -> DataSet:
    """Relabel a two-class dataset to +1 (larger label) / -1 without touching the source."""
    labels = sorted(dataset.get_labels())
    if len(labels) != 2:
        raise PreconditionError(f"binary_lr needs exactly two classes, got {len(labels)}")
    signed = dataset.empty_like()
    for example in dataset.get_data():
        copy = example.copy()
        copy.set_label(1.0 if same_label(example.label, labels[1]) else -1.0)
        signed.add_data(copy)
    return signed


def run_binary_lr(args: argparse.Namespace, dataset: DataSet):
    """Binary LR: training-set accuracy plus repeated holdout for each pass count."""
    if dataset.get_labels() != {-1.0, 1.0}:
        print("Relabelling classes to -1/+1 for binary LR")
        dataset = to_signed_labels(dataset)

    iterations = parse_list(args.iterations)
    rows = {}
    for t in iterations:
        model = LRClassifier(learning_rate=args.lr, iterations=t, verbose=args.verbose)
        model.train(dataset)
        rows[t] = {
            "train": accuracy(model, dataset),
            "holdout": holdout_accuracy(
                lambda: LRClassifier(learning_rate=args.lr, iterations=t),
                dataset,
                repeats=args.repeats,
                random_state=args.random_state,
            ),
        }
        print(f"{t:3d} iterations: train {rows[t]['train']:.4f}, holdout {rows[t]['holdout']:.4f}")

    table = pd.DataFrame(rows).T
    table.index.name = "iterations"
    print_table("Binary LR accuracy", table)

    best = int(table["holdout"].idxmax())
    final = LRClassifier(learning_rate=args.lr, iterations=best).train(dataset)
    summary = evaluate(final, dataset)
    print(f"\nConfusion matrix on training data ({best} iterations):")
    print(summary["confusion_matrix"])
    if args.plot_dir is not None:
        args.plot_dir.mkdir(parents=True, exist_ok=True)
        load_plots().plot_confusion_matrix(
            summary["confusion_matrix"], args.plot_dir / "binary_lr_confusion.png", "Binary LR"
        )
    maybe_plot_curves(args, table, "binary_lr", "Iterations")
    return table


def main(args: argparse.Namespace | None = None):
    """Dispatch to the selected experiment."""
    args = args or build_arg_parser().parse_args()

    dataset = DataSet.load(args.data_path, args.format, label_column=args.label_column)
    describe_dataset(dataset, args.data_path)
    print()

    if args.experiment == "reductions_tree":
        return run_reductions_tree(args, dataset)
    if args.experiment == "reductions_lr":
        return run_reductions_lr(args, dataset)
    if args.experiment == "lr_tuning":
        return run_lr_tuning(args, dataset)
    return run_binary_lr(args, dataset)


if __name__ == "__main__":
    main()
