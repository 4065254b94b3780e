import os

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from .duration import Duration

sns.set_theme(style="whitegrid", palette="muted")

COLUMNS = ["function", "cumulative_s", "mean_s", "median_s", "count"]


def format_seconds(value):
    return str(Duration.from_seconds(value))


def format_table(rows):
    """
    Render report rows as the fixed width Function/Cumulative/Mean/Median/Count table.
    """
    header = f"{'Function':>40} | {'Cumulative':>14} | {'Mean':>14} | {'Median':>14} | {'Count':>5}"
    lines = [header, "=" * len(header)]
    for row in rows:
        lines.append(
            f"{row.name:>40} | {str(row.cumulative):>14} | {format_seconds(row.mean):>14} | "
            f"{format_seconds(row.median):>14} | {row.count:>5}"
        )
    return "\n".join(lines)


def to_dataframe(rows):
    """
    Report rows as a DataFrame, durations in float seconds.
    """
    data_rows = [
        {
            "function": row.name,
            "cumulative_s": row.cumulative.total_seconds(),
            "mean_s": row.mean,
            "median_s": row.median,
            "count": row.count,
        }
        for row in rows
    ]
    if not data_rows:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(data_rows, columns=COLUMNS)


def write_csv(df: pd.DataFrame, outdir, filename="func-overview.csv"):
    os.makedirs(outdir, exist_ok=True)
    path = os.path.join(outdir, filename)
    df.to_csv(path, index=False)
    return path


def plot_top_functions(df: pd.DataFrame, outdir, top_n: int = 20):
    """
    Plots the cumulative time of the top N functions.

    This answers the question: "Where is the kernel spending the most time?"
    Returns the paths of the written images (none for an empty report).
    """
    if df.empty:
        return []

    subset = df.sort_values(by="cumulative_s", ascending=False).head(top_n)
    os.makedirs(outdir, exist_ok=True)
    plt.figure(figsize=(12, max(4, 0.4 * len(subset))))
    sns.barplot(data=subset, y="function", x="cumulative_s", hue="function", palette="viridis", legend=False)
    plt.title(f"Top {len(subset)} Functions by Cumulative Time")
    plt.xlabel("Cumulative Time (s)")
    plt.ylabel("Function")
    plt.tight_layout()

    paths = []
    for ext in ("svg", "png"):
        path = os.path.join(outdir, f"func-overview-top-{top_n}.{ext}")
        plt.savefig(path)
        paths.append(path)
    plt.close()
    return paths
