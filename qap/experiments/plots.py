"""Plotting functions for experiment results."""

import matplotlib.pyplot as plt
import pandas as pd
from pathlib import Path

from .metrics import summarize_metrics


def plot_gap_by_instance(results_df: pd.DataFrame, output_path: str = 'results/gap_by_instance.png'):
    """
    Create bar chart of the mean relative gap to the optimum per algorithm and instance.

    Args:
        results_df: DataFrame with columns: algorithm, instance_name, cost, optimal_cost, ...
        output_path: Path to save plot
    """
    summary = summarize_metrics(results_df)
    if summary['gap'].isna().all():
        print("No optimal costs known, skipping gap plot")
        return

    pivot = summary.pivot_table(values='gap', index='instance_name', columns='algorithm', aggfunc='mean')

    pivot.plot(kind='bar', figsize=(12, 6))
    plt.ylabel('Mean Relative Gap to Optimum')
    plt.xlabel('Instance')
    plt.title('Solution Quality by Algorithm and Instance')
    plt.legend(title='Algorithm')
    plt.xticks(rotation=45)
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def plot_gap_vs_time_limit(results_df: pd.DataFrame, output_path: str = 'results/gap_vs_time_limit.png'):
    """
    Plot the mean relative gap against the time limit, one line per algorithm.

    Args:
        results_df: DataFrame with columns: algorithm, time_limit, cost, optimal_cost
        output_path: Path to save plot
    """
    df = results_df.copy()
    for column in ('optimal_cost', 'time_limit'):
        df[column] = pd.to_numeric(df[column], errors='coerce')
    df = df.dropna(subset=['time_limit', 'optimal_cost'])
    if df.empty:
        print("No time-limited runs with known optimum to plot")
        return

    df['gap'] = (df['cost'] - df['optimal_cost']) / df['optimal_cost']
    df['time_limit_ms'] = df['time_limit'] / 1e6

    plt.figure(figsize=(10, 6))
    for algorithm, group in df.groupby('algorithm'):
        means = group.groupby('time_limit_ms')['gap'].mean()
        plt.plot(means.index, means.values, marker='o', label=algorithm)
    plt.xscale('log')
    plt.xlabel('Time Limit (ms)')
    plt.ylabel('Mean Relative Gap to Optimum')
    plt.title('Solution Quality vs. Time Limit')
    plt.legend(title='Algorithm')
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def create_all_plots(results_df: pd.DataFrame, output_dir: str = 'results'):
    """
    Create all plots from a results DataFrame.

    Args:
        results_df: DataFrame with the metrics columns plus ``algorithm``
        output_dir: Directory to save plots
    """
    if results_df is None or results_df.empty:
        print("No data to plot")
        return

    Path(output_dir).mkdir(exist_ok=True, parents=True)

    plt.figure(figsize=(10, 6))
    results_df.boxplot(column='cost', by='algorithm', ax=plt.gca())
    plt.ylabel('Cost')
    plt.title('Cost Comparison Across Algorithms')
    plt.suptitle('')  # Remove default title
    plt.xticks(rotation=45)
    plt.tight_layout()
    plt.savefig(f'{output_dir}/cost_comparison.png')
    plt.close()
    print(f"Saved plot to {output_dir}/cost_comparison.png")

    plt.figure(figsize=(10, 6))
    (results_df.groupby('algorithm')['duration'].mean() / 1e6).plot(kind='bar')
    plt.ylabel('Runtime (ms)')
    plt.title('Runtime Comparison')
    plt.xticks(rotation=45)
    plt.yscale('log')
    plt.tight_layout()
    plt.savefig(f'{output_dir}/runtime_comparison.png')
    plt.close()
    print(f"Saved plot to {output_dir}/runtime_comparison.png")

    plot_gap_by_instance(results_df, f'{output_dir}/gap_by_instance.png')
    if results_df['time_limit'].notna().any():
        plot_gap_vs_time_limit(results_df, f'{output_dir}/gap_vs_time_limit.png')
