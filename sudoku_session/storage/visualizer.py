"""Charts of recorded game statistics."""

from __future__ import annotations
import os
from typing import List

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .statistics import GameRecord


class StatsVisualizer:
    """
    Chart generator for recorded games.

    Creates a completion-time chart and an outcome breakdown by difficulty.
    """

    OUTCOME_COLORS = {
        "Completed": "#2ecc71",  # Green
        "Lost": "#e74c3c",       # Red
        "Abandoned": "#95a5a6",  # Grey
    }

    def __init__(self, records: List[GameRecord], output_dir: str = "stats"):
        """
        Initialize the visualizer.

        Args:
            records: Recorded games.
            output_dir: Directory to save generated charts.
        """
        self.records = records
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        plt.style.use('seaborn-v0_8-whitegrid')
        sns.set_palette("husl")

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [self.plot_completion_times(), self.plot_outcomes()]

    def plot_completion_times(self) -> str:
        """Line chart of time spent on each completed game, oldest first."""
        fig, ax = plt.subplots(figsize=(10, 6))

        completed = sorted((r for r in self.records if r.completed),
                           key=lambda r: r.completed_at)
        minutes = [r.time_spent / 60 for r in completed]
        games = np.arange(1, len(completed) + 1)

        if completed:
            ax.plot(games, minutes, marker='o', color=self.OUTCOME_COLORS["Completed"])
            ax.axhline(np.mean(minutes), linestyle='--', color='black', linewidth=1,
                       label=f'Average {np.mean(minutes):.1f} min')
            ax.legend()
        else:
            ax.text(0.5, 0.5, 'No completed games yet', ha='center', va='center',
                    transform=ax.transAxes, fontsize=12)

        ax.set_xlabel('Completed game', fontsize=12)
        ax.set_ylabel('Time (minutes)', fontsize=12)
        ax.set_title('Completion Time per Game', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)

        plt.tight_layout()
        path = os.path.join(self.output_dir, "completion_times.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path

    def plot_outcomes(self) -> str:
        """Grouped bar chart of game outcomes per difficulty."""
        fig, ax = plt.subplots(figsize=(10, 6))

        difficulties = sorted({r.difficulty or "Unknown" for r in self.records}) or ["Unknown"]
        outcomes = list(self.OUTCOME_COLORS)
        x = np.arange(len(difficulties))
        width = 0.8 / len(outcomes)

        for i, outcome in enumerate(outcomes):
            counts = [
                sum(1 for r in self.records
                    if (r.difficulty or "Unknown") == diff and _outcome(r) == outcome)
                for diff in difficulties
            ]
            ax.bar(x + i * width - 0.4 + width / 2, counts, width, label=outcome,
                   color=self.OUTCOME_COLORS[outcome], edgecolor='black', linewidth=0.5)

        ax.set_xlabel('Difficulty', fontsize=12)
        ax.set_ylabel('Games', fontsize=12)
        ax.set_title('Game Outcomes by Difficulty', fontsize=14, fontweight='bold')
        ax.set_xticks(x)
        ax.set_xticklabels(difficulties)
        ax.legend()

        plt.tight_layout()
        path = os.path.join(self.output_dir, "outcomes.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path


def _outcome(record: GameRecord) -> str:
    if record.completed:
        return "Completed"
    if record.lost:
        return "Lost"
    return "Abandoned"
