"""Plotting helpers for demo runs."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np


def plot_horizontal_scatter(east_m: np.ndarray, north_m: np.ndarray, title: str = "Horizontal Fixes") -> None:
    plt.figure(figsize=(6, 6))
    plt.scatter(east_m, north_m, s=8)
    plt.axhline(0.0, color="k", linewidth=0.5)
    plt.axvline(0.0, color="k", linewidth=0.5)
    plt.xlabel("East error (m)")
    plt.ylabel("North error (m)")
    plt.axis("equal")
    plt.grid(True, linestyle="--", alpha=0.5)
    plt.title(title)
    plt.tight_layout()


def plot_dops(times_s: np.ndarray, dops: np.ndarray) -> None:
    """Plot PDOP/HDOP/VDOP/TDOP columns of ``dops`` against time."""

    plt.figure(figsize=(8, 4))
    for idx, label in enumerate(["PDOP", "HDOP", "VDOP", "TDOP"]):
        plt.plot(times_s, dops[:, idx], label=label)
    plt.xlabel("Time of week (s)")
    plt.ylabel("DOP")
    plt.legend()
    plt.grid(True, linestyle="--", alpha=0.5)
    plt.title("Dilution of Precision")
    plt.tight_layout()
