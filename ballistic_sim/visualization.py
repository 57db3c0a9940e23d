"""
Visualization
=============
Plots for a single shot:
  1. Trajectory — height and drift against downrange distance, with the
     target outline on the target plane
  2. Air density against height for several humidities
"""

import os
from typing import Optional, Sequence

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .atmosphere import Environment, density_profile
from .integrator import TrajectoryResult
from .target import Target


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Trajectory
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(result: TrajectoryResult, target: Optional[Target] = None,
                    save_path: str = None) -> plt.Figure:
    """Side view (height) and top view (drift) of one trajectory."""
    if result.x.size == 0:
        raise ValueError("Trajectory was simulated without history")

    fig, axes = plt.subplots(2, 1, figsize=(12, 8), sharex=True)
    _apply_dark_style(fig, axes)
    crossing = result.crossing()

    ax = axes[0]
    ax.plot(result.x, result.z * 100, color=STYLE['accent_colors'][0], linewidth=2,
            label='Trajectory')
    ax.axhline(0.0, color=STYLE['grid_color'], linestyle='--', linewidth=1)
    idx_max = int(np.argmax(result.z))
    ax.plot(result.x[idx_max], result.z[idx_max] * 100, '^',
            color='#ffeb3b', markersize=10, label='Apex', zorder=5)
    ax.plot(crossing.position.x, crossing.position.z * 100, 'x',
            color='#ff5252', markersize=12, markeredgewidth=3,
            label='Impact', zorder=5)
    ax.set_ylabel('Height (cm)', fontsize=12)
    ax.set_title(f'Trajectory — {result.profile.name} '
                 f'({result.method.upper()}, v₀={result.profile.muzzle_velocity:.0f} m/s, '
                 f'θ={result.launch_angle * 1000:.2f} mrad)',
                 fontsize=13, fontweight='bold')

    ax_top = axes[1]
    ax_top.plot(result.x, result.y * 100, color=STYLE['accent_colors'][1], linewidth=2)
    ax_top.plot(crossing.position.x, crossing.position.y * 100, 'x',
                color='#ff5252', markersize=12, markeredgewidth=3, zorder=5)
    ax_top.set_xlabel('Downrange (m)', fontsize=12)
    ax_top.set_ylabel('Drift (cm)', fontsize=12)

    if target is not None:
        ax.add_patch(Rectangle(
            (target.range - 0.005 * max(target.range, 1.0),
             (target.altitude_offset - target.height / 2) * 100),
            0.01 * max(target.range, 1.0), target.height * 100,
            color='#00e676', alpha=0.5, label='Target'))
        ax_top.add_patch(Rectangle(
            (target.range - 0.005 * max(target.range, 1.0), -target.width / 2 * 100),
            0.01 * max(target.range, 1.0), target.width * 100,
            color='#00e676', alpha=0.5))

    ax.legend(loc='upper right', fontsize=10,
              facecolor='#1a1a1a', edgecolor='#444', labelcolor=STYLE['text_color'])
    ax.set_xlim(left=0)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Air Density
# ══════════════════════════════════════════════════════════════════════════

def plot_atmosphere(environment: Environment, max_height: float = 3000.0,
                    humidities: Sequence[float] = (0.0, 0.5, 1.0),
                    save_path: str = None) -> plt.Figure:
    """Pressure and air density above the shooter for several humidities."""
    heights = np.linspace(0.0, max_height, 300)

    fig, axes = plt.subplots(1, 2, figsize=(14, 7), sharey=True)
    _apply_dark_style(fig, axes)

    for color, rh in zip(STYLE['accent_colors'], humidities):
        env = Environment(humidity=rh, temperature=environment.temperature,
                          altitude=environment.altitude, wind=environment.wind)
        profile = density_profile(env, heights)
        axes[1].plot(profile['density'], heights, color=color, linewidth=2,
                     label=f'RH {rh:.0%}')
        if rh == humidities[0]:
            axes[0].plot(profile['pressure'] / 1000, heights, color=color, linewidth=2)

    axes[0].set_xlabel('Pressure (kPa)', fontsize=10)
    axes[1].set_xlabel('Density (kg/m³)', fontsize=10)
    axes[0].set_ylabel('Height above shooter (m)', fontsize=12)
    axes[1].legend(fontsize=10, facecolor='#1a1a1a', edgecolor='#444',
                   labelcolor=STYLE['text_color'])
    fig.suptitle(f'Atmosphere at {environment.temperature:.1f} °C, '
                 f'{environment.altitude:.0f} m ASL',
                 fontsize=14, fontweight='bold', color=STYLE['text_color'])
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig
