"""
Planetary transfer calculator
=============================

Interactive front end of the package. Every change of an input rebuilds
the parent, both planets and the transfer from scratch and redraws the
frame; nothing derived is kept between frames.

USAGE:
    planetary-transfer                            # Desktop window, Earth -> Mars
    planetary-transfer --origin 5.2 --target 1    # Jupiter's orbit -> Earth's orbit
    planetary-transfer --delta-v 4.5              # Non-Hohmann burn [km/s]
    planetary-transfer --summary                  # Print the transfer and exit
    planetary-transfer --browser                  # Plotly figure in the browser
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.widgets import CheckButtons, Slider, TextBox

from .bodies import Parent, Planet
from .config import config
from .controls import QuantityControl, distance_unit, mass_unit, velocity_unit
from .defaults import (
    SMA_MIN, SMA_MAX, MASS_MIN, MASS_MAX,
    DEFAULT_ORIGIN_SMA, DEFAULT_TARGET_SMA, DEFAULT_MASS,
    DEFAULT_VELOCITY, DEFAULT_HOHMANN,
)
from .plotting import (
    TransferPlot, Protractor, plot_bounds, plot_transfer, flight_time_text,
)
from .quantities import Quantity, Mass, Distance, Velocity
from .transfer import Transfer

logger = logging.getLogger(__name__)


def _clamp(quantity: Quantity, low: Quantity, high: Quantity) -> Quantity:
    if quantity.value < low.value:
        return low
    if quantity.value > high.value:
        return high
    return quantity


@dataclass
class Frame:
    """Everything drawn for one set of inputs."""
    transfer: Transfer
    transfer_plot: TransferPlot
    protractor: Protractor
    bounds: float
    flight_time: str


@dataclass
class TransferInputs:
    """
    The four inputs of the calculator and the Hohmann switch.

    ``velocity`` is the departure burn. While ``hohmann`` is on it is
    overwritten with the Hohmann burn on every frame; otherwise it is
    clamped into the transfer's allowed range.
    """
    origin_sma: Distance = DEFAULT_ORIGIN_SMA
    target_sma: Distance = DEFAULT_TARGET_SMA
    mass: Mass = DEFAULT_MASS
    velocity: Velocity = DEFAULT_VELOCITY
    hohmann: bool = DEFAULT_HOHMANN

    def build_transfer(self) -> Transfer:
        self.origin_sma = _clamp(self.origin_sma, SMA_MIN, SMA_MAX)
        self.target_sma = _clamp(self.target_sma, SMA_MIN, SMA_MAX)
        self.mass = _clamp(self.mass, MASS_MIN, MASS_MAX)

        parent = Parent(self.mass)
        transfer = Transfer(Planet(self.origin_sma, parent),
                            Planet(self.target_sma, parent))
        if self.hohmann:
            self.velocity = transfer.delta_v_hohmann()
        else:
            self.velocity = transfer.clamp_delta_v(self.velocity)
            transfer.set_delta_v(self.velocity)
        return transfer

    def frame(self) -> Frame:
        transfer = self.build_transfer()
        transfer_plot = TransferPlot(transfer)
        return Frame(
            transfer=transfer,
            transfer_plot=transfer_plot,
            protractor=transfer_plot.protractor(),
            bounds=plot_bounds(transfer),
            flight_time=flight_time_text(transfer),
        )


class TransferWindow:
    """
    Matplotlib desktop window of the calculator.

    Radii and mass are edited with logarithmic sliders, the burn with a
    linear slider that is inactive while the Hohmann box is checked. Each
    slider has a text box showing the value in a unit picked from its
    magnitude; typed values are parsed, clamped and applied on Enter.
    """
    _ROWS = ('origin', 'target', 'mass', 'velocity')
    _LABELS = {
        'origin': 'Origin sma',
        'target': 'Target sma',
        'mass': 'Parent mass',
        'velocity': 'Δv',
    }

    def __init__(self, inputs: Optional[TransferInputs] = None):
        self.inputs = inputs if inputs is not None else TransferInputs()
        self._active: Optional[str] = None
        self._syncing = False
        self.frame: Optional[Frame] = None

        self.fig = plt.figure(figsize=(15, 10), facecolor='black')
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title("Planetary transfer calculator")
        self.ax = self.fig.add_axes([0.05, 0.02, 0.9, 0.68])

        self.sliders = {}
        self.text_boxes = {}
        for i, row in enumerate(self._ROWS):
            y = 0.93 - i * 0.055
            slider_ax = self.fig.add_axes([0.12, y, 0.6, 0.03])
            text_ax = self.fig.add_axes([0.76, y, 0.2, 0.03])
            low, high = self._slider_range(row)
            self.sliders[row] = Slider(slider_ax, self._LABELS[row], low, high,
                                       valinit=low, color=config.DEFAULT_TRANSFER_COLOR)
            self.sliders[row].valtext.set_visible(False)
            self.text_boxes[row] = TextBox(text_ax, '')
            self.sliders[row].on_changed(lambda pos, row=row: self._on_slide(row, pos))
            self.text_boxes[row].on_submit(lambda text, row=row: self._on_submit(row, text))

        check_ax = self.fig.add_axes([0.02, 0.71, 0.1, 0.04])
        self.hohmann_box = CheckButtons(check_ax, ['Hohmann'], [self.inputs.hohmann])
        self.hohmann_box.on_clicked(self._on_hohmann)

        self.redraw()

    # ========== CONTROL MODELS ==========
    def _control(self, row: str, transfer: Optional[Transfer] = None) -> QuantityControl:
        if row == 'origin':
            return QuantityControl(self.inputs.origin_sma, SMA_MIN, SMA_MAX,
                                   distance_unit, log_scale=True)
        if row == 'target':
            return QuantityControl(self.inputs.target_sma, SMA_MIN, SMA_MAX,
                                   distance_unit, log_scale=True)
        if row == 'mass':
            return QuantityControl(self.inputs.mass, MASS_MIN, MASS_MAX,
                                   mass_unit, log_scale=True)
        if transfer is None:
            transfer = self.inputs.build_transfer()
        low, high = transfer.velocity_range()
        return QuantityControl(self.inputs.velocity, low, high, velocity_unit,
                               enabled=not self.inputs.hohmann)

    def _slider_range(self, row: str):
        # radii and mass slide in log10 of their canonical unit
        if row in ('origin', 'target'):
            return np.log10(SMA_MIN.m), np.log10(SMA_MAX.m)
        if row == 'mass':
            return np.log10(MASS_MIN.kg), np.log10(MASS_MAX.kg)
        low, high = sorted(v.mps for v in self.inputs.build_transfer().velocity_range())
        return low, high

    def _slider_position(self, row: str) -> float:
        if row == 'origin':
            return np.log10(self.inputs.origin_sma.m)
        if row == 'target':
            return np.log10(self.inputs.target_sma.m)
        if row == 'mass':
            return np.log10(self.inputs.mass.kg)
        return self.inputs.velocity.mps

    # ========== CALLBACKS ==========
    def _on_slide(self, row: str, position: float):
        if self._syncing:
            return
        if row == 'origin':
            self.inputs.origin_sma = Distance.from_meters(10**position)
        elif row == 'target':
            self.inputs.target_sma = Distance.from_meters(10**position)
        elif row == 'mass':
            self.inputs.mass = Mass.from_kg(10**position)
        elif not self.inputs.hohmann:
            self.inputs.velocity = Velocity.from_mps(position)
        self._active = row
        self.redraw()

    def _on_submit(self, row: str, text: str):
        if self._syncing:
            return
        quantity = self._control(row).commit(text)
        if row == 'origin':
            self.inputs.origin_sma = quantity
        elif row == 'target':
            self.inputs.target_sma = quantity
        elif row == 'mass':
            self.inputs.mass = quantity
        else:
            self.inputs.velocity = quantity
        self._active = row
        self.redraw()

    def _on_hohmann(self, label: str):
        self.inputs.hohmann = not self.inputs.hohmann
        logger.info("Hohmann %s", "on" if self.inputs.hohmann else "off")
        self._active = 'velocity'
        self.redraw()

    # ========== DRAWING ==========
    def redraw(self):
        self.frame = self.inputs.frame()
        if self._active in ('origin', 'target'):
            self.frame.transfer_plot.highlight(self._active)
            self.frame.transfer_plot.set_color(self._active, config.HIGHLIGHT_COLOR)
        elif self._active == 'velocity':
            self.frame.transfer_plot.highlight('transfer')

        self._draw_frame(self.frame)
        self._sync_controls(self.frame.transfer)
        self.fig.canvas.draw_idle()

    def _draw_frame(self, frame: Frame):
        ax = self.ax
        ax.clear()
        ax.set_facecolor('black')

        for curve in frame.transfer_plot.orbit_all():
            ax.plot(curve.x, curve.y, color=curve.color, linewidth=curve.width)
        for x, y in frame.protractor.lines():
            ax.plot(x, y, color=frame.protractor.color, linestyle='--', linewidth=2)
        label_x, label_y = frame.protractor.label_position()
        ax.text(label_x, label_y, frame.protractor.label(), color='white', fontsize=16)
        for marker in frame.transfer_plot.marker_all():
            ax.plot(marker.x, marker.y, 'o', markersize=8)
        ax.plot(0.0, 0.0, 'D', color='gold',
                markersize=frame.transfer_plot.parent_marker_size())

        ax.set_xlim(-frame.bounds, frame.bounds)
        ax.set_ylim(-frame.bounds, frame.bounds)
        ax.set_aspect('equal')
        ax.set_axis_off()
        ax.set_title(frame.flight_time, color='white')

    def _sync_controls(self, transfer: Transfer):
        self._syncing = True
        try:
            low, high = sorted(v.mps for v in transfer.velocity_range())
            velocity_slider = self.sliders['velocity']
            if low == high:
                high = low + 1.0
            velocity_slider.valmin, velocity_slider.valmax = low, high
            velocity_slider.ax.set_xlim(low, high)
            velocity_slider.set_active(not self.inputs.hohmann)

            for row in self._ROWS:
                self.sliders[row].set_val(self._slider_position(row))
                self.text_boxes[row].set_val(self._control(row, transfer).text)
        finally:
            self._syncing = False

    def show(self):
        plt.show()


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='planetary-transfer',
        description='Transfer between two circular orbits around a common parent.')
    parser.add_argument('--origin', type=float, default=DEFAULT_ORIGIN_SMA.au,
                        help='origin orbit radius [au] (default: %(default)s)')
    parser.add_argument('--target', type=float, default=DEFAULT_TARGET_SMA.au,
                        help='target orbit radius [au] (default: %(default)s)')
    parser.add_argument('--mass', type=float, default=DEFAULT_MASS.solar,
                        help='parent mass [solar masses] (default: %(default)s)')
    parser.add_argument('--delta-v', type=float, default=None,
                        help='departure burn [km/s]; omit for a Hohmann transfer')
    parser.add_argument('--summary', action='store_true',
                        help='print the transfer and exit')
    parser.add_argument('--browser', action='store_true',
                        help='render a Plotly figure in the browser')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    try:
        inputs = TransferInputs(
            origin_sma=Distance.from_au(args.origin),
            target_sma=Distance.from_au(args.target),
            mass=Mass.from_solar(args.mass),
            velocity=(Velocity.from_kps(args.delta_v)
                      if args.delta_v is not None else DEFAULT_VELOCITY),
            hohmann=args.delta_v is None,
        )
        frame = inputs.frame()
    except ValueError as e:
        logger.error("Invalid transfer: %s", e)
        return 2
    logger.info("Built transfer: %r", frame.transfer)

    if args.summary:
        print(frame.transfer)
        print(frame.flight_time)
        return 0

    if args.browser:
        import plotly.io as pio
        pio.renderers.default = 'browser'
        logger.info("Rendering Plotly figure")
        plot_transfer(frame.transfer).show()
        return 0

    logger.info("Opening calculator window")
    TransferWindow(inputs).show()
    return 0


if __name__ == '__main__':
    sys.exit(main())
