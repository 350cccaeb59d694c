'''Plot geometry of a transfer and its Plotly rendering
Orbit curves, position markers and the phase angle protractor are computed
as plain numpy arrays [m] so any backend can draw them'''

import numpy as np
import plotly.graph_objects as go
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import config
from .transfer import Transfer
from .utils import round_to


# ========== GEOMETRY ==========
def conic_points(sma: float, eccentricity: float, start: float = 0.0,
                 end: float = 2 * np.pi,
                 n_points: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample a conic section around the focus at the origin.

    Parameters
    ----------
    sma : float
        Semi-major axis [m], negative for hyperbolas
    eccentricity : float
        Signed eccentricity, 0 for circles
    start, end : float, optional
        True anomaly range [rad] (default: full revolution)
    n_points : int, optional
        Number of samples (default: config.DEFAULT_PLOT_POINTS + 1)

    Returns
    -------
    x, y : np.ndarray
        Sample coordinates [m]
    """
    if n_points is None:
        n_points = config.DEFAULT_PLOT_POINTS + 1
    theta = np.linspace(start, end, n_points)
    radius = sma * (1 - eccentricity**2) / (1 + eccentricity * np.cos(theta))
    return radius * np.cos(theta), radius * np.sin(theta)


def marker_point(radius: float, angle: float) -> Tuple[float, float]:
    """Position [m] at ``angle`` on a circle of ``radius``"""
    return float(radius * np.cos(angle)), float(radius * np.sin(angle))


def plot_bounds(transfer: Transfer) -> float:
    """Half-width [m] of a view that contains both orbits"""
    return max(transfer.origin.sma.m, transfer.target.sma.m) * 1.1


@dataclass
class Curve:
    """A polyline with its drawing style."""
    name: str
    x: np.ndarray
    y: np.ndarray
    color: str
    width: float


@dataclass
class Marker:
    """A body position."""
    name: str
    x: float
    y: float


class Protractor:
    """
    Angle annotation between the +x axis and a ray at ``angle``.

    Parameters
    ----------
    angle : float
        Measured angle [rad]
    length : float
        Length of both rays [m]
    color : str, optional
        Line color (default: config.PROTRACTOR_COLOR)
    """
    _PROTRUSION = 0.95   # arc radius relative to ray length

    def __init__(self, angle: float, length: float, color: Optional[str] = None):
        self.angle = float(angle)
        self.length = float(length)
        self.color = color if color is not None else config.PROTRACTOR_COLOR

    def x_axis(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.array([0.0, self.length]), np.array([0.0, 0.0])

    def hypotenuse(self) -> Tuple[np.ndarray, np.ndarray]:
        return (np.array([0.0, self.length * np.cos(self.angle)]),
                np.array([0.0, self.length * np.sin(self.angle)]))

    def arc(self, n_points: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
        if n_points is None:
            n_points = config.DEFAULT_PLOT_POINTS + 1
        theta = np.linspace(0.0, self.angle, n_points)
        radius = self.length * self._PROTRUSION
        return radius * np.cos(theta), radius * np.sin(theta)

    def label_position(self) -> Tuple[float, float]:
        # small angles put the label just outside the arc
        radius = self.length * self._PROTRUSION * 0.9
        if abs(self.angle) > 0.2:
            text_angle = self.angle / 2
        else:
            text_angle = self.angle + 0.15 * np.sign(self.angle)
        return float(radius * np.cos(text_angle)), float(radius * np.sin(text_angle))

    def label(self) -> str:
        return f"{round_to(np.degrees(self.angle), 2)} °"

    def lines(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        return [self.hypotenuse(), self.x_axis(), self.arc()]


class TransferPlot:
    """
    Drawable state of one transfer frame.

    Holds the colors and widths of the three orbits so that the controls
    can highlight the orbit being edited.
    """
    _ORBITS = ('origin', 'target', 'transfer')

    def __init__(self, transfer: Transfer, color: Optional[str] = None):
        self.transfer = transfer
        orbit_color = color if color is not None else config.DEFAULT_ORBIT_COLOR
        self.colors = {
            'origin': orbit_color,
            'target': orbit_color,
            'transfer': config.DEFAULT_TRANSFER_COLOR,
        }
        self.widths = {name: config.DEFAULT_LINE_WIDTH for name in self._ORBITS}

    def set_color(self, orbit: str, color: str):
        self._check_orbit(orbit)
        self.colors[orbit] = color

    def highlight(self, orbit: str):
        self._check_orbit(orbit)
        self.widths[orbit] = config.HIGHLIGHT_LINE_WIDTH

    def orbit_origin(self, n_points: Optional[int] = None) -> Curve:
        x, y = conic_points(self.transfer.origin.sma.m, 0.0, n_points=n_points)
        return Curve('origin', x, y, self.colors['origin'], self.widths['origin'])

    def orbit_target(self, n_points: Optional[int] = None) -> Curve:
        x, y = conic_points(self.transfer.target.sma.m, 0.0, n_points=n_points)
        return Curve('target', x, y, self.colors['target'], self.widths['target'])

    def orbit_transfer(self, n_points: Optional[int] = None) -> Curve:
        x, y = conic_points(self.transfer.sma().m, self.transfer.eccentricity(),
                            self.transfer.origin_true_anomaly_departure(),
                            self.transfer.target_true_anomaly_arrival(),
                            n_points=n_points)
        return Curve('transfer', x, y, self.colors['transfer'], self.widths['transfer'])

    def orbit_all(self, n_points: Optional[int] = None) -> List[Curve]:
        return [self.orbit_origin(n_points), self.orbit_target(n_points),
                self.orbit_transfer(n_points)]

    def marker_origin(self) -> List[Marker]:
        r = self.transfer.origin.sma.m
        return [
            Marker('origin at departure',
                   *marker_point(r, self.transfer.origin_true_anomaly_departure())),
            Marker('origin at arrival',
                   *marker_point(r, self.transfer.origin_true_anomaly_arrival())),
        ]

    def marker_target(self) -> List[Marker]:
        r = self.transfer.target.sma.m
        return [
            Marker('target at departure',
                   *marker_point(r, self.transfer.target_true_anomaly_departure())),
            Marker('target at arrival',
                   *marker_point(r, self.transfer.target_true_anomaly_arrival())),
        ]

    def marker_all(self) -> List[Marker]:
        return self.marker_origin() + self.marker_target()

    def protractor(self, color: Optional[str] = None) -> Protractor:
        """Phase angle annotation reaching just inside the view"""
        return Protractor(self.transfer.phase(), plot_bounds(self.transfer) * 0.96, color)

    def parent_marker_size(self) -> float:
        """Parent marker size, smaller when the two orbits are far apart"""
        r1 = self.transfer.origin.sma.m
        r2 = self.transfer.target.sma.m
        return min(r1 / r2, r2 / r1) * 20.0

    def _check_orbit(self, orbit: str):
        if orbit not in self._ORBITS:
            raise ValueError(f"Unknown orbit '{orbit}'. Use: {list(self._ORBITS)}")


def flight_time_text(transfer: Transfer) -> str:
    """Text report of the time of flight in its largest sensible unit"""
    flight = transfer.time_of_flight().smallest_unit().round_to(2)
    return f"Transfer will take: {flight}"


# ========== PLOTLY ==========
def plot_transfer(transfer: Transfer, n_points: Optional[int] = None,
                  transfer_plot: Optional[TransferPlot] = None) -> go.Figure:
    """
    Create a 2D plot of both orbits, the transfer arc and the phase angle.

    Parameters:
        transfer: Transfer to draw
        n_points: Samples per orbit (default: config.DEFAULT_PLOT_POINTS + 1)
        transfer_plot: Styling state to draw with (default: fresh TransferPlot)

    Returns:
        Plotly Figure object
    """
    if transfer_plot is None:
        transfer_plot = TransferPlot(transfer)

    fig = go.Figure()

    for curve in transfer_plot.orbit_all(n_points):
        fig.add_trace(go.Scatter(
            x=curve.x, y=curve.y,
            mode='lines',
            line=dict(color=curve.color, width=curve.width),
            name=curve.name.capitalize(),
            hovertemplate='x: %{x:.4g} m<br>y: %{y:.4g} m<extra></extra>'
        ))

    protractor = transfer_plot.protractor()
    for x, y in protractor.lines():
        fig.add_trace(go.Scatter(
            x=x, y=y,
            mode='lines',
            line=dict(color=protractor.color, width=2, dash='dash'),
            showlegend=False,
            hoverinfo='skip'
        ))
    label_x, label_y = protractor.label_position()
    fig.add_annotation(x=label_x, y=label_y, text=protractor.label(),
                       showarrow=False, font=dict(size=18))

    markers = transfer_plot.marker_all()
    fig.add_trace(go.Scatter(
        x=[m.x for m in markers], y=[m.y for m in markers],
        mode='markers',
        marker=dict(size=10),
        text=[m.name for m in markers],
        name='Bodies',
        hovertemplate='%{text}<extra></extra>'
    ))
    fig.add_trace(go.Scatter(
        x=[0.0], y=[0.0],
        mode='markers',
        marker=dict(symbol='diamond', size=transfer_plot.parent_marker_size()),
        name='Parent',
        hoverinfo='name'
    ))

    bounds = plot_bounds(transfer)
    fig.update_layout(
        title=flight_time_text(transfer),
        xaxis=dict(visible=False, range=[-bounds, bounds]),
        yaxis=dict(visible=False, range=[-bounds, bounds],
                   scaleanchor='x', scaleratio=1),
        template='plotly_dark',
        showlegend=True
    )
    return fig


def add_to_plot(fig: go.Figure, transfer: Transfer,
                n_points: Optional[int] = None, color: Optional[str] = None,
                name: Optional[str] = None, **kwargs) -> go.Figure:
    """
    Add the arc of a transfer to an existing Plotly figure.

    Parameters:
        fig: Existing Plotly Figure object
        transfer: Transfer whose arc is drawn
        n_points: Samples of the arc (default: config.DEFAULT_PLOT_POINTS + 1)
        color: Line color (default: config.DEFAULT_TRANSFER_COLOR)
        name: Legend name (default: 'Transfer N')
        **kwargs: Additional arguments passed to Scatter

    Returns:
        Updated Plotly Figure object (same object, modified in place)
    """
    curve = TransferPlot(transfer).orbit_transfer(n_points)
    if color is None:
        color = curve.color
    if name is None:
        n_existing = sum(1 for trace in fig.data
                         if isinstance(trace, go.Scatter) and trace.name
                         and trace.name.startswith('Transfer'))
        name = f'Transfer {n_existing + 1}'

    fig.add_trace(go.Scatter(
        x=curve.x, y=curve.y,
        mode='lines',
        line=dict(color=color, width=curve.width),
        name=name,
        hovertemplate='x: %{x:.4g} m<br>y: %{y:.4g} m<extra></extra>',
        **kwargs
    ))
    return fig
