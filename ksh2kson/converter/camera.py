"""
Camera graphs built from zoom and lane split modifiers.
"""
import dataclasses

from ..classes.base import InvalidValueError
from ..classes.chart import TimedChart
from ..classes.enums import CameraParam
from ..classes.kson import CameraInfo, GraphPoint
from ..utils import parse_finite

__all__ = [
    "build_camera",
]


def build_camera(chart: TimedChart) -> CameraInfo:
    """
    Collect camera changes into one graph per camera parameter.

    Two values on the same tick become one point that jumps from the first value to the last.

    :raises InvalidValueError: if a camera value is not a finite number.
    """
    graphs: dict[CameraParam, dict[int, GraphPoint]] = {}
    for timed_line in chart.iter_lines():
        for modifier in timed_line.modifiers:
            param = CameraParam.from_ksh_key(modifier.key)
            if param is None:
                continue
            try:
                value = parse_finite(modifier.value)
            except ValueError as e:
                raise InvalidValueError(f"invalid {modifier.key} value: {e}", modifier.line_no) from e
            graph = graphs.setdefault(param, {})
            # Modify existing point if it exists
            if timed_line.tick in graph:
                graph[timed_line.tick] = dataclasses.replace(graph[timed_line.tick], vf=value)
            else:
                graph[timed_line.tick] = GraphPoint(timed_line.tick, value)

    return CameraInfo(
        body=tuple((param, tuple(graphs[param].values())) for param in CameraParam if param in graphs)
    )
