"""Return contract for MediaFX filter builders.

Every builder in :mod:`core.filters` returns a :class:`FilterResult`
so operations can hand the pieces to :class:`CommandBuilder` without
knowing which builder produced them.  ``FilterResult`` supports tuple
unpacking (``vf, af, opts, fc, io = result``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..executor.command_builder import FilterGraph


@dataclass(slots=True)
class FilterResult:
    """Structured return value from any filter builder.

    Fields
    ------
    video_filters : list[str]
        Video filter expressions for ``-vf`` (e.g. ``["setpts=0.5*PTS"]``).
    audio_filters : list[str]
        Audio filter expressions for ``-af`` (e.g. ``["atempo=2"]``).
    output_options : list[str]
        Raw output CLI flags (e.g. ``["-map", "0:v", "-c:v", "copy"]``).
    filter_graph : FilterGraph | None
        Labelled graph for ``-filter_complex``; validated on serialization.
    input_options : list[str]
        Raw input CLI flags placed before ``-i`` of the primary input.
    """

    video_filters: list[str] = field(default_factory=list)
    audio_filters: list[str] = field(default_factory=list)
    output_options: list[str] = field(default_factory=list)
    filter_graph: Optional[FilterGraph] = None
    input_options: list[str] = field(default_factory=list)

    @property
    def filter_complex(self) -> str:
        return self.filter_graph.to_string() if self.filter_graph else ""

    def __iter__(self) -> Iterator:
        return iter((
            self.video_filters,
            self.audio_filters,
            self.output_options,
            self.filter_complex,
            self.input_options,
        ))


def make_result(
    vf: list[str] | None = None,
    af: list[str] | None = None,
    opts: list[str] | None = None,
    graph: FilterGraph | None = None,
    io: list[str] | None = None,
) -> FilterResult:
    """Convenience constructor.

    Usage::

        return make_result(vf=["setpts=0.5*PTS"], af=["atempo=2"])
        return make_result(graph=graph, opts=["-map", "[vout]"])
    """
    return FilterResult(
        video_filters=vf or [],
        audio_filters=af or [],
        output_options=opts or [],
        filter_graph=graph,
        input_options=io or [],
    )


def format_number(value: float) -> str:
    """Render a float compactly for filter arguments (``2.0`` -> ``"2"``)."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"
