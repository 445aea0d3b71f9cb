"""FFMPEG command builder for constructing filter chains and labelled graphs."""

import re
import shlex
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional
from pathlib import Path

from ..errors import FilterGraphError

# Pads like ``0:v`` or ``1:a:0`` refer to input streams rather than graph labels
_STREAM_SPECIFIER = re.compile(r"^\d+(:[vas](:\d+)?)?$")

DEFAULT_GLOBAL_OPTIONS = ("-hide_banner", "-loglevel", "error")


def is_stream_specifier(label: str) -> bool:
    return bool(_STREAM_SPECIFIER.match(label))


@dataclass
class Filter:
    """Represents a single FFMPEG filter."""
    name: str
    params: dict[str, str | int | float] = field(default_factory=dict)
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)

    def to_string(self) -> str:
        """Convert filter to FFMPEG filter string."""
        parts = []

        for inp in self.inputs:
            parts.append(f"[{inp}]")

        if self.params:
            param_str = ":".join(
                f"{k}={v}" if k else str(v)
                for k, v in self.params.items()
            )
            parts.append(f"{self.name}={param_str}")
        else:
            parts.append(self.name)

        for out in self.outputs:
            parts.append(f"[{out}]")

        return "".join(parts)


@dataclass
class FilterChain:
    """A chain of filters connected in sequence."""
    filters: list[Filter] = field(default_factory=list)

    def add(self, filter_obj: Filter) -> "FilterChain":
        """Add a filter to the chain."""
        self.filters.append(filter_obj)
        return self

    def add_filter(
        self,
        name: str,
        params: Optional[dict] = None,
        inputs: Optional[list[str]] = None,
        outputs: Optional[list[str]] = None,
    ) -> "FilterChain":
        """Add a filter by parameters."""
        self.filters.append(Filter(
            name=name,
            params=params or {},
            inputs=inputs or [],
            outputs=outputs or [],
        ))
        return self

    def extend(self, filters: Iterable["str | Filter"]) -> "FilterChain":
        """Add several filters; plain strings are used verbatim."""
        for f in filters:
            if isinstance(f, str):
                self.add_filter(f)
            else:
                self.add(f)
        return self

    @property
    def input_labels(self) -> list[str]:
        return [label for f in self.filters for label in f.inputs]

    @property
    def output_labels(self) -> list[str]:
        return [label for f in self.filters for label in f.outputs]

    def to_string(self) -> str:
        """Convert filter chain to FFMPEG filter string."""
        if not self.filters:
            return ""
        return ",".join(f.to_string() for f in self.filters)


@dataclass
class FilterGraph:
    """A ``-filter_complex`` graph made of labelled chains.

    Each label must be produced by exactly one chain and consumed by
    exactly one chain, unless it is exposed with :meth:`expose` for
    ``-map``. Input stream specifiers (``0:v``, ``1:a``) are consumed but
    never produced. :meth:`to_string` validates before serializing.
    """
    chains: list[FilterChain] = field(default_factory=list)
    exposed: list[str] = field(default_factory=list)

    def add_chain(
        self,
        inputs: Iterable[str],
        filters: Iterable[str | Filter],
        outputs: Iterable[str],
    ) -> "FilterGraph":
        """Append ``[inputs]f1,f2,...[outputs]``."""
        chain = FilterChain().extend(filters)
        if not chain.filters:
            raise FilterGraphError("A filter chain needs at least one filter")
        chain.filters[0].inputs = list(inputs) + chain.filters[0].inputs
        chain.filters[-1].outputs = chain.filters[-1].outputs + list(outputs)
        self.chains.append(chain)
        return self

    def expose(self, *labels: str) -> "FilterGraph":
        """Mark labels as graph outputs (consumed by ``-map``)."""
        self.exposed.extend(labels)
        return self

    def map_args(self) -> list[str]:
        """``-map`` arguments for every exposed label."""
        args: list[str] = []
        for label in self.exposed:
            args.extend(["-map", f"[{label}]"])
        return args

    def validate(self) -> None:
        """Check pad-label discipline.

        Raises:
            FilterGraphError: If a label is produced or consumed more than
                once, consumed without being produced, or left dangling.
        """
        if not self.chains:
            raise FilterGraphError("Filter graph is empty")

        produced = Counter(label for c in self.chains for label in c.output_labels)
        consumed = Counter(label for c in self.chains for label in c.input_labels)
        consumed.update(self.exposed)

        for label, count in produced.items():
            if count > 1:
                raise FilterGraphError(f"Pad [{label}] is produced {count} times")
            if is_stream_specifier(label):
                raise FilterGraphError(f"Pad [{label}] shadows an input stream specifier")
        for label, count in consumed.items():
            if count > 1:
                raise FilterGraphError(f"Pad [{label}] is consumed {count} times")
            if label not in produced and not is_stream_specifier(label):
                raise FilterGraphError(f"Pad [{label}] is consumed but never produced")
        for label in produced:
            if label not in consumed:
                raise FilterGraphError(f"Pad [{label}] is produced but never consumed")

    def to_string(self) -> str:
        self.validate()
        return ";".join(chain.to_string() for chain in self.chains)


@dataclass
class FFMPEGCommand:
    """Represents a complete FFMPEG command."""
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)
    input_options: list[list[str]] = field(default_factory=list)
    output_options: list[str] = field(default_factory=list)
    video_filters: FilterChain = field(default_factory=FilterChain)
    audio_filters: FilterChain = field(default_factory=FilterChain)
    complex_filter: Optional[FilterGraph | str] = None
    global_options: list[str] = field(default_factory=lambda: list(DEFAULT_GLOBAL_OPTIONS))
    overwrite: bool = True

    def to_args(self) -> list[str]:
        """Convert command to list of arguments for subprocess."""
        args = ["ffmpeg"]

        if self.overwrite:
            args.append("-y")
        args.extend(self.global_options)

        # Inputs with their options
        for index, input_path in enumerate(self.inputs):
            if index < len(self.input_options):
                args.extend(self.input_options[index])
            args.extend(["-i", input_path])

        if self.complex_filter:
            graph = self.complex_filter
            if isinstance(graph, FilterGraph):
                graph = graph.to_string()
            args.extend(["-filter_complex", graph])
        else:
            vf = self.video_filters.to_string()
            if vf:
                args.extend(["-vf", vf])

            af = self.audio_filters.to_string()
            if af:
                args.extend(["-af", af])

        args.extend(self.output_options)
        args.extend(self.outputs)

        return args

    def to_string(self) -> str:
        """Convert command to shell string."""
        return " ".join(shlex.quote(arg) for arg in self.to_args())


class CommandBuilder:
    """Builder for constructing FFMPEG commands."""

    def __init__(self):
        self._command = FFMPEGCommand()

    @property
    def input_count(self) -> int:
        return len(self._command.inputs)

    def input(
        self,
        path: str | Path,
        options: Optional[list[str]] = None,
    ) -> "CommandBuilder":
        """Add an input file (or lavfi source) with its pre-``-i`` options."""
        self._command.inputs.append(str(path))
        self._command.input_options.append(list(options or []))
        return self

    def add_input_options(self, index: int, options: list[str]) -> "CommandBuilder":
        """Add options to an existing input, addressed by position."""
        self._command.input_options[index].extend(options)
        return self

    def output(self, path: str | Path) -> "CommandBuilder":
        """Set output file."""
        self._command.outputs.append(str(path))
        return self

    def output_options(self, *options: str) -> "CommandBuilder":
        """Add output options."""
        self._command.output_options.extend(options)
        return self

    def video_codec(self, codec: str) -> "CommandBuilder":
        """Set the video codec."""
        self._command.output_options.extend(["-c:v", codec])
        return self

    def audio_codec(self, codec: str) -> "CommandBuilder":
        """Set the audio codec."""
        self._command.output_options.extend(["-c:a", codec])
        return self

    def no_audio(self) -> "CommandBuilder":
        """Remove audio from output."""
        self._command.output_options.append("-an")
        return self

    def no_video(self) -> "CommandBuilder":
        """Remove video from output."""
        self._command.output_options.append("-vn")
        return self

    def vf(self, *filters: str | Filter) -> "CommandBuilder":
        """Add video filters."""
        self._command.video_filters.extend(filters)
        return self

    def af(self, *filters: str | Filter) -> "CommandBuilder":
        """Add audio filters."""
        self._command.audio_filters.extend(filters)
        return self

    def complex_filter(self, filter_graph: FilterGraph | str) -> "CommandBuilder":
        """Set complex filtergraph."""
        self._command.complex_filter = filter_graph
        return self

    def trim(
        self,
        start: Optional[float] = None,
        end: Optional[float] = None,
        duration: Optional[float] = None,
    ) -> "CommandBuilder":
        """Add trim/seek output options."""
        if start is not None:
            self._command.output_options.extend(["-ss", str(start)])
        if end is not None:
            self._command.output_options.extend(["-to", str(end)])
        if duration is not None:
            self._command.output_options.extend(["-t", str(duration)])
        return self

    def build(self) -> FFMPEGCommand:
        """Build and return the command."""
        return self._command
