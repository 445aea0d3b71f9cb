"""Playback-speed filters: video timestamp scaling and audio tempo chains."""

from ..errors import ConfigurationError
from .contract import FilterResult, format_number, make_result

ATEMPO_MIN = 0.5
ATEMPO_MAX = 2.0


def decompose_tempo(ratio: float) -> list[float]:
    """Split a tempo ratio into stages the ``atempo`` filter accepts.

    ``atempo`` only takes factors within [0.5, 2.0]; larger or smaller
    ratios become a chain whose product equals ``ratio``::

        >>> decompose_tempo(5.0)
        [2.0, 2.0, 1.25]
        >>> decompose_tempo(0.2)
        [0.5, 0.5, 0.8]

    Raises:
        ConfigurationError: If ``ratio`` is not positive.
    """
    if ratio <= 0:
        raise ConfigurationError(f"Tempo ratio must be positive, got {ratio}")

    stages: list[float] = []
    remaining = float(ratio)
    while remaining > ATEMPO_MAX:
        stages.append(ATEMPO_MAX)
        remaining /= ATEMPO_MAX
    while remaining < ATEMPO_MIN:
        stages.append(ATEMPO_MIN)
        remaining /= ATEMPO_MIN
    stages.append(remaining)
    return stages


def atempo_chain(ratio: float) -> list[str]:
    return [f"atempo={format_number(stage)}" for stage in decompose_tempo(ratio)]


def setpts_for_speed(speed: float) -> str:
    """``setpts`` expression that plays video ``speed`` times faster."""
    if speed <= 0:
        raise ConfigurationError(f"Speed must be greater than 0, got {speed}")
    return f"setpts={format_number(1.0 / speed)}*PTS"


def build_speed_filters(
    speed: float,
    adjust_audio: bool = True,
    maintain_pitch: bool = False,
) -> FilterResult:
    """Filters for a speed change.

    Args:
        speed: Playback multiplier; 2.0 is twice as fast.
        adjust_audio: Retime audio with the video. When False the audio
            track is dropped, since it would no longer line up.
        maintain_pitch: Use ``rubberband`` instead of an ``atempo`` chain.
            Callers fall back to :func:`atempo_chain` if the binary lacks it.

    Raises:
        ConfigurationError: If ``speed`` is not positive.
    """
    vf = [setpts_for_speed(speed)]
    if not adjust_audio:
        return make_result(vf=vf, opts=["-an"])
    if maintain_pitch:
        return make_result(vf=vf, af=[f"rubberband=tempo={format_number(speed)}"])
    return make_result(vf=vf, af=atempo_chain(speed))
