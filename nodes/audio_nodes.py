"""Audio nodes: extract a track, mix a track into a video."""

from ..core.filters.audio_mix import MATCH_LENGTH_MODES, MixPlan
from ..core.operations import audio as ops
from ._base import (
    AUDIO_CODECS,
    AUDIO_FORMATS,
    CATEGORY,
    CONTINUE_ON_FAIL,
    publish,
    resolve,
    run_node,
    source_input,
)


class ExtractAudioNode:
    """Save the audio track of a video as an audio file."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "video": source_input("Video file path or URL."),
                "audio_format": (AUDIO_FORMATS, {"default": "mp3"}),
            },
            "optional": {
                "audio_codec": (AUDIO_CODECS, {
                    "default": "copy",
                    "tooltip": "'copy' keeps the original encoding; the format must support it.",
                }),
                "audio_bitrate": ("STRING", {"default": "192k"}),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("audio_path", "error")
    FUNCTION = "extract"
    CATEGORY = CATEGORY

    async def extract(
        self,
        video: str,
        audio_format: str = "mp3",
        audio_codec: str = "copy",
        audio_bitrate: str = "192k",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with await resolve(ctx, [video]) as sources:
                output = await ops.extract_audio(
                    ctx, sources.paths[0], audio_format, audio_codec, audio_bitrate
                )
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Extract Audio")


class MixAudioNode:
    """Mix a second audio source into a video's soundtrack."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "video": source_input("Video file path or URL."),
                "audio": source_input("Audio (or video with sound) to mix in."),
                "video_volume": ("FLOAT", {"default": 1.0, "min": 0.0, "max": 4.0, "step": 0.05}),
                "audio_volume": ("FLOAT", {"default": 1.0, "min": 0.0, "max": 4.0, "step": 0.05}),
                "match_length": (list(MATCH_LENGTH_MODES), {
                    "default": "first",
                    "tooltip": (
                        "shortest/longest/first: amix duration policy. "
                        "audio: loop or trim the video to the audio length. "
                        "audio-speed: retime the video to the audio length."
                    ),
                }),
            },
            "optional": {
                "partial": ("BOOLEAN", {
                    "default": False,
                    "tooltip": "Insert the audio only between start_time and start_time + duration.",
                }),
                "start_time": ("FLOAT", {"default": 0.0, "min": 0.0, "step": 0.1}),
                "duration": ("FLOAT", {
                    "default": 0.0, "min": 0.0, "step": 0.1,
                    "tooltip": "0 uses the audio's own length.",
                }),
                "loop": ("BOOLEAN", {"default": False}),
                "enable_fade_in": ("BOOLEAN", {"default": False}),
                "fade_in_duration": ("FLOAT", {"default": 1.0, "min": 0.1, "max": 30.0, "step": 0.1}),
                "enable_fade_out": ("BOOLEAN", {"default": False}),
                "fade_out_duration": ("FLOAT", {"default": 1.0, "min": 0.1, "max": 30.0, "step": 0.1}),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "mix"
    CATEGORY = CATEGORY

    async def mix(self, video: str, audio: str, continue_on_fail: bool = False, **options):
        async def work(ctx):
            plan = MixPlan.from_options(options)
            async with await resolve(ctx, [video, audio]) as sources:
                video_path, audio_path = sources.paths
                return (publish(await ops.mix_audio(ctx, video_path, audio_path, plan)),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Mix Audio")
