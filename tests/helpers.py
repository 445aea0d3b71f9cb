"""Synthetic probe results and command helpers shared by the tests."""

from core.executor.process_manager import ProcessResult


def probe_data(
    duration=10.0,
    width=1920,
    height=1080,
    has_video=True,
    has_audio=True,
    frame_rate="30/1",
    format_name="mov,mp4,m4a,3gp,3g2,mj2",
):
    """Raw ffprobe JSON for a synthetic file."""
    streams = []
    if has_video:
        streams.append({
            "index": 0,
            "codec_type": "video",
            "codec_name": "h264",
            "width": width,
            "height": height,
            "r_frame_rate": frame_rate,
            "duration": str(duration),
        })
    if has_audio:
        streams.append({
            "index": len(streams),
            "codec_type": "audio",
            "codec_name": "aac",
            "sample_rate": "44100",
            "channels": 2,
            "duration": str(duration),
        })
    return {
        "format": {
            "filename": "input.mp4",
            "format_name": format_name,
            "duration": str(duration),
            "size": "1000",
        },
        "streams": streams,
    }


def ok_result(command="ffmpeg"):
    return ProcessResult(success=True, return_code=0, stdout="", stderr="", command=command)


def commands(context):
    """Argument lists of every FFmpeg command run through ``context``."""
    return [call.args[0].to_args() for call in context.process_manager.run.call_args_list]
