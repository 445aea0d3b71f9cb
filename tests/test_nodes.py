"""Tests for the ComfyUI node layer with FFmpeg mocked out."""

import importlib
import inspect
import json
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from helpers import commands, ok_result, probe_data

# Dynamic import to support relative imports within the package
root_name = os.path.basename(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
nodes = importlib.import_module(f"{root_name}.nodes")
base = importlib.import_module(f"{root_name}.nodes._base")
video_nodes = importlib.import_module(f"{root_name}.nodes.video_nodes")
image_nodes = importlib.import_module(f"{root_name}.nodes.image_nodes")
text_nodes = importlib.import_module(f"{root_name}.nodes.text_nodes")
probe_node = importlib.import_module(f"{root_name}.nodes.probe_node")
font_nodes = importlib.import_module(f"{root_name}.nodes.font_nodes")
errors = importlib.import_module(f"{root_name}.core.errors")


def write_outputs(command, **kwargs):
    Path(command.outputs[0]).write_bytes(b"out")
    return ok_result()


def write_png(command, **kwargs):
    from PIL import Image

    Image.new("RGB", (8, 6), (255, 0, 0)).save(command.outputs[0])
    return ok_result()


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    directory = tmp_path / "comfy_output"
    monkeypatch.setattr(sys.modules["folder_paths"], "get_output_directory", lambda: str(directory))
    return directory / "mediafx"


@pytest.fixture
def node_ctx(ctx, output_dir):
    ctx.process_manager.run.side_effect = write_outputs
    with patch.object(base, "default_context", return_value=ctx):
        yield ctx


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "input.mp4"
    path.write_bytes(b"video")
    return path


class TestNodeMappings:
    """Tests for the registered node classes."""

    def test_every_node_is_registered_with_a_display_name(self):
        assert len(nodes.NODE_CLASS_MAPPINGS) == 18
        assert set(nodes.NODE_CLASS_MAPPINGS) == set(nodes.NODE_DISPLAY_NAME_MAPPINGS)

    def test_node_contract(self, node_ctx):
        for key, node_cls in nodes.NODE_CLASS_MAPPINGS.items():
            inputs = node_cls.INPUT_TYPES()
            assert "required" in inputs, key
            assert node_cls.CATEGORY == "MediaFX"
            function = getattr(node_cls, node_cls.FUNCTION)
            assert inspect.iscoroutinefunction(function), key
            assert len(node_cls.RETURN_TYPES) == len(node_cls.RETURN_NAMES)
            assert node_cls.RETURN_NAMES[-1] == "error", key

    def test_font_choices_put_default_first(self, node_ctx):
        assert base.font_choices()[0] == "noto-sans-kr"


class TestHelpers:
    """Tests for the shared node helpers."""

    def test_split_sources(self):
        assert base.split_sources(" a.mp4 \n\n https://x/b.mp4\n") == ["a.mp4", "https://x/b.mp4"]
        assert base.split_sources("") == []
        assert base.split_sources(None) == []

    def test_node_options_drops_unset_values(self):
        assert base.node_options(color="red", x="", y=None, opacity=0.0) == {"color": "red", "opacity": 0.0}

    def test_publish_moves_into_output_dir(self, tmp_path, output_dir):
        source = tmp_path / "result.mp4"
        source.write_bytes(b"x")

        published = base.publish(str(source))

        assert Path(published) == output_dir / "result.mp4"
        assert Path(published).read_bytes() == b"x"
        assert not source.exists()

    @pytest.mark.asyncio
    async def test_local_image_requires_a_source(self, ctx):
        with pytest.raises(errors.ConfigurationError, match="Connect an IMAGE"):
            async with base.LocalImage(ctx, None, "  "):
                pass


class TestContinueOnFail:
    """Tests for error reporting through the error output."""

    @pytest.mark.asyncio
    async def test_failure_raises_by_default(self, node_ctx, tmp_path):
        with pytest.raises(errors.SourceError, match="Input file not found"):
            await video_nodes.TrimVideoNode().trim(str(tmp_path / "missing.mp4"))

    @pytest.mark.asyncio
    async def test_failure_reported_on_error_output(self, node_ctx, tmp_path):
        result = await video_nodes.TrimVideoNode().trim(str(tmp_path / "missing.mp4"), continue_on_fail=True)

        assert result[0] == ""
        assert "Input file not found" in result[1]

    @pytest.mark.asyncio
    async def test_multi_output_empty_result(self, node_ctx):
        result = await video_nodes.SeparateAudioNode().separate("", continue_on_fail=True)
        assert result == ("", "", "Source #1 is empty")


class TestVideoNodes:
    """Tests for the video nodes."""

    @pytest.mark.asyncio
    async def test_trim_publishes_output(self, node_ctx, video_file, output_dir):
        video_path, error = await video_nodes.TrimVideoNode().trim(str(video_file), 1.0, 4.0, "mkv")

        assert error == ""
        assert Path(video_path).parent == output_dir
        assert video_path.endswith(".mkv")
        assert video_file.exists()
        assert list(node_ctx.settings.temp_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_merge_reads_one_source_per_line(self, node_ctx, video_file, tmp_path):
        second = tmp_path / "second.mp4"
        second.write_bytes(b"video")

        video_path, error = await video_nodes.MergeVideosNode().merge(f"{video_file}\n\n{second}\n")

        assert error == ""
        args = node_ctx.process_manager.run.call_args.args[0].to_args()
        assert args.count("-i") == 2

    @pytest.mark.asyncio
    async def test_separate_audio(self, node_ctx, video_file, output_dir):
        video_path, audio_path, error = await video_nodes.SeparateAudioNode().separate(
            str(video_file), audio_format="wav", audio_codec="pcm_s16le"
        )

        assert error == ""
        assert Path(video_path).parent == output_dir
        assert audio_path.endswith(".wav")


class TestImageNodes:
    """Tests for the image nodes."""

    @pytest.mark.asyncio
    async def test_add_text_to_image_returns_tensor(self, node_ctx, tmp_path):
        from PIL import Image

        source = tmp_path / "photo.png"
        Image.new("RGB", (8, 6)).save(source)
        node_ctx.process_manager.run.side_effect = write_png

        path, image, error = await image_nodes.AddTextToImageNode().add_text("Hi", image_path=str(source))

        assert error == ""
        assert path.endswith(".png")
        assert tuple(image.shape) == (1, 6, 8, 3)

    def test_add_text_to_image_centers_without_outline_by_default(self, node_ctx):
        image_inputs = image_nodes.AddTextToImageNode.INPUT_TYPES()["optional"]
        video_inputs = text_nodes.AddTextNode.INPUT_TYPES()["optional"]

        assert image_inputs["vertical_align"][1]["default"] == "middle"
        assert image_inputs["outline_width"][1]["default"] == 0.0
        assert video_inputs["vertical_align"][1]["default"] == "bottom"
        assert video_inputs["outline_width"][1]["default"] == 1.0

    @pytest.mark.asyncio
    async def test_add_text_to_image_omitted_style_uses_image_defaults(self, node_ctx, tmp_path):
        from PIL import Image

        source = tmp_path / "photo.png"
        Image.new("RGB", (8, 6)).save(source)
        node_ctx.process_manager.run.side_effect = write_png

        await image_nodes.AddTextToImageNode().add_text("Hi", size_mode="fixed", image_path=str(source))

        args = " ".join(commands(node_ctx)[-1])
        assert "y=(h-" in args
        assert "borderw" not in args

    @pytest.mark.asyncio
    async def test_add_text_to_image_failure_returns_placeholder(self, node_ctx):
        path, image, error = await image_nodes.AddTextToImageNode().add_text("Hi", continue_on_fail=True)

        assert path == ""
        assert tuple(image.shape) == (1, 64, 64, 3)
        assert "Connect an IMAGE" in error

    @pytest.mark.asyncio
    async def test_image_tensor_input_is_cleaned_up(self, node_ctx):
        import torch

        video_path, error = await image_nodes.ImageToVideoNode().image_to_video(
            duration=2.0, image=torch.rand(1, 6, 8, 3)
        )

        assert error == ""
        assert list(node_ctx.settings.temp_dir.iterdir()) == []


class TestInfoNodes:
    """Tests for metadata and font nodes."""

    @pytest.mark.asyncio
    async def test_get_metadata(self, node_ctx, video_file):
        node_ctx.probes[str(video_file.resolve())] = probe_data(duration=12.5, width=1280, height=720)

        metadata_json, duration, width, height, error = await probe_node.GetMetadataNode().get_metadata(
            str(video_file)
        )

        assert error == ""
        assert json.loads(metadata_json)["format"]["duration"] == 12.5
        assert (duration, width, height) == (12.5, 1280, 720)

    @pytest.mark.asyncio
    async def test_font_list(self, node_ctx):
        fonts_json, error = await font_nodes.FontListNode().list_fonts("korean")

        assert error == ""
        assert "noto-sans-kr" in json.loads(fonts_json)
