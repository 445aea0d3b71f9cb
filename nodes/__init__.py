"""ComfyUI node definitions for MediaFX."""

from .audio_nodes import ExtractAudioNode, MixAudioNode
from .font_nodes import FontDeleteNode, FontListNode, FontUploadNode
from .image_nodes import AddTextToImageNode, ImageToVideoNode, StampImageNode
from .probe_node import GetMetadataNode
from .text_nodes import AddSubtitleNode, AddTextNode
from .video_nodes import (
    MergeVideosNode,
    OverlayVideoNode,
    SeparateAudioNode,
    TrimVideoNode,
    VideoFadeNode,
    VideoSpeedNode,
    VideoTransitionNode,
)

# Node class mappings for ComfyUI
NODE_CLASS_MAPPINGS = {
    "MediaFXMerge": MergeVideosNode,
    "MediaFXTrim": TrimVideoNode,
    "MediaFXSpeed": VideoSpeedNode,
    "MediaFXTransition": VideoTransitionNode,
    "MediaFXFade": VideoFadeNode,
    "MediaFXOverlayVideo": OverlayVideoNode,
    "MediaFXSeparateAudio": SeparateAudioNode,
    "MediaFXExtractAudio": ExtractAudioNode,
    "MediaFXMixAudio": MixAudioNode,
    "MediaFXAddSubtitle": AddSubtitleNode,
    "MediaFXAddText": AddTextNode,
    "MediaFXAddTextToImage": AddTextToImageNode,
    "MediaFXImageToVideo": ImageToVideoNode,
    "MediaFXStampImage": StampImageNode,
    "MediaFXGetMetadata": GetMetadataNode,
    "MediaFXFontList": FontListNode,
    "MediaFXFontUpload": FontUploadNode,
    "MediaFXFontDelete": FontDeleteNode,
}

# Display names for nodes
NODE_DISPLAY_NAME_MAPPINGS = {
    "MediaFXMerge": "Merge Videos (MediaFX)",
    "MediaFXTrim": "Trim Video (MediaFX)",
    "MediaFXSpeed": "Video Speed (MediaFX)",
    "MediaFXTransition": "Video Transition (MediaFX)",
    "MediaFXFade": "Video Fade (MediaFX)",
    "MediaFXOverlayVideo": "Overlay Video (MediaFX)",
    "MediaFXSeparateAudio": "Separate Audio (MediaFX)",
    "MediaFXExtractAudio": "Extract Audio (MediaFX)",
    "MediaFXMixAudio": "Mix Audio (MediaFX)",
    "MediaFXAddSubtitle": "Add Subtitle (MediaFX)",
    "MediaFXAddText": "Add Text (MediaFX)",
    "MediaFXAddTextToImage": "Add Text To Image (MediaFX)",
    "MediaFXImageToVideo": "Image To Video (MediaFX)",
    "MediaFXStampImage": "Stamp Image (MediaFX)",
    "MediaFXGetMetadata": "Get Metadata (MediaFX)",
    "MediaFXFontList": "Font List (MediaFX)",
    "MediaFXFontUpload": "Font Upload (MediaFX)",
    "MediaFXFontDelete": "Font Delete (MediaFX)",
}

__all__ = [
    "NODE_CLASS_MAPPINGS",
    "NODE_DISPLAY_NAME_MAPPINGS",
]
