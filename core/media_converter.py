"""Conversion between ComfyUI IMAGE tensors and image files.

Image operations work on files; the host passes images around as float
tensors of shape (B, H, W, 3) in [0, 1]. These helpers bridge the two.
"""

from pathlib import Path

import numpy as np  # type: ignore[import-not-found]
import torch  # type: ignore[import-not-found]


class MediaConverter:
    """Convert between ComfyUI tensor formats and image files."""

    def tensor_to_image_file(self, images: torch.Tensor, path: str | Path, index: int = 0) -> str:
        """Write one frame of an IMAGE batch to ``path``.

        The format follows the file extension, so pass ``.png`` to keep
        the frame lossless.
        """
        from PIL import Image  # type: ignore[import-not-found]

        if images.dim() == 3:
            images = images.unsqueeze(0)
        if not 0 <= index < images.shape[0]:
            raise IndexError(f"Frame {index} out of range for batch of {images.shape[0]}")

        frame = images[index].mul(255.0).clamp_(0, 255).to(torch.uint8).cpu().numpy()
        image = Image.fromarray(frame[..., :3])
        if Path(path).suffix.lower() in (".jpg", ".jpeg"):
            image = image.convert("RGB")
        image.save(str(path))
        return str(path)

    def image_file_to_tensor(self, path: str | Path) -> torch.Tensor:
        """Load an image file as a (1, H, W, 3) float32 tensor in [0, 1]."""
        from PIL import Image, ImageOps  # type: ignore[import-not-found]

        with Image.open(str(path)) as img:
            img = ImageOps.exif_transpose(img)
            arr = np.asarray(img.convert("RGB"), dtype=np.float32) / 255.0
        return torch.from_numpy(arr).unsqueeze(0)
