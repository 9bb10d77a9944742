"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import PIL.Image
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def make_image_bytes(width: int, height: int, image_format: str) -> bytes:
	"""
	Build an in-memory template image with a two-tone fill.

	Args:
		width: Image width in pixels.
		height: Image height in pixels.
		image_format: Pillow format name.

	Returns:
		Encoded image bytes.
	"""
	image = PIL.Image.new("RGB", (width, height), (240, 230, 200))
	for x in range(width // 2):
		for y in range(0, height, 4):
			image.putpixel((x, y), (200, 180, 120))
	buffer = io.BytesIO()
	image.save(buffer, format=image_format)
	return buffer.getvalue()


@pytest.fixture
def png_template_path(tmp_path):
	path = tmp_path / "classic.png"
	path.write_bytes(make_image_bytes(200, 100, "PNG"))
	return path
