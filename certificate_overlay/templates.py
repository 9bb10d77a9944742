"""
Background template discovery and loading.
"""

# Standard Library
import dataclasses
import io
import pathlib

# PIP3 modules
import PIL.Image


TEMPLATE_SUFFIXES = (".png", ".jpg", ".jpeg")
SUPPORTED_FORMATS = ("PNG", "JPEG")


class UnsupportedTemplateError(ValueError):
	pass


@dataclasses.dataclass(frozen=True)
class TemplateRef:
	key: str
	label: str
	path: str


@dataclasses.dataclass(frozen=True)
class TemplateImage:
	key: str
	format: str
	width: int
	height: int
	image: PIL.Image.Image = dataclasses.field(compare=False, repr=False)


#============================================
def list_templates(directory: pathlib.Path) -> list[TemplateRef]:
	"""
	List PNG and JPEG templates below a directory.

	Args:
		directory: Template root directory.

	Returns:
		TemplateRef entries sorted by key.
	"""
	templates: list[TemplateRef] = []
	if not directory.is_dir():
		return templates
	for path in sorted(directory.rglob("*")):
		if not path.is_file() or path.suffix.lower() not in TEMPLATE_SUFFIXES:
			continue
		key = path.relative_to(directory).as_posix()
		templates.append(TemplateRef(key=key, label=path.stem, path=str(path)))
	return templates


#============================================
def load_template(source, key: str | None = None) -> TemplateImage:
	"""
	Decode a PNG or JPEG background template.

	Args:
		source: File path or raw image bytes.
		key: Optional template key; defaults to the file name.

	Returns:
		TemplateImage with the decoded image loaded in memory.
	"""
	if isinstance(source, (bytes, bytearray)):
		data = bytes(source)
		if key is None:
			key = "template"
	else:
		path = pathlib.Path(source)
		data = path.read_bytes()
		if key is None:
			key = path.name
	try:
		image = PIL.Image.open(io.BytesIO(data))
		image.load()
	except (PIL.UnidentifiedImageError, OSError) as error:
		raise UnsupportedTemplateError("Unsupported template format. Use PNG or JPG.") from error
	if image.format not in SUPPORTED_FORMATS:
		raise UnsupportedTemplateError("Unsupported template format. Use PNG or JPG.")
	image_format = image.format
	if image.mode not in ("RGB", "RGBA", "L"):
		image = image.convert("RGB" if image.mode == "CMYK" else "RGBA")
	return TemplateImage(
		key=key,
		format=image_format,
		width=image.width,
		height=image.height,
		image=image,
	)
