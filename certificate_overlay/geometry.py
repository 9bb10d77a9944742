"""
Coordinate mapping, cover-fit and page geometry.
"""

# Standard Library
import math

# local repo modules
import certificate_overlay as co
import certificate_overlay.config


Position = co.config.Position
PageGeometry = co.config.PageGeometry
Rect = co.config.Rect

PAPER_SIZES = co.config.PAPER_SIZES
ORIENTATIONS = co.config.ORIENTATIONS
DEFAULT_PAPER = co.config.DEFAULT_PAPER
DEFAULT_ORIENTATION = co.config.DEFAULT_ORIENTATION


#============================================
def clamp(value: float, low: float, high: float) -> float:
	return max(low, min(high, value))


#============================================
def clamp_unit(value) -> float:
	"""
	Clamp a value into [0, 1].

	Non-numeric and non-finite input maps to 0.

	Args:
		value: Any value.

	Returns:
		Float in the closed unit interval.
	"""
	if isinstance(value, bool):
		return 0.0
	try:
		number = float(value)
	except (TypeError, ValueError):
		return 0.0
	if not math.isfinite(number):
		return 0.0
	return clamp(number, 0.0, 1.0)


#============================================
def make_position(x, y) -> Position:
	return Position(clamp_unit(x), clamp_unit(y))


#============================================
def to_absolute(
	position: Position,
	width: float,
	height: float,
	flip_y: bool,
) -> tuple[float, float]:
	"""
	Map a normalized top-left position to absolute coordinates.

	Args:
		position: Normalized position, origin top-left.
		width: Target width.
		height: Target height.
		flip_y: True for a bottom-left origin (PDF), False for top-left.

	Returns:
		Tuple of (x, y) in target units.
	"""
	x_unit = clamp_unit(position.x)
	y_unit = clamp_unit(position.y)
	abs_x = x_unit * width
	if flip_y:
		abs_y = (1.0 - y_unit) * height
	else:
		abs_y = y_unit * height
	return (abs_x, abs_y)


#============================================
def cover_rect(image_width: float, image_height: float, box_width: float, box_height: float) -> Rect:
	"""
	Compute an aspect-preserving rectangle that fully covers a box.

	Overflow is split evenly on both sides of the wider axis.

	Args:
		image_width: Source image width.
		image_height: Source image height.
		box_width: Target box width.
		box_height: Target box height.

	Returns:
		Rect relative to the box origin.
	"""
	if image_width <= 0 or image_height <= 0:
		raise ValueError(f"Image dimensions must be positive: {image_width}x{image_height}")
	scale = max(box_width / image_width, box_height / image_height)
	width = image_width * scale
	height = image_height * scale
	x = (box_width - width) / 2.0
	y = (box_height - height) / 2.0
	return Rect(x=x, y=y, width=width, height=height)


#============================================
def page_geometry(paper: str = DEFAULT_PAPER, orientation: str = DEFAULT_ORIENTATION) -> PageGeometry:
	"""
	Look up the page size for a paper name and orientation.

	Args:
		paper: Paper size name (A4 or LETTER).
		orientation: landscape or portrait.

	Returns:
		PageGeometry in points.
	"""
	paper_key = (paper or "").strip().upper()
	if paper_key not in PAPER_SIZES:
		raise ValueError(f"paper_size must be one of: {', '.join(PAPER_SIZES)}")
	orientation_key = (orientation or "").strip().lower()
	if orientation_key not in ORIENTATIONS:
		raise ValueError(f"orientation must be one of: {', '.join(ORIENTATIONS)}")
	width, height = PAPER_SIZES[paper_key]
	if orientation_key == "portrait":
		width, height = height, width
	return PageGeometry(paper=paper_key, orientation=orientation_key, width=width, height=height)
