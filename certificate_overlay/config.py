"""
Shared configuration, constants and value types.
"""

# Standard Library
import dataclasses
import enum


MAX_PREVIEW_ROWS = 5

# Landscape sizes in points. Portrait swaps width and height.
PAPER_SIZES = {
	"A4": (842.0, 595.0),
	"LETTER": (792.0, 612.0),
}
DEFAULT_PAPER = "A4"
ORIENTATIONS = ("landscape", "portrait")
DEFAULT_ORIENTATION = "landscape"

FIELD_KEYS = (
	"certTitle",
	"subtitle",
	"name",
	"description",
	"award",
	"date",
	"issuer",
)
FIELD_LABELS = {
	"certTitle": "Certificate Title",
	"subtitle": "Subtitle (under title)",
	"name": "Name",
	"description": "Description (under name)",
	"award": "Title / Award",
	"date": "Date",
	"issuer": "Issuer",
}

DEFAULT_COLOR = "#000000"
DEFAULT_WEIGHT = 400
BOLD_WEIGHT = 700
DATE_PREFIX = "Date: "
TITLE_FALLBACK_TEXT = "Certificate"

WATERMARK_TEXT = "PREVIEW — UPGRADE TO REMOVE WATERMARK"
WATERMARK_X = 40.0
WATERMARK_Y_RATIO = 0.35
WATERMARK_SIZE = 22.0
WATERMARK_ROTATION = 25.0
WATERMARK_OPACITY = 0.35
WATERMARK_GRAY = 0.75

DEFAULT_DPI = 150
PROGRESS_BAR_WIDTH = 20
OUTPUT_FORMATS = ("pdf", "png", "zip")


class FontFamily(enum.Enum):
	HELVETICA = "helvetica"
	TIMES = "times"
	COURIER = "courier"


class FontWeight(enum.Enum):
	REGULAR = "regular"
	BOLD = "bold"


# source: where the page text comes from.
#   literal: descriptor text only
#   row: recipient row attribute only
#   row_or_default: recipient row attribute, else descriptor text
@dataclasses.dataclass(frozen=True)
class FieldSpec:
	key: str
	source: str
	text: str
	x: float
	y: float
	color: str
	bold: bool
	size: float
	min_size: float
	max_width_ratio: float
	auto_fit: bool


FIELD_SPECS = {
	"certTitle": FieldSpec("certTitle", "literal", "Certificate of Achievement", 0.5, 0.18, "#2a2a2a", True, 38.0, 18.0, 0.82, True),
	"subtitle": FieldSpec("subtitle", "literal", "Presented to", 0.5, 0.26, "#3a3a3a", False, 18.0, 10.0, 0.5, True),
	"name": FieldSpec("name", "row", "", 0.5, 0.42, "#2a2a2a", True, 34.0, 18.0, 0.82, True),
	"description": FieldSpec("description", "literal", "For outstanding effort and dedication", 0.5, 0.48, "#3a3a3a", False, 14.0, 9.0, 0.5, True),
	"award": FieldSpec("award", "row", "", 0.5, 0.54, "#3a3a3a", False, 18.0, 11.0, 0.82, True),
	"date": FieldSpec("date", "row_or_default", "", 0.10, 0.92, "#3a3a3a", False, 12.0, 8.0, 0.4, False),
	"issuer": FieldSpec("issuer", "row_or_default", "Issuer / Organization", 0.80, 0.88, "#2a2a2a", True, 14.0, 8.0, 0.4, False),
}


@dataclasses.dataclass(frozen=True)
class RecipientRow:
	name: str
	award: str
	date: str = ""
	issuer: str = ""


@dataclasses.dataclass(frozen=True)
class Position:
	x: float
	y: float


@dataclasses.dataclass(frozen=True)
class FieldStyle:
	font: FontFamily = FontFamily.HELVETICA
	color: str = DEFAULT_COLOR
	size: float = 12.0
	min_size: float = 8.0
	weight: int = DEFAULT_WEIGHT
	bold: bool | None = None
	auto_fit: bool = False


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
	key: str
	text: str
	position: Position
	style: FieldStyle


@dataclasses.dataclass(frozen=True)
class PageGeometry:
	paper: str
	orientation: str
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass
class RenderConfig:
	geometry: PageGeometry
	output_format: str
	workers: int
	dpi: int


@dataclasses.dataclass
class RenderResult:
	rows_total: int
	rows_rendered: int
	pages: int
	output_paths: list[str]
	warnings: list[str]
