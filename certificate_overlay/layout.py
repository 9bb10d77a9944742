"""
Page layout: text fitting and per-recipient drawing plans.

Plans are backend-agnostic drawing instructions in PDF page coordinates
(origin bottom-left). Building a plan is a pure function of the row, the
field descriptors, the page geometry and the template size.
"""

# Standard Library
import dataclasses
import typing

# local repo modules
import certificate_overlay as co
import certificate_overlay.config
import certificate_overlay.fonts
import certificate_overlay.geometry
import certificate_overlay.layout_io


RecipientRow = co.config.RecipientRow
FieldDescriptor = co.config.FieldDescriptor
PageGeometry = co.config.PageGeometry
FontCache = co.fonts.FontCache

FIELD_SPECS = co.config.FIELD_SPECS
MAX_PREVIEW_ROWS = co.config.MAX_PREVIEW_ROWS
DATE_PREFIX = co.config.DATE_PREFIX
TITLE_FALLBACK_TEXT = co.config.TITLE_FALLBACK_TEXT

MeasureFunc = typing.Callable[[str, str, float], float]


@dataclasses.dataclass(frozen=True)
class TextItem:
	field_key: str
	text: str
	x: float
	y: float
	font_name: str
	size: float
	color: tuple[float, float, float]
	rotation: float = 0.0
	opacity: float = 1.0


@dataclasses.dataclass(frozen=True)
class ImageItem:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class PagePlan:
	index: int
	row: RecipientRow
	geometry: PageGeometry
	items: tuple
	warnings: tuple[str, ...] = ()

	def text_items(self) -> list[TextItem]:
		return [item for item in self.items if isinstance(item, TextItem)]

	def text_for(self, field_key: str) -> str | None:
		for item in self.text_items():
			if item.field_key == field_key:
				return item.text
		return None


#============================================
def fit_text_size(
	text: str | None,
	font_name: str,
	max_width: float,
	start_size: float,
	min_size: float,
	measure: MeasureFunc | None = None,
) -> float:
	"""
	Shrink a font size one point at a time until the text fits.

	Args:
		text: Text to measure; None is treated as empty.
		font_name: Font name passed to the measure function.
		max_width: Maximum rendered width.
		start_size: Largest size to try.
		min_size: Floor; returned when nothing larger fits.
		measure: Width function (text, font_name, size); defaults to
			ReportLab font metrics.

	Returns:
		Size in [min_size, start_size].
	"""
	if measure is None:
		measure = co.fonts.measure_text
	value = "" if text is None else str(text)
	floor = min(min_size, start_size)
	size = start_size
	if not value:
		return size
	while size > floor and measure(value, font_name, size) > max_width:
		size = max(floor, size - 1)
	return size


#============================================
def resolve_field_text(descriptor: FieldDescriptor, row: RecipientRow) -> str:
	"""
	Resolve the text a field shows for one recipient.

	Args:
		descriptor: Field descriptor.
		row: Recipient row.

	Returns:
		Display text, empty when the field should be skipped.
	"""
	key = descriptor.key
	spec = FIELD_SPECS.get(key)
	source = spec.source if spec is not None else "literal"
	literal = (descriptor.text or "").strip()
	if source == "row":
		text = (getattr(row, key, "") or "").strip()
	elif source == "row_or_default":
		text = (getattr(row, key, "") or "").strip() or literal
	else:
		text = literal
	if key == "certTitle" and not text:
		text = TITLE_FALLBACK_TEXT
	if key == "date" and text:
		text = f"{DATE_PREFIX}{text}"
	return text


#============================================
def _resolve_size(descriptor: FieldDescriptor, warnings: list[str]) -> tuple[float, float]:
	spec = FIELD_SPECS.get(descriptor.key)
	default_size = spec.size if spec is not None else 12.0
	default_min = spec.min_size if spec is not None else 8.0
	size = co.layout_io.parse_size(descriptor.style.size, default_size)
	min_size = co.layout_io.parse_size(descriptor.style.min_size, default_min)
	for parsed in (size, min_size):
		if parsed.warning:
			warnings.append(f"{descriptor.key}: {parsed.warning}")
	return (size.value, min_size.value)


#============================================
def plan_text_item(
	descriptor: FieldDescriptor,
	text: str,
	geometry: PageGeometry,
	font_cache: FontCache,
	warnings: list[str],
) -> TextItem:
	"""
	Lay out one field: font, color, size and centered position.
	"""
	style = descriptor.style
	family = co.layout_io.parse_font_family(style.font)
	font_weight = co.layout_io.resolve_font_weight(style)
	auto_fit = co.layout_io.parse_flag(style.auto_fit, False)
	color = co.layout_io.parse_hex_color(style.color)
	for parsed in (family, font_weight, auto_fit, color):
		if parsed.warning:
			warnings.append(f"{descriptor.key}: {parsed.warning}")
	font = font_cache.get(family.value, font_weight.value)

	def measure(value: str, _font_name: str, size: float) -> float:
		return font.stringWidth(value, size)

	start_size, min_size = _resolve_size(descriptor, warnings)
	size = start_size
	if auto_fit.value:
		spec = FIELD_SPECS.get(descriptor.key)
		ratio = spec.max_width_ratio if spec is not None else 0.82
		size = fit_text_size(text, font.fontName, geometry.width * ratio, start_size, min_size, measure)

	mapped_x, mapped_y = co.geometry.to_absolute(descriptor.position, geometry.width, geometry.height, flip_y=True)
	text_width = measure(text, font.fontName, size)
	return TextItem(
		field_key=descriptor.key,
		text=text,
		x=mapped_x - text_width / 2.0,
		y=mapped_y,
		font_name=font.fontName,
		size=size,
		color=color.value,
	)


#============================================
def watermark_item(geometry: PageGeometry) -> TextItem:
	gray = co.config.WATERMARK_GRAY
	return TextItem(
		field_key="watermark",
		text=co.config.WATERMARK_TEXT,
		x=co.config.WATERMARK_X,
		y=geometry.height * co.config.WATERMARK_Y_RATIO,
		font_name=co.fonts.WATERMARK_FONT,
		size=co.config.WATERMARK_SIZE,
		color=(gray, gray, gray),
		rotation=co.config.WATERMARK_ROTATION,
		opacity=co.config.WATERMARK_OPACITY,
	)


#============================================
def plan_page(
	row: RecipientRow,
	fields: tuple[FieldDescriptor, ...],
	geometry: PageGeometry,
	template=None,
	index: int = 0,
	font_cache: FontCache | None = None,
) -> PagePlan:
	"""
	Build the drawing plan for one recipient page.

	Args:
		row: Recipient row.
		fields: Field descriptors in render order.
		geometry: Page geometry.
		template: Object with width and height (the background), or None.
		index: Zero-based page index.
		font_cache: Per-document font cache.

	Returns:
		PagePlan: background, one text item per visible field, watermark.
	"""
	if font_cache is None:
		font_cache = FontCache()
	warnings: list[str] = []
	items: list = []
	if template is not None:
		rect = co.geometry.cover_rect(template.width, template.height, geometry.width, geometry.height)
		items.append(ImageItem(x=rect.x, y=rect.y, width=rect.width, height=rect.height))
	for descriptor in fields:
		text = resolve_field_text(descriptor, row)
		if not text:
			continue
		items.append(plan_text_item(descriptor, text, geometry, font_cache, warnings))
	items.append(watermark_item(geometry))
	return PagePlan(index=index, row=row, geometry=geometry, items=tuple(items), warnings=tuple(warnings))


#============================================
def plan_document(
	rows: list[RecipientRow],
	fields: tuple[FieldDescriptor, ...],
	geometry: PageGeometry,
	template=None,
) -> list[PagePlan]:
	"""
	Build page plans for up to MAX_PREVIEW_ROWS recipients, in row order.
	"""
	font_cache = FontCache()
	plans: list[PagePlan] = []
	for index, row in enumerate(rows[:MAX_PREVIEW_ROWS]):
		plans.append(plan_page(row, tuple(fields), geometry, template, index, font_cache))
	return plans
