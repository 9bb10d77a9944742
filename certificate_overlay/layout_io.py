"""
Parsing of editor layout state (positions, styles, texts).

Malformed values never raise here. Each parser returns a Parsed value that
carries the default it fell back to and a warning for the caller to show.
"""

# Standard Library
import dataclasses
import json
import math
import pathlib

# local repo modules
import certificate_overlay as co
import certificate_overlay.config
import certificate_overlay.geometry


FontFamily = co.config.FontFamily
FontWeight = co.config.FontWeight
FieldDescriptor = co.config.FieldDescriptor
FieldStyle = co.config.FieldStyle
Position = co.config.Position

FIELD_KEYS = co.config.FIELD_KEYS
FIELD_SPECS = co.config.FIELD_SPECS
DEFAULT_WEIGHT = co.config.DEFAULT_WEIGHT
BOLD_WEIGHT = co.config.BOLD_WEIGHT
HEX_DIGITS = set("0123456789abcdefABCDEF")
TRUE_WORDS = ("true", "yes", "on", "1")
FALSE_WORDS = ("false", "no", "off", "0")


@dataclasses.dataclass(frozen=True)
class Parsed:
	value: object
	warning: str | None = None


@dataclasses.dataclass(frozen=True)
class LayoutResult:
	fields: tuple[FieldDescriptor, ...]
	warnings: tuple[str, ...]


#============================================
def parse_hex_color(value) -> Parsed:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC", "#abc" or "aabbcc".

	Returns:
		Parsed tuple of (r, g, b) in 0.0-1.0 range; black on failure.
	"""
	raw = str(value if value is not None else "").strip()
	digits = raw[1:] if raw.startswith("#") else raw
	if len(digits) == 3:
		digits = "".join(char * 2 for char in digits)
	if len(digits) != 6 or not set(digits) <= HEX_DIGITS:
		return Parsed((0.0, 0.0, 0.0), f"invalid color {raw!r}, using black")
	red = int(digits[0:2], 16) / 255.0
	green = int(digits[2:4], 16) / 255.0
	blue = int(digits[4:6], 16) / 255.0
	return Parsed((red, green, blue))


#============================================
def parse_unit(value, default_value: float) -> Parsed:
	"""
	Parse a normalized coordinate, clamped to [0, 1].
	"""
	if value is None:
		return Parsed(default_value)
	if isinstance(value, bool):
		return Parsed(0.0, f"invalid coordinate {value!r}, using 0")
	try:
		number = float(value)
	except (TypeError, ValueError):
		return Parsed(0.0, f"invalid coordinate {value!r}, using 0")
	if not math.isfinite(number):
		return Parsed(0.0, f"non-finite coordinate {value!r}, using 0")
	clamped = co.geometry.clamp(number, 0.0, 1.0)
	if clamped != number:
		return Parsed(clamped, f"coordinate {number} clamped to {clamped}")
	return Parsed(clamped)


#============================================
def parse_position(value, default: Position) -> Parsed:
	if value is None:
		return Parsed(default)
	if not isinstance(value, dict):
		return Parsed(default, f"invalid position {value!r}, using default")
	x = parse_unit(value.get("x"), default.x)
	y = parse_unit(value.get("y"), default.y)
	warnings = [w for w in (x.warning, y.warning) if w]
	return Parsed(co.geometry.make_position(x.value, y.value), "; ".join(warnings) or None)


#============================================
def parse_font_family(value) -> Parsed:
	if value is None:
		return Parsed(FontFamily.HELVETICA)
	if isinstance(value, FontFamily):
		return Parsed(value)
	key = str(value).strip().lower()
	for family in FontFamily:
		if family.value == key:
			return Parsed(family)
	return Parsed(FontFamily.HELVETICA, f"unknown font {value!r}, using helvetica")


#============================================
def parse_size(value, default_value: float) -> Parsed:
	if value is None:
		return Parsed(default_value)
	if isinstance(value, bool):
		return Parsed(default_value, f"invalid size {value!r}, using {default_value}")
	try:
		number = float(value)
	except (TypeError, ValueError):
		return Parsed(default_value, f"invalid size {value!r}, using {default_value}")
	if not math.isfinite(number) or number <= 0:
		return Parsed(default_value, f"invalid size {value!r}, using {default_value}")
	return Parsed(number)


#============================================
def parse_weight(value, default_value: int) -> Parsed:
	if value is None:
		return Parsed(default_value)
	if isinstance(value, str) and value.strip().lower() in ("bold", "normal", "regular"):
		if value.strip().lower() == "bold":
			return Parsed(BOLD_WEIGHT)
		return Parsed(DEFAULT_WEIGHT)
	try:
		number = int(float(value))
	except (TypeError, ValueError, OverflowError):
		return Parsed(default_value, f"invalid weight {value!r}, using {default_value}")
	return Parsed(number)


#============================================
def parse_flag(value, default_value) -> Parsed:
	"""
	Parse an on/off style flag.

	Args:
		value: A boolean, 0/1, or a string such as "true" or "no".
		default_value: Returned for missing or unrecognized input.

	Returns:
		Parsed boolean, or the default with a warning.
	"""
	if value is None:
		return Parsed(default_value)
	if isinstance(value, bool):
		return Parsed(value)
	if isinstance(value, int) and value in (0, 1):
		return Parsed(bool(value))
	if isinstance(value, str):
		key = value.strip().lower()
		if key in TRUE_WORDS:
			return Parsed(True)
		if key in FALSE_WORDS:
			return Parsed(False)
	return Parsed(default_value, f"invalid flag {value!r}, using {default_value}")


#============================================
def resolve_font_weight(style: FieldStyle) -> Parsed:
	"""
	Decide regular or bold for a style.

	An explicit bold flag wins; otherwise weights of 700 and up are bold.

	Args:
		style: Field style, possibly built from unchecked values.

	Returns:
		Parsed FontWeight with any warnings joined.
	"""
	bold = parse_flag(style.bold, None)
	weight = parse_weight(style.weight, DEFAULT_WEIGHT)
	if bold.value is not None:
		font_weight = FontWeight.BOLD if bold.value else FontWeight.REGULAR
	elif weight.value >= BOLD_WEIGHT:
		font_weight = FontWeight.BOLD
	else:
		font_weight = FontWeight.REGULAR
	warnings = [w for w in (bold.warning, weight.warning) if w]
	return Parsed(font_weight, "; ".join(warnings) or None)


#============================================
def default_descriptor(key: str, text: str | None = None) -> FieldDescriptor:
	spec = FIELD_SPECS[key]
	style = FieldStyle(
		font=FontFamily.HELVETICA,
		color=spec.color,
		size=spec.size,
		min_size=spec.min_size,
		weight=BOLD_WEIGHT if spec.bold else DEFAULT_WEIGHT,
		bold=None,
		auto_fit=spec.auto_fit,
	)
	return FieldDescriptor(
		key=key,
		text=spec.text if text is None else text,
		position=Position(spec.x, spec.y),
		style=style,
	)


#============================================
def default_fields(texts: dict[str, str] | None = None) -> tuple[FieldDescriptor, ...]:
	"""
	Build descriptors for every field with the editor defaults.

	Args:
		texts: Optional literal texts by field key.

	Returns:
		Tuple of FieldDescriptor in render order.
	"""
	texts = texts or {}
	return tuple(default_descriptor(key, texts.get(key)) for key in FIELD_KEYS)


#============================================
def _merge_style(key: str, base: FieldStyle, raw, warnings: list[str]) -> FieldStyle:
	if raw is None:
		return base
	if not isinstance(raw, dict):
		warnings.append(f"{key}: invalid style {raw!r}, using defaults")
		return base

	changes: dict[str, object] = {}
	if "font" in raw:
		family = parse_font_family(raw.get("font"))
		changes["font"] = family.value
		if family.warning:
			warnings.append(f"{key}: {family.warning}")
	if "color" in raw:
		color = parse_hex_color(raw.get("color"))
		if color.warning:
			warnings.append(f"{key}: {color.warning}")
			changes["color"] = co.config.DEFAULT_COLOR
		else:
			changes["color"] = str(raw.get("color")).strip()
	for name, default_value in (("size", base.size), ("min_size", base.min_size)):
		if name in raw:
			size = parse_size(raw.get(name), default_value)
			changes[name] = size.value
			if size.warning:
				warnings.append(f"{key}: {size.warning}")
	if "weight" in raw:
		weight = parse_weight(raw.get("weight"), base.weight)
		changes["weight"] = weight.value
		if weight.warning:
			warnings.append(f"{key}: {weight.warning}")
	for name in ("bold", "auto_fit"):
		if name in raw:
			flag = parse_flag(raw.get(name), getattr(base, name))
			changes[name] = flag.value
			if flag.warning:
				warnings.append(f"{key}: {name} {flag.warning}")
	return dataclasses.replace(base, **changes)


#============================================
def load_layout(payload: dict | None, texts: dict[str, str] | None = None) -> LayoutResult:
	"""
	Merge editor layout state over the default field descriptors.

	Args:
		payload: Mapping with optional "positions", "styles" and "texts"
			sub-mappings keyed by field key.
		texts: Literal texts that override the payload texts.

	Returns:
		LayoutResult with descriptors in render order and any warnings.
	"""
	payload = payload if isinstance(payload, dict) else {}
	warnings: list[str] = []
	sections = {}
	for section in ("positions", "styles", "texts"):
		value = payload.get(section) or {}
		if not isinstance(value, dict):
			warnings.append(f"layout section {section!r} must be an object")
			value = {}
		for key in value:
			if key not in FIELD_SPECS:
				warnings.append(f"unknown field {key!r} in {section}, ignored")
		sections[section] = value

	merged_texts: dict[str, str] = {}
	for key, value in sections["texts"].items():
		if key in FIELD_SPECS and value is not None:
			merged_texts[key] = str(value)
	for key, value in (texts or {}).items():
		if value is not None:
			merged_texts[key] = value

	fields: list[FieldDescriptor] = []
	for base in default_fields(merged_texts):
		position = parse_position(sections["positions"].get(base.key), base.position)
		if position.warning:
			warnings.append(f"{base.key}: {position.warning}")
		style = _merge_style(base.key, base.style, sections["styles"].get(base.key), warnings)
		fields.append(dataclasses.replace(base, position=position.value, style=style))
	return LayoutResult(fields=tuple(fields), warnings=tuple(warnings))


#============================================
def read_layout_file(path: pathlib.Path, texts: dict[str, str] | None = None) -> LayoutResult:
	"""
	Load a layout JSON file; unreadable JSON falls back to the defaults.
	"""
	try:
		with path.open("r", encoding="utf-8") as handle:
			payload = json.load(handle)
	except (json.JSONDecodeError, UnicodeDecodeError) as error:
		layout = load_layout(None, texts)
		warning = f"layout file {path.name} is not valid JSON ({error}), using defaults"
		return dataclasses.replace(layout, warnings=(warning,) + layout.warnings)
	return load_layout(payload, texts)
