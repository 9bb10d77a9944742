import json
import math

import pytest

import certificate_overlay.config
import certificate_overlay.layout_io


FontFamily = certificate_overlay.config.FontFamily
FontWeight = certificate_overlay.config.FontWeight
Position = certificate_overlay.config.Position


#============================================
def resolve_weight(field):
	return certificate_overlay.layout_io.resolve_font_weight(field.style).value


#============================================
def test_parse_hex_color_forms() -> None:
	"""
	Six-digit, three-digit and hash-less colors parse to unit floats.
	"""
	parsed = certificate_overlay.layout_io.parse_hex_color("#FF8000")
	assert parsed.warning is None
	assert parsed.value == pytest.approx((1.0, 128 / 255.0, 0.0))
	short = certificate_overlay.layout_io.parse_hex_color("#fff")
	assert short.value == (1.0, 1.0, 1.0)
	bare = certificate_overlay.layout_io.parse_hex_color("2a2a2a")
	assert bare.value == pytest.approx((42 / 255.0,) * 3)


#============================================
def test_parse_hex_color_malformed_is_black_with_warning() -> None:
	for value in ("#12", "#gggggg", "", None, "#1234567", "red"):
		parsed = certificate_overlay.layout_io.parse_hex_color(value)
		assert parsed.value == (0.0, 0.0, 0.0)
		assert parsed.warning


#============================================
def test_parse_unit_defaults_and_clamps() -> None:
	assert certificate_overlay.layout_io.parse_unit(None, 0.4).value == 0.4
	clamped = certificate_overlay.layout_io.parse_unit(1.7, 0.4)
	assert clamped.value == 1.0
	assert clamped.warning
	nan = certificate_overlay.layout_io.parse_unit(math.nan, 0.4)
	assert nan.value == 0.0
	assert nan.warning


#============================================
def test_parse_font_family_unknown_defaults() -> None:
	assert certificate_overlay.layout_io.parse_font_family("Times").value is FontFamily.TIMES
	unknown = certificate_overlay.layout_io.parse_font_family("Comic Sans")
	assert unknown.value is FontFamily.HELVETICA
	assert "Comic Sans" in unknown.warning


#============================================
def test_default_fields_order_and_positions() -> None:
	"""
	Every field is present in render order with the editor defaults.
	"""
	fields = certificate_overlay.layout_io.default_fields({"certTitle": "Award"})
	assert [field.key for field in fields] == list(certificate_overlay.config.FIELD_KEYS)
	by_key = {field.key: field for field in fields}
	assert by_key["certTitle"].text == "Award"
	assert by_key["name"].position == Position(0.5, 0.42)
	assert by_key["issuer"].position == Position(0.80, 0.88)
	assert resolve_weight(by_key["certTitle"]) is FontWeight.BOLD
	assert resolve_weight(by_key["award"]) is FontWeight.REGULAR


#============================================
def test_load_layout_merges_positions_and_styles() -> None:
	payload = {
		"positions": {"name": {"x": 0.3, "y": 1.4}},
		"styles": {
			"name": {"font": "times", "color": "#abc", "weight": 400, "size": 30},
			"date": {"bold": True, "auto_fit": True},
		},
		"texts": {"subtitle": "Awarded to"},
	}
	layout = certificate_overlay.layout_io.load_layout(payload)
	by_key = {field.key: field for field in layout.fields}
	assert by_key["name"].position == Position(0.3, 1.0)
	assert by_key["name"].style.font is FontFamily.TIMES
	assert by_key["name"].style.color == "#abc"
	assert by_key["name"].style.size == 30.0
	assert resolve_weight(by_key["name"]) is FontWeight.REGULAR
	assert resolve_weight(by_key["date"]) is FontWeight.BOLD
	assert by_key["date"].style.auto_fit is True
	assert by_key["subtitle"].text == "Awarded to"
	assert any("clamped" in warning for warning in layout.warnings)


#============================================
def test_load_layout_reports_bad_values() -> None:
	"""
	Bad values fall back to defaults and are reported, never raised.
	"""
	payload = {
		"positions": {"bogus": {"x": 0.1, "y": 0.1}, "award": "middle"},
		"styles": {"award": {"color": "#zzzzzz", "size": "huge", "font": "wingdings"}},
	}
	layout = certificate_overlay.layout_io.load_layout(payload)
	by_key = {field.key: field for field in layout.fields}
	assert by_key["award"].position == Position(0.5, 0.54)
	assert by_key["award"].style.color == "#000000"
	assert by_key["award"].style.size == 18.0
	assert by_key["award"].style.font is FontFamily.HELVETICA
	warnings = " | ".join(layout.warnings)
	assert "bogus" in warnings
	assert "zzzzzz" in warnings
	assert "huge" in warnings
	assert "wingdings" in warnings


#============================================
def test_explicit_texts_override_layout_texts(tmp_path) -> None:
	path = tmp_path / "layout.json"
	path.write_text(json.dumps({"texts": {"issuer": "From file"}}), encoding="utf-8")
	layout = certificate_overlay.layout_io.read_layout_file(path, {"issuer": "From CLI"})
	by_key = {field.key: field for field in layout.fields}
	assert by_key["issuer"].text == "From CLI"
	assert layout.warnings == ()


#============================================
def test_parse_flag_reads_json_strings() -> None:
	assert certificate_overlay.layout_io.parse_flag("false", True).value is False
	assert certificate_overlay.layout_io.parse_flag("Yes", False).value is True
	assert certificate_overlay.layout_io.parse_flag(0, True).value is False
	odd = certificate_overlay.layout_io.parse_flag("sometimes", False)
	assert odd.value is False
	assert "sometimes" in odd.warning


#============================================
def test_string_flags_in_layout_are_not_truthy() -> None:
	"""
	The string "false" turns bold and auto-fit off.
	"""
	payload = {
		"styles": {
			"name": {"bold": "false", "auto_fit": "false"},
			"award": {"bold": "maybe"},
		},
	}
	layout = certificate_overlay.layout_io.load_layout(payload)
	by_key = {field.key: field for field in layout.fields}
	assert by_key["name"].style.bold is False
	assert by_key["name"].style.auto_fit is False
	assert resolve_weight(by_key["name"]) is FontWeight.REGULAR
	assert by_key["award"].style.bold is None
	assert any("maybe" in warning for warning in layout.warnings)


#============================================
def test_resolve_font_weight_defaults_unreadable_weight() -> None:
	heavy = certificate_overlay.config.FieldStyle(weight="heavy")
	parsed = certificate_overlay.layout_io.resolve_font_weight(heavy)
	assert parsed.value is FontWeight.REGULAR
	assert "heavy" in parsed.warning
	keyword = certificate_overlay.config.FieldStyle(weight="bold")
	assert certificate_overlay.layout_io.resolve_font_weight(keyword).value is FontWeight.BOLD


#============================================
def test_broken_layout_file_falls_back_to_defaults(tmp_path) -> None:
	path = tmp_path / "layout.json"
	path.write_text("{not json", encoding="utf-8")
	layout = certificate_overlay.layout_io.read_layout_file(path, {"issuer": "From CLI"})
	defaults = certificate_overlay.layout_io.default_fields({"issuer": "From CLI"})
	assert layout.fields == defaults
	assert len(layout.warnings) == 1
	assert "layout.json" in layout.warnings[0]
