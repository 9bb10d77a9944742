import io
import json
import os
import pathlib
import zipfile

import PIL.Image
import pypdf
import pytest

import conftest
import certificate_overlay.config
import certificate_overlay.geometry
import certificate_overlay.layout
import certificate_overlay.layout_io
import certificate_overlay.render
import certificate_overlay.templates


RecipientRow = certificate_overlay.config.RecipientRow
RenderConfig = certificate_overlay.config.RenderConfig

ROWS = [
	RecipientRow("Ada Lovelace", "Best Analyst"),
	RecipientRow("Alan Turing", "Codebreaker"),
	RecipientRow("Grace Hopper", "Compiler Pioneer"),
]
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


#============================================
def build_config(output_format: str = "pdf", workers: int = 1) -> RenderConfig:
	return RenderConfig(
		geometry=certificate_overlay.geometry.page_geometry("A4"),
		output_format=output_format,
		workers=workers,
		dpi=36,
	)


#============================================
def page_texts(path: pathlib.Path) -> list[str]:
	reader = pypdf.PdfReader(str(path))
	return [page.extract_text() for page in reader.pages]


#============================================
def test_pdf_has_one_page_per_row(tmp_path, png_template_path) -> None:
	"""
	Three recipients render to three landscape pages naming each of them.
	"""
	template = certificate_overlay.templates.load_template(png_template_path)
	output = tmp_path / "out" / "preview.pdf"
	result = certificate_overlay.render.render_certificates(
		ROWS,
		certificate_overlay.layout_io.default_fields(),
		template,
		output,
		build_config(),
	)
	assert result.pages == 3
	assert result.rows_rendered == 3
	assert result.output_paths == [str(output)]
	reader = pypdf.PdfReader(str(output))
	assert len(reader.pages) == 3
	for page, row in zip(reader.pages, ROWS):
		assert float(page.mediabox.width) == pytest.approx(842.0)
		assert float(page.mediabox.height) == pytest.approx(595.0)
		assert row.name in page.extract_text()


#============================================
def test_threaded_render_keeps_row_order(tmp_path, png_template_path) -> None:
	template = certificate_overlay.templates.load_template(png_template_path)
	output = tmp_path / "threaded.pdf"
	certificate_overlay.render.render_certificates(
		ROWS,
		certificate_overlay.layout_io.default_fields(),
		template,
		output,
		build_config(workers=3),
	)
	texts = page_texts(output)
	for text, row in zip(texts, ROWS):
		assert row.name in text


#============================================
def test_page_pdf_is_deterministic(png_template_path) -> None:
	"""
	Rendering the same plan twice gives identical bytes.
	"""
	template = certificate_overlay.templates.load_template(png_template_path)
	geometry = certificate_overlay.geometry.page_geometry("LETTER")
	fields = certificate_overlay.layout_io.default_fields()
	first = certificate_overlay.layout.plan_page(ROWS[0], fields, geometry, template)
	second = certificate_overlay.layout.plan_page(ROWS[0], fields, geometry, template)
	assert first == second
	assert certificate_overlay.render.render_page_pdf(first, template) == certificate_overlay.render.render_page_pdf(second, template)


#============================================
def test_zip_of_pngs(tmp_path, png_template_path) -> None:
	template = certificate_overlay.templates.load_template(png_template_path)
	output = tmp_path / "certificates_preview.zip"
	result = certificate_overlay.render.render_certificates(
		ROWS[:2],
		certificate_overlay.layout_io.default_fields(),
		template,
		output,
		build_config("zip"),
	)
	assert result.pages == 2
	with zipfile.ZipFile(output) as archive:
		assert archive.namelist() == ["certificate_1.png", "certificate_2.png"]
		data = archive.read("certificate_1.png")
	assert data.startswith(PNG_SIGNATURE)
	image = PIL.Image.open(io.BytesIO(data))
	assert abs(image.size[0] - 421) <= 1
	assert abs(image.size[1] - 298) <= 1


#============================================
def test_loose_png_files(tmp_path, png_template_path) -> None:
	template = certificate_overlay.templates.load_template(png_template_path)
	output_dir = tmp_path / "pngs"
	result = certificate_overlay.render.render_certificates(
		ROWS[:1],
		certificate_overlay.layout_io.default_fields(),
		template,
		output_dir,
		build_config("png"),
	)
	assert result.output_paths == [str(output_dir / "certificate_1.png")]
	assert (output_dir / "certificate_1.png").read_bytes().startswith(PNG_SIGNATURE)


#============================================
def test_manifest_reports_cap_and_layout(tmp_path, png_template_path) -> None:
	template = certificate_overlay.templates.load_template(png_template_path)
	rows = [RecipientRow(f"Person {index}", "Award") for index in range(7)]
	fields = certificate_overlay.layout_io.default_fields()
	config = build_config()
	result = certificate_overlay.render.render_certificates(rows, fields, template, tmp_path / "p.pdf", config)
	manifest = tmp_path / "p.pdf.json"
	certificate_overlay.render.write_manifest(manifest, template, fields, config, result)
	data = json.loads(manifest.read_text(encoding="utf-8"))
	assert data["rows_total"] == 7
	assert data["rows_rendered"] == 5
	assert data["rows_dropped"] == 2
	assert data["pages"] == 5
	assert data["template"] == "classic.png"
	assert data["fields"]["name"]["weight"] == "bold"


#============================================
def test_jpeg_template_accepted(tmp_path) -> None:
	path = tmp_path / "photo.jpg"
	path.write_bytes(conftest.make_image_bytes(120, 160, "JPEG"))
	template = certificate_overlay.templates.load_template(path)
	assert (template.format, template.width, template.height) == ("JPEG", 120, 160)
	assert template.key == "photo.jpg"


#============================================
def test_unsupported_template_rejected(tmp_path) -> None:
	"""
	Only PNG and JPEG backgrounds are accepted.
	"""
	with pytest.raises(certificate_overlay.templates.UnsupportedTemplateError):
		certificate_overlay.templates.load_template(conftest.make_image_bytes(20, 20, "GIF"))
	with pytest.raises(certificate_overlay.templates.UnsupportedTemplateError):
		certificate_overlay.templates.load_template(b"definitely not an image")


#============================================
def test_list_templates(tmp_path) -> None:
	root = tmp_path / "templates"
	(root / "formal").mkdir(parents=True)
	(root / "classic.png").write_bytes(conftest.make_image_bytes(10, 10, "PNG"))
	(root / "formal" / "gold.JPG").write_bytes(conftest.make_image_bytes(10, 10, "JPEG"))
	(root / "notes.txt").write_text("skip", encoding="utf-8")
	templates = certificate_overlay.templates.list_templates(root)
	assert [(t.key, t.label) for t in templates] == [("classic.png", "classic"), ("formal/gold.JPG", "gold")]
	assert certificate_overlay.templates.list_templates(tmp_path / "missing") == []


#============================================
def test_template_image_stored_once(tmp_path) -> None:
	"""
	A five page preview does not carry five copies of the background.
	"""
	noise = PIL.Image.frombytes("RGB", (200, 200), os.urandom(200 * 200 * 3))
	buffer = io.BytesIO()
	noise.save(buffer, format="PNG")
	template = certificate_overlay.templates.load_template(buffer.getvalue(), key="noise.png")
	rows = [RecipientRow(f"Person {index}", "Award") for index in range(5)]
	fields = certificate_overlay.layout_io.default_fields()
	single = tmp_path / "single.pdf"
	many = tmp_path / "many.pdf"
	certificate_overlay.render.render_certificates(rows[:1], fields, template, single, build_config())
	certificate_overlay.render.render_certificates(rows, fields, template, many, build_config())
	assert len(pypdf.PdfReader(str(many)).pages) == 5
	assert many.stat().st_size < 2 * single.stat().st_size
