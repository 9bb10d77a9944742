"""
Rendering of page plans to PDF, PNG and ZIP output.
"""

# Standard Library
import concurrent.futures
import io
import json
import pathlib
import zipfile

# PIP3 modules
import fitz
import pypdf
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import certificate_overlay as co
import certificate_overlay.config
import certificate_overlay.layout
import certificate_overlay.layout_io
import certificate_overlay.templates


PagePlan = co.layout.PagePlan
TextItem = co.layout.TextItem
ImageItem = co.layout.ImageItem
TemplateImage = co.templates.TemplateImage
RecipientRow = co.config.RecipientRow
FieldDescriptor = co.config.FieldDescriptor
RenderConfig = co.config.RenderConfig
RenderResult = co.config.RenderResult

PROGRESS_BAR_WIDTH = co.config.PROGRESS_BAR_WIDTH
DEFAULT_DPI = co.config.DEFAULT_DPI
PNG_NAME_TEMPLATE = "certificate_{index}.png"


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def draw_text_item(pdf: reportlab.pdfgen.canvas.Canvas, item: TextItem) -> None:
	"""
	Draw a text item onto the PDF canvas.

	Args:
		pdf: ReportLab canvas.
		item: TextItem to draw.
	"""
	pdf.saveState()
	pdf.setFillColorRGB(item.color[0], item.color[1], item.color[2])
	if item.opacity < 1.0:
		pdf.setFillAlpha(item.opacity)
	pdf.setFont(item.font_name, item.size)
	if item.rotation:
		pdf.translate(item.x, item.y)
		pdf.rotate(item.rotation)
		pdf.drawString(0, 0, item.text)
	else:
		pdf.drawString(item.x, item.y, item.text)
	pdf.restoreState()


#============================================
def draw_image_item(
	pdf: reportlab.pdfgen.canvas.Canvas,
	item: ImageItem,
	image_reader: reportlab.lib.utils.ImageReader,
) -> None:
	pdf.drawImage(
		image_reader,
		item.x,
		item.y,
		width=item.width,
		height=item.height,
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)


#============================================
def draw_page_plan(
	pdf: reportlab.pdfgen.canvas.Canvas,
	plan: PagePlan,
	image_reader: reportlab.lib.utils.ImageReader | None,
) -> None:
	"""
	Execute a page plan on the current canvas page.

	Args:
		pdf: ReportLab canvas.
		plan: Page plan.
		image_reader: Background reader, or None to skip image items.
	"""
	for item in plan.items:
		if isinstance(item, ImageItem):
			if image_reader is not None:
				draw_image_item(pdf, item, image_reader)
			continue
		if isinstance(item, TextItem):
			draw_text_item(pdf, item)


#============================================
def render_page_pdf(plan: PagePlan, template: TemplateImage | None) -> bytes:
	"""
	Render one page plan into a single-page PDF.

	Args:
		plan: Page plan.
		template: Background template, or None.

	Returns:
		PDF bytes. Output is deterministic for a given plan and template.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(
		buffer,
		pagesize=(plan.geometry.width, plan.geometry.height),
		invariant=1,
	)
	image_reader = None
	if template is not None:
		image_reader = reportlab.lib.utils.ImageReader(template.image)
	draw_page_plan(pdf, plan, image_reader)
	pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def render_page_pdfs(
	plans: list[PagePlan],
	template: TemplateImage | None,
	workers: int = 1,
) -> list[bytes]:
	"""
	Render page plans into single-page PDFs, preserving plan order.

	Args:
		plans: Page plans.
		template: Background template.
		workers: Thread count; 1 renders serially.

	Returns:
		List of PDF bytes, one per plan.
	"""
	total = len(plans)
	if workers > 1 and total > 1:
		with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
			return list(executor.map(lambda plan: render_page_pdf(plan, template), plans))

	pages: list[bytes] = []
	if total > 0:
		print_progress("Pages", 0, total)
	for index, plan in enumerate(plans, start=1):
		pages.append(render_page_pdf(plan, template))
		print_progress("Pages", index, total)
	if total > 0:
		print()
	return pages


#============================================
def assemble_pdf(page_pdfs: list[bytes], output_path: pathlib.Path) -> int:
	"""
	Concatenate single-page PDFs into one document.

	Args:
		page_pdfs: PDF bytes per page.
		output_path: Output PDF path.

	Returns:
		Number of pages written.
	"""
	writer = pypdf.PdfWriter()
	for data in page_pdfs:
		reader = pypdf.PdfReader(io.BytesIO(data))
		for page in reader.pages:
			writer.add_page(page)
	# pages share the template image stream
	writer.compress_identical_objects()
	output_path.parent.mkdir(parents=True, exist_ok=True)
	with output_path.open("wb") as handle:
		writer.write(handle)
	return len(writer.pages)


#============================================
def rasterize_pdf_pages(pdf_bytes: bytes, dpi: int = DEFAULT_DPI) -> list[bytes]:
	"""
	Render every page of a PDF to PNG bytes.

	Args:
		pdf_bytes: PDF document bytes.
		dpi: Output resolution.

	Returns:
		PNG bytes per page.
	"""
	document = fitz.open(stream=pdf_bytes, filetype="pdf")
	try:
		images: list[bytes] = []
		for page in document:
			pixmap = page.get_pixmap(dpi=dpi, alpha=False)
			images.append(pixmap.tobytes("png"))
		return images
	finally:
		document.close()


#============================================
def write_png_files(pngs: list[bytes], output_dir: pathlib.Path) -> list[pathlib.Path]:
	output_dir.mkdir(parents=True, exist_ok=True)
	paths: list[pathlib.Path] = []
	for index, data in enumerate(pngs, start=1):
		path = output_dir / PNG_NAME_TEMPLATE.format(index=index)
		path.write_bytes(data)
		paths.append(path)
	return paths


#============================================
def write_png_zip(pngs: list[bytes], output_path: pathlib.Path) -> None:
	output_path.parent.mkdir(parents=True, exist_ok=True)
	with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as archive:
		for index, data in enumerate(pngs, start=1):
			archive.writestr(PNG_NAME_TEMPLATE.format(index=index), data)


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	template: TemplateImage | None,
	fields: tuple[FieldDescriptor, ...],
	config: RenderConfig,
	result: RenderResult,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		template: Background template.
		fields: Field descriptors used for the render.
		config: Render configuration.
		result: Render result.
	"""
	layout = {}
	for descriptor in fields:
		family = co.layout_io.parse_font_family(descriptor.style.font).value
		font_weight = co.layout_io.resolve_font_weight(descriptor.style).value
		layout[descriptor.key] = {
			"label": co.config.FIELD_LABELS.get(descriptor.key, descriptor.key),
			"text": descriptor.text,
			"x": descriptor.position.x,
			"y": descriptor.position.y,
			"font": family.value,
			"weight": font_weight.value,
			"color": descriptor.style.color,
			"size": descriptor.style.size,
			"min_size": descriptor.style.min_size,
			"auto_fit": descriptor.style.auto_fit,
		}
	data = {
		"template": None if template is None else template.key,
		"template_format": None if template is None else template.format,
		"paper": config.geometry.paper,
		"orientation": config.geometry.orientation,
		"page_width": config.geometry.width,
		"page_height": config.geometry.height,
		"format": config.output_format,
		"rows_total": result.rows_total,
		"rows_rendered": result.rows_rendered,
		"rows_dropped": result.rows_total - result.rows_rendered,
		"pages": result.pages,
		"outputs": result.output_paths,
		"warnings": result.warnings,
		"fields": layout,
	}
	manifest_path.parent.mkdir(parents=True, exist_ok=True)
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)


#============================================
def render_certificates(
	rows: list[RecipientRow],
	fields: tuple[FieldDescriptor, ...],
	template: TemplateImage | None,
	output_path: pathlib.Path,
	config: RenderConfig,
) -> RenderResult:
	"""
	Plan and render certificate pages, then write the requested output.

	Args:
		rows: Recipient rows; only the first MAX_PREVIEW_ROWS are rendered.
		fields: Field descriptors.
		template: Background template.
		output_path: PDF or ZIP path, or a directory for loose PNG files.
		config: Render configuration.

	Returns:
		RenderResult.
	"""
	if config.output_format not in co.config.OUTPUT_FORMATS:
		raise ValueError(f"Unknown output format: {config.output_format}")
	plans = co.layout.plan_document(rows, fields, config.geometry, template)
	warnings: list[str] = []
	for plan in plans:
		for warning in plan.warnings:
			if warning not in warnings:
				warnings.append(warning)

	page_pdfs = render_page_pdfs(plans, template, config.workers)
	output_paths: list[str] = []
	if config.output_format == "pdf":
		pages = assemble_pdf(page_pdfs, output_path)
		output_paths.append(str(output_path))
	else:
		pngs: list[bytes] = []
		for data in page_pdfs:
			pngs.extend(rasterize_pdf_pages(data, config.dpi))
		pages = len(pngs)
		if config.output_format == "zip":
			write_png_zip(pngs, output_path)
			output_paths.append(str(output_path))
		else:
			output_paths.extend(str(path) for path in write_png_files(pngs, output_path))

	return RenderResult(
		rows_total=len(rows),
		rows_rendered=len(plans),
		pages=pages,
		output_paths=output_paths,
		warnings=warnings,
	)
