"""
CLI entry points for certificate preview rendering.
"""

# Standard Library
import argparse
import datetime
import pathlib
import time

# local repo modules
import certificate_overlay as co
import certificate_overlay.config
import certificate_overlay.geometry
import certificate_overlay.layout_io
import certificate_overlay.render
import certificate_overlay.rows
import certificate_overlay.templates


RenderConfig = co.config.RenderConfig

PAPER_SIZES = co.config.PAPER_SIZES
ORIENTATIONS = co.config.ORIENTATIONS
OUTPUT_FORMATS = co.config.OUTPUT_FORMATS
DEFAULT_PAPER = co.config.DEFAULT_PAPER
DEFAULT_ORIENTATION = co.config.DEFAULT_ORIENTATION
DEFAULT_DPI = co.config.DEFAULT_DPI
MAX_PREVIEW_ROWS = co.config.MAX_PREVIEW_ROWS


#============================================
def build_render_config(args: argparse.Namespace) -> RenderConfig:
	"""
	Build render config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderConfig.
	"""
	return RenderConfig(
		geometry=co.geometry.page_geometry(args.paper, args.orientation),
		output_format=args.output_format,
		workers=max(1, args.workers),
		dpi=args.dpi,
	)


#============================================
def build_texts(args: argparse.Namespace) -> dict[str, str]:
	"""
	Collect literal field texts given on the command line.
	"""
	texts: dict[str, str] = {}
	for key, value in (
		("certTitle", args.title),
		("subtitle", args.subtitle),
		("description", args.description),
		("date", args.date_text),
		("issuer", args.issuer),
	):
		if value is not None:
			texts[key] = value
	if "date" not in texts:
		texts["date"] = datetime.date.today().isoformat()
	return texts


#============================================
def load_rows(args: argparse.Namespace) -> list[co.config.RecipientRow]:
	if args.rows_path is not None:
		return co.rows.parse_rows_file(pathlib.Path(args.rows_path))
	if args.rows_json_path is not None:
		return co.rows.parse_rows_json_file(pathlib.Path(args.rows_json_path))
	if not args.name or not args.award:
		raise co.rows.RowParseError("Provide at least 1 recipient (manual or upload).")
	return [co.rows.manual_row(args.name, args.award)]


#============================================
def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Render certificate previews over a background template.")

	input_group = parser.add_argument_group("Input")
	source = input_group.add_mutually_exclusive_group()
	source.add_argument("-r", "--rows", dest="rows_path", default=None, help="Recipient CSV (name,title[,date,issuer]) or TXT (Name - Title).")
	source.add_argument("-j", "--rows-json", dest="rows_json_path", default=None, help="JSON array of {name, award, date, issuer}.")
	input_group.add_argument("--name", dest="name", default=None, help="Manual entry recipient name.")
	input_group.add_argument("--award", dest="award", default=None, help="Manual entry award or title.")
	input_group.add_argument("-t", "--template", dest="template_path", default=None, help="Background template (PNG or JPEG).")
	input_group.add_argument("--templates-dir", dest="templates_dir", default=None, help="Template directory for --template-key and --list-templates.")
	input_group.add_argument("-k", "--template-key", dest="template_key", default=None, help="Template key relative to --templates-dir.")
	input_group.add_argument("--list-templates", dest="list_templates", action="store_true", help="List templates in --templates-dir and exit.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-l", "--layout", dest="layout_path", default=None, help="Layout JSON with positions, styles and texts.")
	layout_group.add_argument("--title", dest="title", default=None, help="Certificate title text.")
	layout_group.add_argument("--subtitle", dest="subtitle", default=None, help="Text below the title.")
	layout_group.add_argument("--description", dest="description", default=None, help="Text below the name.")
	layout_group.add_argument("--date", dest="date_text", default=None, help="Default date when a row has none.")
	layout_group.add_argument("--issuer", dest="issuer", default=None, help="Default issuer when a row has none.")
	layout_group.add_argument("-p", "--paper", dest="paper", type=str.upper, choices=list(PAPER_SIZES), default=DEFAULT_PAPER, help="Paper size.")
	layout_group.add_argument("--orientation", dest="orientation", type=str.lower, choices=list(ORIENTATIONS), default=DEFAULT_ORIENTATION, help="Page orientation.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF/ZIP path, or directory for PNG files.")
	output_group.add_argument("-f", "--format", dest="output_format", choices=list(OUTPUT_FORMATS), default="pdf", help="Output format.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	output_group.add_argument("--dpi", dest="dpi", type=int, default=DEFAULT_DPI, help="PNG resolution.")
	output_group.add_argument("-w", "--workers", dest="workers", type=int, default=1, help="Page rendering threads.")
	return parser


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = build_parser()
	args = parser.parse_args(argv)
	if args.list_templates:
		if args.templates_dir is None:
			parser.error("--list-templates requires --templates-dir")
		return args
	if args.output_path is None:
		parser.error("the following arguments are required: -o/--output")
	if args.template_path is None and args.template_key is None:
		parser.error("No template selected. Pass --template or --template-key.")
	if args.template_key is not None and args.templates_dir is None:
		parser.error("--template-key requires --templates-dir")
	return args


#============================================
def resolve_template_path(args: argparse.Namespace) -> tuple[pathlib.Path, str]:
	if args.template_path is not None:
		path = pathlib.Path(args.template_path)
		return (path, path.name)
	templates = co.templates.list_templates(pathlib.Path(args.templates_dir))
	for template in templates:
		if template.key == args.template_key:
			return (pathlib.Path(template.path), template.key)
	raise FileNotFoundError(f"Template not found: {args.template_key}")


#============================================
def print_templates(directory: pathlib.Path) -> None:
	templates = co.templates.list_templates(directory)
	print(f"Templates found: {len(templates)}")
	for template in templates:
		print(f"{template.key}\t{template.label}")


#============================================
def run_pipeline(args: argparse.Namespace) -> co.config.RenderResult:
	"""
	Run the full pipeline from recipient input to rendered output.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderResult.
	"""
	config = build_render_config(args)
	print("Certificate preview pipeline")
	print(f"Output: {args.output_path}")
	print(f"Format: {config.output_format}")
	print(f"Paper: {config.geometry.paper} {config.geometry.orientation} ({config.geometry.width:.0f}x{config.geometry.height:.0f} pt)")

	start_time = time.perf_counter()
	rows = load_rows(args)
	print(f"Recipients loaded: {len(rows)}")
	if len(rows) > MAX_PREVIEW_ROWS:
		print(f"Preview limit: rendering first {MAX_PREVIEW_ROWS} of {len(rows)}")

	template_path, template_key = resolve_template_path(args)
	template = co.templates.load_template(template_path, key=template_key)
	print(f"Template: {template.key} ({template.format} {template.width}x{template.height})")

	texts = build_texts(args)
	if args.layout_path is not None:
		layout = co.layout_io.read_layout_file(pathlib.Path(args.layout_path), texts)
	else:
		layout = co.layout_io.load_layout(None, texts)

	output_path = pathlib.Path(args.output_path)
	result = co.render.render_certificates(rows, layout.fields, template, output_path, config)
	result.warnings[:0] = [w for w in layout.warnings if w not in result.warnings]
	for warning in result.warnings:
		print(f"Warning: {warning}")
	if result.warnings:
		print(f"Warnings: {len(result.warnings)}")
	print(f"Pages written: {result.pages}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	co.render.write_manifest(pathlib.Path(manifest_path), template, layout.fields, config, result)

	total_time = time.perf_counter() - start_time
	print(f"Timing: total={total_time:.2f}s")
	print(f"Manifest written: {manifest_path}")
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	parser = build_parser()
	args = parse_args(argv)
	if args.list_templates:
		print_templates(pathlib.Path(args.templates_dir))
		return
	try:
		run_pipeline(args)
	except (co.rows.RowParseError, co.templates.UnsupportedTemplateError, FileNotFoundError) as error:
		parser.error(str(error))
