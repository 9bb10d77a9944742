"""
Font resolution and text measurement.
"""

# PIP3 modules
import reportlab.pdfbase.pdfmetrics

# local repo modules
import certificate_overlay as co
import certificate_overlay.config


FontFamily = co.config.FontFamily
FontWeight = co.config.FontWeight

PDF_FONT_NAMES = {
	(FontFamily.HELVETICA, FontWeight.REGULAR): "Helvetica",
	(FontFamily.HELVETICA, FontWeight.BOLD): "Helvetica-Bold",
	(FontFamily.TIMES, FontWeight.REGULAR): "Times-Roman",
	(FontFamily.TIMES, FontWeight.BOLD): "Times-Bold",
	(FontFamily.COURIER, FontWeight.REGULAR): "Courier",
	(FontFamily.COURIER, FontWeight.BOLD): "Courier-Bold",
}
WATERMARK_FONT = PDF_FONT_NAMES[(FontFamily.HELVETICA, FontWeight.BOLD)]


#============================================
def font_name_for(family: FontFamily, weight: FontWeight) -> str:
	"""
	Map a font family and weight to a PDF base font name.

	Args:
		family: Font family.
		weight: Font weight.

	Returns:
		ReportLab font name.
	"""
	return PDF_FONT_NAMES[(family, weight)]


#============================================
def measure_text(text: str, font_name: str, size: float) -> float:
	return reportlab.pdfbase.pdfmetrics.stringWidth(text or "", font_name, size)


class FontCache:
	"""
	Resolved fonts for one document, keyed by (family, weight).
	"""

	def __init__(self) -> None:
		self._fonts: dict[tuple[FontFamily, FontWeight], reportlab.pdfbase.pdfmetrics.Font] = {}

	def __len__(self) -> int:
		return len(self._fonts)

	def __contains__(self, key: tuple[FontFamily, FontWeight]) -> bool:
		return key in self._fonts

	def get(self, family: FontFamily, weight: FontWeight) -> reportlab.pdfbase.pdfmetrics.Font:
		key = (family, weight)
		font = self._fonts.get(key)
		if font is None:
			font = reportlab.pdfbase.pdfmetrics.getFont(font_name_for(family, weight))
			self._fonts[key] = font
		return font
