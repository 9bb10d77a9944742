"""
Recipient row input from CSV, TXT, JSON records or manual entry.
"""

# Standard Library
import csv
import io
import json
import pathlib

# local repo modules
import certificate_overlay as co
import certificate_overlay.config


RecipientRow = co.config.RecipientRow

TXT_SEPARATOR = " - "


class RowParseError(ValueError):
	pass


#============================================
def _split_lines(text: str) -> list[str]:
	return (text or "").replace("\r", "").split("\n")


#============================================
def parse_csv(text: str) -> list[RecipientRow]:
	"""
	Parse CSV text with a header row into recipient rows.

	The name and title columns are required; date and issuer are optional.
	Rows without a name or title are skipped.

	Args:
		text: CSV text.

	Returns:
		List of RecipientRow.
	"""
	lines = [line for line in _split_lines(text) if line]
	if len(lines) < 2:
		raise RowParseError("CSV must include header + at least 1 row.")

	reader = csv.reader(io.StringIO("\n".join(lines)))
	header = [column.strip().lower() for column in next(reader)]
	if "name" not in header or "title" not in header:
		raise RowParseError("CSV must include headers: name,title (date optional, issuer optional).")
	indexes = {column: header.index(column) for column in ("name", "title", "date", "issuer") if column in header}

	def cell(columns: list[str], column: str) -> str:
		index = indexes.get(column)
		if index is None or index >= len(columns):
			return ""
		return columns[index].strip()

	rows: list[RecipientRow] = []
	for columns in reader:
		name = cell(columns, "name")
		award = cell(columns, "title")
		if not name or not award:
			continue
		rows.append(RecipientRow(name=name, award=award, date=cell(columns, "date"), issuer=cell(columns, "issuer")))

	if not rows:
		raise RowParseError("No valid rows found (need name + title).")
	return rows


#============================================
def parse_txt(text: str) -> list[RecipientRow]:
	"""
	Parse TXT lines of the form "Name - Title".

	Args:
		text: TXT content.

	Returns:
		List of RecipientRow.
	"""
	lines = [line.strip() for line in _split_lines(text)]
	lines = [line for line in lines if line]
	if not lines:
		raise RowParseError("TXT must include at least 1 line.")

	rows: list[RecipientRow] = []
	for line in lines:
		parts = line.split(TXT_SEPARATOR)
		if len(parts) < 2:
			continue
		rows.append(
			RecipientRow(
				name=parts[0].strip(),
				award=TXT_SEPARATOR.join(parts[1:]).strip(),
			)
		)
	if not rows:
		raise RowParseError('TXT lines must be like: "Name - Title"')
	return rows


#============================================
def parse_rows_file(path: pathlib.Path) -> list[RecipientRow]:
	suffix = path.suffix.lower()
	if suffix not in (".csv", ".txt"):
		raise RowParseError("Upload a .csv or .txt file.")
	# utf-8-sig tolerates spreadsheet exports saved with a BOM
	try:
		text = path.read_text(encoding="utf-8-sig")
	except UnicodeDecodeError as error:
		raise RowParseError(f"{path.name} is not UTF-8 text. Save it as UTF-8 and try again.") from error
	if suffix == ".csv":
		return parse_csv(text)
	return parse_txt(text)


#============================================
def _as_text(value) -> str:
	if value is None:
		return ""
	return str(value).strip()


#============================================
def normalize_records(records) -> list[RecipientRow]:
	"""
	Normalize JSON-style records into recipient rows.

	The award falls back to a "title" key. Records without a name or award
	are dropped.

	Args:
		records: List of dicts.

	Returns:
		List of RecipientRow.
	"""
	if not isinstance(records, list):
		raise RowParseError("rows_json must be array.")
	rows: list[RecipientRow] = []
	for record in records:
		if not isinstance(record, dict):
			continue
		award = record.get("award")
		if award is None:
			award = record.get("title")
		row = RecipientRow(
			name=_as_text(record.get("name")),
			award=_as_text(award),
			date=_as_text(record.get("date")),
			issuer=_as_text(record.get("issuer")),
		)
		if row.name and row.award:
			rows.append(row)
	if not rows:
		raise RowParseError("No valid rows found.")
	return rows


#============================================
def parse_rows_json_file(path: pathlib.Path) -> list[RecipientRow]:
	"""
	Read a JSON array of recipient records.

	Unreadable JSON is treated as an empty list.

	Args:
		path: JSON file path.

	Returns:
		List of RecipientRow.
	"""
	try:
		with path.open("r", encoding="utf-8-sig") as handle:
			records = json.load(handle)
	except (json.JSONDecodeError, UnicodeDecodeError):
		records = []
	return normalize_records(records)


#============================================
def manual_row(name: str, award: str, date: str = "", issuer: str = "") -> RecipientRow:
	return RecipientRow(name=_as_text(name), award=_as_text(award), date=_as_text(date), issuer=_as_text(issuer))
