"""
Fixed processing rules.

The identifier column and output naming are not user-configurable.
"""

IDENTIFIER_COLUMN = "Matrícula"

OUTPUT_FILENAME = "processed_data.xlsx"
OUTPUT_SHEET_NAME = "Filtered"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

XLSX_EXTENSIONS = (".xlsx", ".xlsm")
XLS_EXTENSIONS = (".xls",)
CSV_EXTENSIONS = (".csv",)

CSV_DELIMITERS = [",", ";", "\t", "|"]

# SheetJS-style placeholder for header cells with no text
EMPTY_HEADER = "__EMPTY"

MISSING_INPUT_MESSAGE = "Please select a file and enter the identifiers to remove."
READ_ERROR_MESSAGE = "Could not read the file."
