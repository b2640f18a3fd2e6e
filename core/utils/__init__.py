"""公共工具：Excel 读取。"""

from .excel_io import cell_value, iter_sheet_rows, open_workbook_read, row_cell

__all__ = [
    "cell_value",
    "iter_sheet_rows",
    "open_workbook_read",
    "row_cell",
]
