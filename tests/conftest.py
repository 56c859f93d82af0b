"""
Pytest configuration and fixtures for SICORE converter tests.
"""

import logging
from datetime import datetime

import pytest
from openpyxl import Workbook

from sicore_converter.logging_config import LOGGER_NAME

HEADERS = [
    "Fecha", "Tipo", "Punto de venta", "Letra", "Numero", "Neto",
    "IVA", "CUIT", "Razon social", "Total", "Alicuota", "Retencion",
]


def build_row(
    fecha=None,
    numero=None,
    neto=None,
    iva=None,
    cuit=None,
    retencion=None,
):
    """Build a 12-cell source row in the default column layout."""
    row = [None] * 12
    row[0] = fecha
    row[4] = numero
    row[5] = neto
    row[6] = iva
    row[7] = cuit
    row[11] = retencion
    return row


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging side effects between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def headers():
    """The header row of the sample spreadsheet."""
    return list(HEADERS)


@pytest.fixture
def make_row():
    """Factory for rows in the default column layout."""
    return build_row


@pytest.fixture
def sample_row():
    """A complete, valid data row."""
    return build_row(
        fecha=44562,
        numero="00045",
        neto=100.5,
        iva=21.1,
        cuit="20-12345678-9",
        retencion=5.25,
    )


@pytest.fixture
def sample_dataset(headers):
    """Header row plus three valid data rows."""
    return [
        headers,
        build_row(44562, "00045", 100.5, 21.1, "20-12345678-9", 5.25),
        build_row(44563, "0001234", 2000, 420, "30-71234567-1", 40),
        build_row(datetime(2022, 1, 3), 77, "350.75", "73.66", "27123456784", "7.02"),
    ]


@pytest.fixture
def workbook_file(tmp_path, sample_dataset):
    """Write the sample dataset to an .xlsx workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Retenciones"
    ws.append(sample_dataset[0])
    for row in sample_dataset[1:]:
        cells = list(row)
        if isinstance(cells[0], int):
            # Store serials as real dates, the way a spreadsheet would
            cells[0] = datetime(2022, 1, 1 + cells[0] - 44562)
        ws.append(cells)
    path = tmp_path / "retenciones.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def headers_only_workbook(tmp_path, headers):
    """A workbook holding only the header row."""
    wb = Workbook()
    wb.active.append(headers)
    path = tmp_path / "empty.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def xls_file(tmp_path, sample_dataset):
    """Write the sample dataset to a legacy .xls workbook."""
    xlwt = pytest.importorskip("xlwt")
    date_style = xlwt.easyxf(num_format_str="DD/MM/YYYY")

    book = xlwt.Workbook()
    sheet = book.add_sheet("Retenciones")
    for r, row in enumerate(sample_dataset):
        for c, value in enumerate(row):
            if value is None:
                continue
            if c == 0 and r > 0:
                if isinstance(value, int):
                    value = datetime(2022, 1, 1 + value - 44562)
                sheet.write(r, c, value, date_style)
            else:
                sheet.write(r, c, value)
    path = tmp_path / "retenciones.xls"
    book.save(str(path))
    return path
