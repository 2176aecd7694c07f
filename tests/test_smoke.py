import base64
import hashlib

from fastapi.testclient import TestClient

from conftest import build_xlsx, sheet_values
from xlsx_processor.main import app

client = TestClient(app)

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_index_serves_form():
    r = client.get("/")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert 'accept=".xlsx,.xls"' in r.text
    assert "<textarea" in r.text


def test_process_removes_listed_rows(students_xlsx):
    files = {"file": ("alunos.xlsx", students_xlsx, XLSX)}
    r = client.post("/process", files=files, data={"identifiers": "A1\n"})
    assert r.status_code == 200

    data = r.json()
    assert data["summary"] == {"total_rows": 3, "removed_rows": 2, "remaining_rows": 1}
    assert data["processed_file"]["filename"] == "processed_data.xlsx"
    assert data["processed_file"]["media_type"] == XLSX

    out_bytes = base64.b64decode(data["processed_file"]["content_b64"])
    assert hashlib.sha256(out_bytes).hexdigest() == data["processed_file"]["sha256"]

    names, values = sheet_values(out_bytes)
    assert names == ["Filtered"]
    assert values == [("Matrícula", "Name"), ("B2", "Y")]


def test_numeric_identifiers_match_pasted_text():
    raw = build_xlsx([("Matrícula", "Name"), (12345, "X"), (67890, "Y")])
    files = {"file": ("alunos.xlsx", raw, XLSX)}
    r = client.post("/process", files=files, data={"identifiers": "  12345  \n\n"})
    assert r.status_code == 200
    assert r.json()["summary"] == {"total_rows": 2, "removed_rows": 1, "remaining_rows": 1}


def test_identifiers_file_is_added_to_pasted_text(students_xlsx):
    files = {
        "file": ("alunos.xlsx", students_xlsx, XLSX),
        "identifiers_file": ("ids.txt", b"\xef\xbb\xbfB2\r\n", "text/plain"),
    }
    r = client.post("/process", files=files, data={"identifiers": "A1"})
    assert r.status_code == 200
    assert r.json()["summary"] == {"total_rows": 3, "removed_rows": 3, "remaining_rows": 0}


def test_missing_file_is_rejected():
    r = client.post("/process", data={"identifiers": "A1"})
    assert r.status_code == 422
    assert r.json() == {"detail": "Please select a file and enter the identifiers to remove."}


def test_blank_identifiers_are_rejected(students_xlsx):
    files = {"file": ("alunos.xlsx", students_xlsx, XLSX)}
    r = client.post("/process", files=files, data={"identifiers": "  \n \n"})
    assert r.status_code == 422
    assert "identifiers" in r.json()["detail"]


def test_unreadable_file_is_reported():
    files = {"file": ("alunos.xlsx", b"this is not a spreadsheet", XLSX)}
    r = client.post("/process", files=files, data={"identifiers": "A1"})
    assert r.status_code == 400
    assert r.json() == {"detail": "Could not read the file."}


def test_download_returns_workbook(students_xlsx):
    files = {"file": ("alunos.xlsx", students_xlsx, XLSX)}
    r = client.post("/process/download", files=files, data={"identifiers": "B2"})
    assert r.status_code == 200
    assert r.headers["content-type"] == XLSX
    assert r.headers["content-disposition"] == 'attachment; filename="processed_data.xlsx"'
    assert r.headers["x-total-rows"] == "3"
    assert r.headers["x-removed-rows"] == "1"
    assert r.headers["x-remaining-rows"] == "2"

    _, values = sheet_values(r.content)
    assert values == [("Matrícula", "Name"), ("A1", "X"), ("A1", "Z")]


def test_download_without_file_produces_nothing():
    r = client.post("/process/download", data={"identifiers": "A1"})
    assert r.status_code == 422
    assert "content-disposition" not in r.headers


def test_control_characters_in_cells_are_dropped_from_output():
    raw = b"\xef\xbb\xbf" + "Matrícula,Name\nA1,X\nB2,bad\x0bname\n".encode("utf-8")
    files = {"file": ("alunos.csv", raw, "text/csv")}
    r = client.post("/process", files=files, data={"identifiers": "A1"})
    assert r.status_code == 200
    assert r.json()["summary"] == {"total_rows": 2, "removed_rows": 1, "remaining_rows": 1}

    out_bytes = base64.b64decode(r.json()["processed_file"]["content_b64"])
    _, values = sheet_values(out_bytes)
    assert values == [("Matrícula", "Name"), ("B2", "badname")]


def test_empty_upload_is_unreadable():
    files = {"file": ("alunos.xlsx", b"", XLSX)}
    r = client.post("/process", files=files, data={"identifiers": "A1"})
    assert r.status_code == 400
    assert r.json() == {"detail": "Could not read the file."}
