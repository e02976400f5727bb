"""
Tests for guest list import/export
"""

import io

import pandas as pd

from weddingplanner.models import Guest
from weddingplanner.services.excel_service import ExcelService

from conftest import make_guest

def create_test_excel(data):
    """Helper function to create Excel bytes from data"""
    df = pd.DataFrame(data)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, index=False)
    return buffer.getvalue()

def test_validate_excel_structure_valid():
    df = pd.DataFrame({
        'First Name': ['Asha'],
        'Last Name': ['Kapoor'],
        'Email': ['asha@wedmail.org']
    })

    valid, errors = ExcelService.validate_excel_structure(df)
    assert valid
    assert len(errors) == 0

def test_validate_excel_structure_missing_columns():
    df = pd.DataFrame({'Name': ['Asha Kapoor'], 'Email': ['asha@wedmail.org']})

    valid, errors = ExcelService.validate_excel_structure(df)
    assert not valid
    assert 'missing required columns' in errors[0].lower()
    assert 'first name' in errors[0]

def test_validate_excel_structure_case_insensitive():
    df = pd.DataFrame({'FIRST NAME': ['Asha'], ' last name ': ['Kapoor']})

    valid, errors = ExcelService.validate_excel_structure(df)
    assert valid

def test_parse_rows_collects_every_error():
    df = pd.DataFrame({
        'First Name': ['Asha', '', 'Rohan'],
        'Last Name': ['Kapoor', 'Mehta', 'Shah'],
        'Email': ['asha@wedmail.org', 'broken-address', ''],
        'Side': ['bride', 'groom', 'neighbours'],
    })

    rows, errors = ExcelService.parse_rows(df)
    assert len(rows) == 3
    assert any('Row 3' in e and 'First Name' in e for e in errors)
    assert any('Row 3' in e and 'invalid email' in e for e in errors)
    assert any('Row 4' in e and 'side' in e for e in errors)

def test_parse_rows_converts_values():
    df = pd.DataFrame({
        'First Name': ['Asha', None],
        'Last Name': ['Kapoor', None],
        'Phone': [919812345678, None],
        'Plus One Allowed': ['Yes', None],
        'Is Family': ['no', None],
    })

    rows, errors = ExcelService.parse_rows(df)
    assert errors == []
    # blank rows are skipped
    assert len(rows) == 1
    assert rows[0]['phone'] == '919812345678'
    assert rows[0]['plus_one_allowed'] is True
    assert rows[0]['is_family'] is False
    assert rows[0]['side'] == 'mutual'

def test_parse_rows_applies_guest_field_rules():
    df = pd.DataFrame({
        'First Name': ['Asha', 'A' * 300, 'Priya'],
        'Last Name': ['Kapoor', 'Mehta', 'Shah'],
        'Email': ['a@@wedmail.org', '', ''],
        'Phone': ['', '', '12'],
    })

    rows, errors = ExcelService.parse_rows(df)
    assert len(errors) == 3
    assert errors[0] == "Row 2: invalid email 'a@@wedmail.org'"
    assert errors[1].startswith("Row 3: First Name:")
    assert errors[2].startswith("Row 4: Phone:")

def test_process_excel_upload_rejects_bad_email(db_session, sample_event):
    excel_bytes = create_test_excel({
        'First Name': ['Asha'],
        'Last Name': ['Kapoor'],
        'Email': ['a@@wedmail.org'],
    })

    success, errors, count = ExcelService.process_excel_upload(excel_bytes, sample_event.id, db_session)

    assert not success
    assert count == 0
    assert db_session.query(Guest).filter(Guest.event_id == sample_event.id).count() == 0

def test_process_excel_upload_success(db_session, sample_event):
    excel_bytes = create_test_excel({
        'First Name': ['Asha', 'Rohan', 'Priya'],
        'Last Name': ['Kapoor', 'Mehta', 'Shah'],
        'Side': ['bride', 'groom', 'mutual'],
    })

    success, errors, count = ExcelService.process_excel_upload(excel_bytes, sample_event.id, db_session)

    assert success
    assert errors == []
    assert count == 3
    guests = db_session.query(Guest).filter(Guest.event_id == sample_event.id).all()
    assert sorted(g.last_name for g in guests) == ['Kapoor', 'Mehta', 'Shah']

def test_process_excel_upload_appends(db_session, sample_event):
    make_guest(db_session, sample_event, "Existing", "Guest")
    excel_bytes = create_test_excel({'First Name': ['Asha'], 'Last Name': ['Kapoor']})

    success, _, count = ExcelService.process_excel_upload(excel_bytes, sample_event.id, db_session)

    assert success
    assert count == 1
    assert db_session.query(Guest).filter(Guest.event_id == sample_event.id).count() == 2

def test_process_excel_upload_validation_failure(db_session, sample_event):
    """One bad row rejects the whole file"""
    excel_bytes = create_test_excel({
        'First Name': ['Asha', 'Rohan'],
        'Last Name': ['Kapoor', ''],
    })

    success, errors, count = ExcelService.process_excel_upload(excel_bytes, sample_event.id, db_session)

    assert not success
    assert len(errors) == 1
    assert count == 0
    assert db_session.query(Guest).filter(Guest.event_id == sample_event.id).count() == 0

def test_process_excel_upload_unreadable(db_session, sample_event):
    success, errors, count = ExcelService.process_excel_upload(b'not a workbook', sample_event.id, db_session)

    assert not success
    assert 'error reading excel file' in errors[0].lower()

def test_create_template():
    template_bytes = ExcelService.create_template()

    df = pd.read_excel(io.BytesIO(template_bytes))
    for col in ExcelService.TEMPLATE_COLUMNS:
        assert col in df.columns
    assert len(df) == 3

def test_export_current_data(db_session, sample_event):
    make_guest(db_session, sample_event, "Asha", "Kapoor", side="bride", rsvp_status="confirmed",
               children_details=[{"name": "Kabir", "age": 6}])
    make_guest(db_session, sample_event, "Rohan", "Mehta", side="groom")

    excel_bytes = ExcelService.export_current_data(sample_event.id, db_session)

    df = pd.read_excel(io.BytesIO(excel_bytes))
    assert len(df) == 2
    assert df.iloc[0]['First Name'] == 'Asha'
    assert df.iloc[0]['RSVP Status'] == 'confirmed'
    assert df.iloc[0]['Number of Children'] == 1
    assert df.iloc[1]['RSVP Status'] == 'pending'

def test_import_endpoint_rejects_other_formats(client, auth_headers, sample_event):
    response = client.post(
        f"/api/events/{sample_event.id}/guests/import",
        headers=auth_headers,
        files={"file": ("guests.csv", b"First Name,Last Name\nAsha,Kapoor", "text/csv")}
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "invalid_file"

def test_import_endpoint_reports_row_errors(client, auth_headers, sample_event, tmp_path, monkeypatch):
    monkeypatch.setattr("weddingplanner.core.config.settings.UPLOAD_DIR", str(tmp_path))
    excel_bytes = create_test_excel({'First Name': [''], 'Last Name': ['Kapoor']})

    response = client.post(
        f"/api/events/{sample_event.id}/guests/import",
        headers=auth_headers,
        files={"file": ("guests.xlsx", excel_bytes, "application/octet-stream")}
    )
    assert response.status_code == 422
    assert response.json()["details"] == ["Row 2: First Name is required"]
