"""
Excel processing service for guest list import/export
"""

import io
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Tuple

import pandas as pd
from pydantic import ValidationError
from sqlalchemy.orm import Session

from weddingplanner.core.config import settings
from weddingplanner.models import Guest
from weddingplanner.schemas.guest import GuestCreate

logger = logging.getLogger(__name__)

SIDE_VALUES = ("bride", "groom", "mutual")
YES_VALUES = ("yes", "y", "true", "1")
COLUMN_LABELS = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "phone": "Phone",
    "relationship": "Relationship",
    "dietary_restrictions": "Dietary Restrictions",
    "address": "Address",
    "notes": "Notes",
}

class ExcelService:
    """Service for handling Excel operations"""

    REQUIRED_COLUMNS = ['first name', 'last name']
    OPTIONAL_COLUMNS = [
        'email', 'phone', 'side', 'relationship', 'plus one allowed',
        'dietary restrictions', 'address', 'is family', 'notes'
    ]
    TEMPLATE_COLUMNS = [
        'First Name', 'Last Name', 'Email', 'Phone', 'Side', 'Relationship',
        'Plus One Allowed', 'Dietary Restrictions'
    ]

    @staticmethod
    def create_template() -> bytes:
        """Create Excel template with the import columns"""
        df = pd.DataFrame(columns=ExcelService.TEMPLATE_COLUMNS)

        # Sample rows for guidance
        sample_data = [
            ['Asha', 'Kapoor', 'asha@example.com', '+919812345678', 'bride', 'Cousin', 'Yes', 'vegetarian'],
            ['Rohan', 'Mehta', 'rohan@example.com', '', 'groom', 'Friend', 'No', ''],
            ['Priya', 'Shah', '', '+919876543210', 'mutual', 'Colleague', 'No', 'nut allergy'],
        ]
        for row in sample_data:
            df.loc[len(df)] = row

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')

        return buffer.getvalue()

    @staticmethod
    def map_columns(df: pd.DataFrame) -> Dict[str, str]:
        """Map normalized column names to the sheet's own headers"""
        column_mapping = {}
        known = ExcelService.REQUIRED_COLUMNS + ExcelService.OPTIONAL_COLUMNS
        for col in df.columns:
            col_lower = str(col).lower().strip()
            if col_lower in known:
                column_mapping[col_lower] = col
        return column_mapping

    @staticmethod
    def validate_excel_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate Excel file structure"""
        errors = []
        column_mapping = ExcelService.map_columns(df)

        missing_columns = [
            req_col for req_col in ExcelService.REQUIRED_COLUMNS
            if req_col not in column_mapping
        ]
        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def _cell(row, column_mapping: Dict[str, str], key: str) -> str:
        if key not in column_mapping:
            return ''
        value = row[column_mapping[key]]
        if pd.isna(value):
            return ''
        return str(value).strip()

    @staticmethod
    def row_error(row_no: int, error: Dict[str, Any], raw: Dict[str, Any]) -> str:
        """One readable message per schema error"""
        field = str(error['loc'][0]) if error['loc'] else ''
        label = COLUMN_LABELS.get(field, field)
        if error['type'] == 'string_too_short' and not raw.get(field):
            return f"Row {row_no}: {label} is required"
        if field == 'email':
            return f"Row {row_no}: invalid email '{raw['email']}'"
        if field == 'side':
            return f"Row {row_no}: side must be one of {', '.join(SIDE_VALUES)}"
        return f"Row {row_no}: {label}: {error['msg']}"

    @staticmethod
    def parse_rows(df: pd.DataFrame) -> Tuple[List[Dict[str, Any]], List[str]]:
        """Turn sheet rows into guest field dicts, collecting every row error"""
        column_mapping = ExcelService.map_columns(df)
        guests = []
        errors = []

        for index, row in df.iterrows():
            # Spreadsheet row number: header is row 1
            row_no = index + 2
            def cell(key, row=row):
                return ExcelService._cell(row, column_mapping, key)

            if not cell('first name') and not cell('last name') and not cell('email'):
                continue

            phone = cell('phone')
            if phone.endswith('.0'):
                # numeric cells come back as floats
                phone = phone[:-2]

            raw = {
                'first_name': cell('first name'),
                'last_name': cell('last name'),
                'email': cell('email') or None,
                'phone': phone or None,
                'side': cell('side').lower() or 'mutual',
                'relationship': cell('relationship') or None,
                'plus_one_allowed': cell('plus one allowed').lower() in YES_VALUES,
                'dietary_restrictions': cell('dietary restrictions') or None,
                'address': cell('address') or None,
                'is_family': cell('is family').lower() in YES_VALUES,
                'notes': cell('notes') or None,
            }
            try:
                fields = GuestCreate(**raw).model_dump(include=set(raw))
            except ValidationError as exc:
                errors.extend(ExcelService.row_error(row_no, error, raw) for error in exc.errors())
                fields = dict(raw)

            fields['relationship_label'] = fields.pop('relationship')
            guests.append(fields)

        return guests, errors

    @staticmethod
    def process_excel_upload(
        file_content: bytes,
        event_id: int,
        db: Session
    ) -> Tuple[bool, List[str], int]:
        """Validate the whole sheet, then add every guest in one transaction"""
        try:
            df = pd.read_excel(io.BytesIO(file_content))
        except Exception as e:
            logger.warning(f"Unreadable guest list upload for event {event_id}: {e}")
            return False, [f"Error reading Excel file: {str(e)}"], 0

        valid_structure, structure_errors = ExcelService.validate_excel_structure(df)
        if not valid_structure:
            return False, structure_errors, 0

        rows, row_errors = ExcelService.parse_rows(df)
        if row_errors:
            return False, row_errors, 0
        if not rows:
            return False, ["The file contains no guest rows"], 0

        try:
            for fields in rows:
                db.add(Guest(event_id=event_id, **fields))
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Imported {len(rows)} guests for event {event_id}")
        return True, [], len(rows)

    @staticmethod
    def export_current_data(event_id: int, db: Session) -> bytes:
        """Export current guest data to Excel"""
        guests = db.query(Guest).filter(Guest.event_id == event_id).order_by(Guest.id).all()

        data = []
        for guest in guests:
            data.append({
                'First Name': guest.first_name,
                'Last Name': guest.last_name,
                'Email': guest.email or '',
                'Phone': guest.phone or '',
                'Side': guest.side,
                'Relationship': guest.relationship_label or '',
                'Is Family': 'Yes' if guest.is_family else 'No',
                'RSVP Status': guest.rsvp_status,
                'Plus One Allowed': 'Yes' if guest.plus_one_allowed else 'No',
                'Plus One Name': guest.plus_one_name or '',
                'Number of Children': guest.children_count,
                'Dietary Restrictions': guest.dietary_restrictions or '',
                'Notes': guest.notes or '',
            })

        df = pd.DataFrame(data, columns=[
            'First Name', 'Last Name', 'Email', 'Phone', 'Side', 'Relationship',
            'Is Family', 'RSVP Status', 'Plus One Allowed', 'Plus One Name',
            'Number of Children', 'Dietary Restrictions', 'Notes'
        ])

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')

        return buffer.getvalue()

    @staticmethod
    def save_original_file(file_content: bytes, event_id: int, filename: str = "guests.xlsx") -> str:
        """Keep the uploaded workbook next to earlier uploads for the event"""
        upload_dir = os.path.join(settings.UPLOAD_DIR, str(event_id))
        os.makedirs(upload_dir, exist_ok=True)

        stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        safe_name = os.path.basename(filename) or "guests.xlsx"
        file_path = os.path.join(upload_dir, f"{stamp}_{safe_name}")
        with open(file_path, 'wb') as f:
            f.write(file_content)

        return file_path
