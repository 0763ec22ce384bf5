"""CSV card import domain service."""

import csv
from pathlib import Path
from typing import TYPE_CHECKING

from mealcard.domain.card import CardService
from mealcard.domain.entities import BulkIssueResult
from mealcard.domain.errors import ValidationError

if TYPE_CHECKING:
    from mealcard.database.base import Database

STUDENT_COLUMN = "student_ref"
OPTIONAL_COLUMNS = ("card_number", "starting_balance")


class CardImportService:
    """Service for provisioning cards from a CSV roster."""

    def __init__(self, db: "Database", starting_balance: int = 0):
        """Initialize card import service.

        Args:
            db: Database instance
            starting_balance: Grant for rows that leave starting_balance blank
        """
        self.db = db
        self.card_service = CardService(db, starting_balance=starting_balance)

    def import_csv(self, csv_file_path: str) -> BulkIssueResult:
        """Issue one card per row of a CSV file.

        The file needs a ``student_ref`` column; ``card_number`` and
        ``starting_balance`` columns are optional. Rows are numbered from 2
        in error messages, since the header is row 1.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            Issued cards and per-row errors

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file has no header or no student_ref column
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            # Try to detect delimiter; a single-column roster has none to find
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise ValidationError("CSV file has no columns")

            columns = {name.strip().lower(): name for name in reader.fieldnames if name}
            if STUDENT_COLUMN not in columns:
                raise ValidationError(f"CSV file missing required column: {STUDENT_COLUMN}")

            wanted = (STUDENT_COLUMN,) + OPTIONAL_COLUMNS
            rows = [
                {
                    field: (row.get(columns[field]) or "").strip()
                    for field in wanted
                    if field in columns
                }
                for row in reader
            ]

        return self.card_service.issue_cards(rows, first_row=2)
