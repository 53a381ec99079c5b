import json
import logging
import os
from datetime import datetime
from typing import List, Optional

import gspread
from oauth2client.service_account import ServiceAccountCredentials

from ..models.project import Project

LOGGER = logging.getLogger(__name__)

SCOPE = ["https://spreadsheets.google.com/feeds", "https://www.googleapis.com/auth/drive"]
SHORTLIST_TAB = "Shortlist"
HEADERS = ["ID", "Title", "Category", "Budget", "URL", "Date Posted", "Match", "Notes", "Exported"]


def _load_credentials() -> Optional[dict]:
    raw = os.getenv("GOOGLE_CREDENTIALS_JSON")
    try:
        if raw:
            return json.loads(raw)
        if os.path.exists("credentials.json"):
            with open("credentials.json", "r", encoding="utf-8") as f:
                return json.load(f)
    except json.JSONDecodeError as e:
        LOGGER.error("❌ Google credentials are not valid JSON: %s", e)
    return None


def get_sheet_connection(sheet_url: str):
    creds_dict = _load_credentials()
    if not creds_dict:
        LOGGER.error("❌ No Google Sheet credentials found.")
        return None

    creds = ServiceAccountCredentials.from_json_keyfile_dict(creds_dict, SCOPE)
    client = gspread.authorize(creds)
    return client.open_by_url(sheet_url)


def export_projects(projects: List[Project], sheet_url: str, notes: dict = None) -> bool:
    """
    Appends projects not yet on the Shortlist tab. Best effort: failures are
    logged and reported as False.
    """
    if not projects or not sheet_url:
        return False
    notes = notes or {}

    try:
        sh = get_sheet_connection(sheet_url)
        if not sh:
            return False

        try:
            worksheet = sh.worksheet(SHORTLIST_TAB)
        except gspread.exceptions.WorksheetNotFound:
            LOGGER.info("'%s' tab not found. Creating it now...", SHORTLIST_TAB)
            worksheet = sh.add_worksheet(title=SHORTLIST_TAB, rows="100", cols=str(len(HEADERS)))

        first_row = worksheet.row_values(1)
        if not first_row or first_row[0] != "ID":
            worksheet.insert_row(HEADERS, index=1)

        existing_ids = set(worksheet.col_values(1))
        today = datetime.now().strftime("%Y-%m-%d")
        new_rows = [
            [
                p.id,
                p.title,
                p.category,
                p.budget,
                p.link,
                p.posted_date.strftime("%Y-%m-%d"),
                str(p.match_score),
                notes.get(p.id, ""),
                today,
            ]
            for p in projects
            if p.id not in existing_ids
        ]

        if new_rows:
            worksheet.append_rows(new_rows)
        LOGGER.info("✅ Exported %d projects to '%s'.", len(new_rows), SHORTLIST_TAB)
        return True

    except Exception as e:
        LOGGER.error("❌ Google Sheets export failed: %s", e)
        return False
