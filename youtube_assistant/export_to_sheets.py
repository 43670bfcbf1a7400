"""
Google Sheets Exporter
Writes the search report into a new Google Spreadsheet.

Layout (single tab named after the search term):
- A1: report title
- Row 2: column headers
- Row 3+: one row per video
- Closing content-analysis block two rows below the data
"""

import os
from datetime import datetime

import gspread
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from youtube_assistant.report_rows import (
    REPORT_HEADERS,
    build_summary_rows,
    build_video_row,
    sanitize_sheet_name,
)

# Scopes needed for Google Sheets API
SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets',
    'https://www.googleapis.com/auth/drive.file'
]


def build_sheet_values(query, videos, summary, zone=None):
    """All cell values for the report tab, top to bottom."""
    values = [[f"YouTube Assistant: {query}"], list(REPORT_HEADERS)]
    values.extend(build_video_row(video, use_formulas=True, zone=zone) for video in videos)
    values.append([""])
    values.extend(build_summary_rows(summary, use_formulas=True))
    return values


class SheetsExporter:
    def __init__(self, credentials_path, token_path):
        """Initialize Google Sheets client with OAuth"""
        self.credentials_path = credentials_path
        self.token_path = token_path
        self.client = None

    def authenticate(self):
        """Authenticate with Google Sheets API"""
        print("🔐 Authenticating with Google Sheets API...")

        creds = None
        if os.path.exists(self.token_path):
            creds = Credentials.from_authorized_user_file(self.token_path, SCOPES)

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                print("   Refreshing expired token...")
                creds.refresh(Request())
            else:
                if not os.path.exists(self.credentials_path):
                    raise FileNotFoundError(
                        f"Credentials file not found: {self.credentials_path}\n"
                        "Please download OAuth credentials from Google Cloud Console."
                    )

                print("   Opening browser for authorization...")
                flow = InstalledAppFlow.from_client_secrets_file(self.credentials_path, SCOPES)
                creds = flow.run_local_server(port=0)

            with open(self.token_path, 'w') as token:
                token.write(creds.to_json())

        self.client = gspread.authorize(creds)
        print("✅ Authentication successful!")

    def create_spreadsheet(self, query):
        date_str = datetime.now().strftime('%Y-%m-%d')
        title = f"YouTube Assistant - {sanitize_sheet_name(query)} - {date_str}"

        print(f"📄 Creating spreadsheet: {title}")
        return self.client.create(title)

    def write_report(self, spreadsheet, query, videos, summary, zone=None):
        worksheet = spreadsheet.sheet1
        worksheet.update_title(sanitize_sheet_name(query) or "Search")

        values = build_sheet_values(query, videos, summary, zone)
        if len(values) > worksheet.row_count:
            worksheet.add_rows(len(values) - worksheet.row_count)

        worksheet.update(values=values, range_name='A1', value_input_option='USER_ENTERED')
        worksheet.freeze(rows=2)
        return worksheet

    def export(self, query, videos, summary, zone=None):
        """Main export function; returns the spreadsheet URL."""
        if self.client is None:
            self.authenticate()

        spreadsheet = self.create_spreadsheet(query)
        print(f"📊 Writing {len(videos)} videos...")
        self.write_report(spreadsheet, query, videos, summary, zone)
        print("   ✅ Report written")

        return spreadsheet.url
