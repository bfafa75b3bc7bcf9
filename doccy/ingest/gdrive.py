"""Google Drive connector: lists a folder tree and extracts Docs / Sheets text."""

from typing import Any, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build

from doccy.api.models import GOOGLE_DOC, GOOGLE_FOLDER, GOOGLE_SHEET, DriveItem
from doccy.core.logging import get_logger

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]


def escape_csv_cell(cell: Any) -> str:
    """Render one spreadsheet cell as a CSV field."""
    if cell is None:
        return ""
    text = str(cell)
    if '"' in text or "," in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def rows_to_csv(rows: List[List[Any]]) -> str:
    return "\n".join(",".join(escape_csv_cell(cell) for cell in row) for row in rows)


def _paragraph_text(paragraph: Dict[str, Any]) -> List[str]:
    return [
        run["textRun"]["content"]
        for run in paragraph.get("elements", [])
        if run.get("textRun", {}).get("content")
    ]


def extract_document_text(document: Dict[str, Any]) -> str:
    """Flatten a Docs API ``documents.get`` payload into a single line of text.

    Paragraph runs are concatenated in order, including those inside table cells;
    newlines become spaces.
    """
    content = document.get("body", {}).get("content")
    if not content:
        return ""

    chunks: List[str] = []
    for element in content:
        if "paragraph" in element:
            chunks += _paragraph_text(element["paragraph"])
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    for cell_content in cell.get("content", []):
                        if "paragraph" in cell_content:
                            chunks += _paragraph_text(cell_content["paragraph"])

    return "".join(chunks).replace("\n", " ").strip()


class DriveConnector:
    """Read-only access to Drive, Docs and Sheets.

    Args:
        drive: A Drive v3 service resource.
        docs: A Docs v1 service resource.
        sheets: A Sheets v4 service resource.
    """

    def __init__(self, drive, docs, sheets):
        self.drive = drive
        self.docs = docs
        self.sheets = sheets

    @classmethod
    def from_service_account(cls, key_file: str) -> "DriveConnector":
        credentials = service_account.Credentials.from_service_account_file(key_file, scopes=SCOPES)
        return cls(
            drive=build("drive", "v3", credentials=credentials, cache_discovery=False),
            docs=build("docs", "v1", credentials=credentials, cache_discovery=False),
            sheets=build("sheets", "v4", credentials=credentials, cache_discovery=False),
        )

    def list_folder(self, folder_id: str) -> List[DriveItem]:
        """Recursively list Docs and Sheets under ``folder_id`` with their content.

        Listing errors are logged; whatever was collected so far is returned.
        """
        result: List[DriveItem] = []
        try:
            page_token = None
            while True:
                res = self.drive.files().list(
                    q=f"'{folder_id}' in parents and trashed = false",
                    fields="nextPageToken, files(id, name, mimeType)",
                    pageToken=page_token,
                ).execute()

                for file in res.get("files", []):
                    item = DriveItem(id=file.get("id"), name=file.get("name"), mime_type=file.get("mimeType"))

                    if item.mime_type == GOOGLE_FOLDER:
                        result += self.list_folder(item.id)
                    elif item.mime_type in (GOOGLE_DOC, GOOGLE_SHEET):
                        item.content = self.get_file_content(item)
                        result.append(item)

                page_token = res.get("nextPageToken")
                if not page_token:
                    break
        except Exception:
            logger.exception("Error while listing drive folder %s", folder_id)

        return result

    def get_file_content(self, item: DriveItem) -> Optional[str]:
        if item.mime_type == GOOGLE_DOC and item.id:
            return self.parse_doc(item.id)
        if item.mime_type == GOOGLE_SHEET and item.id:
            return self.parse_sheet(item.id)
        return None

    def parse_doc(self, doc_id: str) -> str:
        try:
            document = self.docs.documents().get(documentId=doc_id).execute()
        except Exception:
            logger.exception("Error parsing doc %s", doc_id)
            return ""
        return extract_document_text(document)

    def parse_sheet(self, sheet_id: str) -> str:
        """Render every sheet as ``--- Sheet: <title> ---`` followed by CSV rows."""
        try:
            meta = self.sheets.spreadsheets().get(spreadsheetId=sheet_id).execute()
            parts = []
            for sheet in meta.get("sheets", []):
                title = sheet.get("properties", {}).get("title")
                if not title:
                    continue
                res = self.sheets.spreadsheets().values().get(spreadsheetId=sheet_id, range=title).execute()
                rows = res.get("values", [])
                if not rows:
                    continue
                parts.append(f"--- Sheet: {title} ---\n{rows_to_csv(rows)}")
            return "\n\n".join(parts).strip()
        except Exception:
            logger.exception("Error parsing sheet %s", sheet_id)
            return ""
