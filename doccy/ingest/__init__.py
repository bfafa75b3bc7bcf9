"""
The `ingest` package fills the embedding store from Google Drive.

Contents
--------
- gdrive
    `DriveConnector`: recursive folder listing and Docs / Sheets text extraction.
- embed
    Recursive chunking, OpenAI embeddings and `index_drive` for a whole folder tree.
"""
