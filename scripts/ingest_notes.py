"""Script to ingest a file of port notes (one note per block, blocks separated by '---')."""

import re
import sys
from pathlib import Path

# Add project root to path (scripts/ -> project root)
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.ingestion_service import IngestionService

NOTE_SEPARATOR = re.compile(r"^\s*-{3,}\s*$", re.MULTILINE)


def split_notes(text: str) -> list:
    """Split a notes file into individual non-blank notes."""
    return [block for block in NOTE_SEPARATOR.split(text) if block.strip()]


def main():
    """Ingest every note in the given file and print a summary."""
    print("=" * 60)
    print("Port Notes Batch Ingestion")
    print("=" * 60)
    print()

    if len(sys.argv) != 2:
        print("Usage: python scripts/ingest_notes.py <notes-file>")
        sys.exit(2)

    notes_path = Path(sys.argv[1])
    if not notes_path.exists():
        print(f"Error: file not found at {notes_path}")
        sys.exit(1)

    notes = split_notes(notes_path.read_text(encoding="utf-8"))
    print(f"Found {len(notes)} notes in {notes_path}")
    print()

    service = IngestionService()
    failures = 0
    for index, note in enumerate(notes, 1):
        response = service.ingest({"text": note})
        if response.ok:
            entry = response.body["entry"]
            print(f"[{index}] #{entry['id']} {entry['port']} / {entry['terminal']} ({entry['operation']})")
        else:
            failures += 1
            print(f"[{index}] FAILED: {response.body['error']}")

    print()
    print("=" * 60)
    print(f"Ingested {len(notes) - failures}/{len(notes)} notes")
    print("=" * 60)

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
