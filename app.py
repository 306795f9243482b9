"""Gradio UI for the Port Notes ingestion system."""

from typing import Any, Dict, List, Tuple

import gradio as gr

from src.config.env_loader import load_environment_variables

# Load environment variables before settings are first read
load_environment_variables()

from src.config.settings import get_settings
from src.config.logging_config import get_logger
from src.config.messages import STATUS_NO_ENTRIES, STATUS_SAVED
from src.core.ingestion_service import IngestionService

logger = get_logger(__name__)


TABLE_HEADERS = [
    "Date",
    "Port",
    "Terminal",
    "Operation",
    "Cargo / SF",
    "Water density",
    "Max draft (m)",
    "Load / Disch rate (MT/day)",
    "Notes / Restrictions",
]
RAW_TEXT_HEADER = "Raw"

# Entry fields searched by the substring filter
SEARCH_FIELDS = (
    "port",
    "terminal",
    "operation",
    "cargo",
    "stowFactor",
    "specialRestrictions",
    "rawText",
)


def filter_entries(entries: List[Dict[str, Any]], search: str) -> List[Dict[str, Any]]:
    """Keep entries where any searchable field contains the query (case-insensitive).

    Args:
        entries: Entries as returned by the listing operation
        search: Substring to look for; blank keeps everything

    Returns:
        Filtered list, original order preserved
    """
    query = (search or "").strip().lower()
    if not query:
        return entries
    return [
        entry for entry in entries
        if any(query in (entry.get(name) or "").lower() for name in SEARCH_FIELDS)
    ]


def _join(*values: Any, sep: str = " / ") -> str:
    return sep.join(str(v) for v in values if v) or "-"


def entries_to_rows(entries: List[Dict[str, Any]], show_raw: bool = False) -> List[List[str]]:
    """Flatten entries into table rows matching TABLE_HEADERS.

    Args:
        entries: Entries as returned by the listing operation
        show_raw: Append the raw note text as the last column

    Returns:
        List of rows (lists of display strings)
    """
    rows = []
    for entry in entries:
        row = [
            (entry.get("createdAt") or "")[:16].replace("T", " "),
            entry.get("port") or "-",
            entry.get("terminal") or "-",
            entry.get("operation") or "-",
            _join(entry.get("cargo"), entry.get("stowFactor")),
            entry.get("waterDensity") or "-",
            _join(entry.get("maxDraftMeters"), entry.get("maxDraftNotes"), sep=" - "),
            _join(entry.get("loadRatePerDayMt"), entry.get("dischargeRatePerDayMt")),
            entry.get("specialRestrictions") or "-",
        ]
        if show_raw:
            row.append(entry.get("rawText") or "")
        rows.append(row)
    return rows


class PortNotesInterface:
    """UI wrapper around IngestionService.

    Keeps the service lazily initialized and converts envelopes into
    status messages and table data for Gradio.
    """

    def __init__(self, service: IngestionService = None):
        """Initialize the interface."""
        self.service = service

    def initialize(self):
        """Build the ingestion service from config if none was injected."""
        if self.service is None:
            logger.info("Initializing port notes ingestion service...")
            self.service = IngestionService()
            logger.info("Ingestion service ready")

    def table(self, search: str, show_raw: bool) -> Dict[str, Any]:
        """Return Dataframe value for the current search and raw-text toggle."""
        self.initialize()
        response = self.service.list_entries()
        entries = response.body.get("entries", []) if response.ok else []
        headers = TABLE_HEADERS + ([RAW_TEXT_HEADER] if show_raw else [])
        return {
            "headers": headers,
            "data": entries_to_rows(filter_entries(entries, search), show_raw) or [["" for _ in headers]],
        }

    def submit(self, note: str, search: str, show_raw: bool) -> Tuple[str, str, Dict[str, Any]]:
        """
        Ingest a note and refresh the table.

        Args:
            note: Note text from the textbox
            search: Current search query
            show_raw: Current raw-text toggle

        Returns:
            Tuple of (textbox value, status markdown, table value). The
            textbox is cleared only on success.
        """
        self.initialize()
        response = self.service.ingest({"text": note})

        if response.ok:
            entry = response.body["entry"]
            status = "✅ " + STATUS_SAVED.format(**entry)
            note = ""
        else:
            status = "❌ " + response.body["error"]

        return note, status, self.table(search, show_raw)


def create_demo(interface: PortNotesInterface = None) -> gr.Blocks:
    """Create and return the Gradio demo.

    Returns:
        gr.Blocks: Configured Gradio interface
    """
    interface = interface or PortNotesInterface()
    interface.initialize()

    with gr.Blocks(title="Port Notes", theme=gr.themes.Soft()) as demo:
        gr.Markdown(
            "<h1 style='text-align: center; margin: 20px 0;'>Port / Terminal Notes</h1>"
        )
        gr.Markdown(
            "<div style='text-align: center; margin: 10px 0; font-size: 16px;'>"
            "Paste an agent email or briefing block. It is parsed into a structured entry and saved."
            "</div>"
        )

        with gr.Row():
            with gr.Column(scale=2):
                note_box = gr.Textbox(
                    label="Port note",
                    lines=12,
                    placeholder="- **Terminal:** LB212\n- Per day: abt 24,000 MT/shift\n***Loading***",
                )
                submit_button = gr.Button("Parse & save", variant="primary")
                status = gr.Markdown(STATUS_NO_ENTRIES)
            with gr.Column(scale=1):
                search_box = gr.Textbox(label="Search", placeholder="Port, terminal, cargo, restrictions...")
                show_raw = gr.Checkbox(label="Show raw text", value=False)
                refresh_button = gr.Button("Refresh")

        table = gr.Dataframe(
            value=interface.table("", False),
            interactive=False,
            wrap=True,
        )

        submit_button.click(
            fn=interface.submit,
            inputs=[note_box, search_box, show_raw],
            outputs=[note_box, status, table],
        )
        for trigger in (search_box.change, show_raw.change, refresh_button.click):
            trigger(fn=interface.table, inputs=[search_box, show_raw], outputs=[table])

    return demo


def main():
    """Main entry point for the Port Notes UI."""
    settings = get_settings()
    print("=" * 60)
    print("Port Notes Ingestion")
    print("=" * 60)
    print(f"Starting web interface on http://localhost:{settings.server_port}")
    print("Press Ctrl+C to stop the server.")
    print("=" * 60)
    print()

    demo = create_demo()
    demo.launch(
        server_name=settings.server_host,
        server_port=settings.server_port,
        share=False
    )


if __name__ == "__main__":
    main()
