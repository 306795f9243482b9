"""Prompts for port note extraction."""

from langchain_core.prompts import ChatPromptTemplate

from src.models.schema import EXTRACTED_OPERATIONS, NOTE_FIELDS, REQUIRED_FIELDS


def render_field_schema() -> str:
    """Render the record fields as a TypeScript-like interface body.
    
    Generated from the data model so the prompt and the record can
    never disagree on field names.
    """
    operations = " | ".join(f'"{op.value}"' for op in EXTRACTED_OPERATIONS)
    lines = []
    for name in NOTE_FIELDS:
        if name == "operation":
            lines.append(f"  operation: {operations};")
        elif name in REQUIRED_FIELDS:
            lines.append(f"  {name}: string;")
        else:
            lines.append(f"  {name}?: string | null;")
    return "\n".join(lines)


SYSTEM_PROMPT = """
You are a strict JSON parser for port / terminal operational descriptions.

You MUST respond with a single valid JSON object and NOTHING else (no markdown, no extra text).
Use exactly this shape (TypeScript-like):

interface PortEntry {{
{field_schema}
}}

Parsing rules:
- Decide operation from context; it must be exactly one of: {operations}.
  If the note gives no hint, use "Load".
- Keep numeric values as strings with units if present (e.g. "15.24 m", "24000 MT/day").
- Copy values as written in the note; do not translate or convert units.
- If you don't know a value, use null.
- Do NOT wrap the JSON in backticks or markdown.
- Final output MUST be valid JSON, starting with {{ and ending with }}.
"""


PORT_NOTE_EXTRACTION_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_PROMPT),
        ("human", "{note_text}"),
    ]
).partial(
    field_schema=render_field_schema(),
    operations=", ".join(f'"{op.value}"' for op in EXTRACTED_OPERATIONS),
)
