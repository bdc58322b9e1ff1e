"""Oracle instruction contracts for the audit and extraction calls."""

# Common instruction to suppress prose and ensure JSON-only output
# Note: curly braces must be escaped as {{ }} because these are str.format templates
JSON_ONLY_INSTRUCTION = """
CRITICAL: You MUST respond with ONLY a valid JSON object.
- Do NOT include any thinking, reasoning, or explanation.
- Do NOT use markdown code blocks.
- Start your response directly with the opening brace
- No text before or after the JSON."""

AUDIT_PROMPT = """Act as a Government Civil Infrastructure Auditor.

You are given:
1. OFFICIAL RECORD (JSON): what *should* be on site (budget, status, completion date).
2. FIELD EVIDENCE (image): a photo taken at the site today.

YOUR TASK:
Compare the record against the image.
- If the record says "Completed" but the image shows ongoing construction or damage -> HIGH risk.
- If the record says "In Progress" and the image shows work underway -> LOW risk.
- Use CRITICAL only when the image directly contradicts the existence of the claimed work.
- List each specific visual contradiction as one discrepancy. Use an empty list if there are none.

OFFICIAL RECORD:
{record_json}

Respond with ONLY this JSON structure (no other text):
{{
  "risk_level": "LOW|MEDIUM|HIGH|CRITICAL",
  "confidence": 0.0,
  "discrepancies": ["specific visual contradiction"],
  "recommendation": "Professional next steps"
}}

"confidence" is a number between 0.0 and 1.0.
""" + JSON_ONLY_INSTRUCTION

EXTRACTION_PROMPT = """Analyze this government infrastructure document and extract these exact fields:

- project_id (e.g., MH-2024-PWD-...)
- title
- budget (keep the currency symbol)
- contractor
- status
- completion_date (YYYY-MM-DD)
- sanctioned_by
- location_address (the physical address mentioned)

If a field is not found, use "{not_mentioned}".

Respond with ONLY this JSON structure (no other text):
{{
  "project_id": "...",
  "title": "...",
  "budget": "...",
  "contractor": "...",
  "status": "...",
  "completion_date": "...",
  "sanctioned_by": "...",
  "location_address": "..."
}}
""" + JSON_ONLY_INSTRUCTION
