# ============================================================================
# src/lab_charting/extraction/prompts.py
# ============================================================================
"""
Lab Report Extraction Prompt

The prompt asks for exactly one JSON object per attached PDF. Each PDF is
preceded by a "--- FILE: <name> ---" text part so the model can echo the
filename back.
"""

from typing import Any, Dict, List, Sequence

BATCH_EXTRACTION_TEMPLATE = """
You are a medical data assistant. I have attached {count} PDF lab reports.
Return a JSON ARRAY containing exactly {count} objects.

For EACH report, extract data into this structure:
{{
  "filename": "The exact filename provided",
  "patientName": "Name of patient",
  "dates": {{
    "collection": "YYYY-MM-DD",
    "report": "YYYY-MM-DD"
  }},
  "forceInbox": boolean, // True for Fluid/Tissue samples. False for Blood/Serum/Plasma/BAL/Tip.
  "values": {{
    "Hb": "val", "TLC": "val", "Platelets": "val", "CRP": "val",
    "Na/K/Cl": "Na / K / Cl", "I. Ca": "val", "NRBC": "val",
    "Sr.Bili(T/D)": "Total / Direct", "PT/INR": "PT / INR",
    "APTT": "val", "Creatinine": "val", "SGPT": "val",
    "Blood CS": "Organism or 'No growth' or 'No growth (interim)'", "BAL CS": "Organism", "Tip CS": "Type - Organism", "POCUS": "Findings"
  }},
  "staticUpdates": {{
    "bloodGroup": "e.g. O +ve",
    "g6pd": "Normal/Deficient"
  }}
}}
Rules:
1. STRICTLY JSON ONLY.
2. EXTRACT NUMBERS ONLY for quantitative tests. Do NOT include units (e.g. extract "12.5", NOT "12.5 g/dL").
3. Map 'WBC'->'TLC', 'HGB'->'Hb', 'PLT'->'Platelets'.
4. 'Blood Group' MUST go to 'staticUpdates'.
5. Ignore missing/pending values. No placeholder keys.
6. Culture Reports: If 'No Growth', use exactly "No growth". If interim (e.g. 48h no growth), use "No growth (interim)".
"""

OVERRIDE_RULE_TEMPLATE = "7. SPECIAL USER INSTRUCTIONS (OVERRIDE RULES):\n{instructions}\n"


def build_batch_prompt(count: int, instructions: str = "") -> str:
    prompt = BATCH_EXTRACTION_TEMPLATE.format(count=count)
    if instructions and instructions.strip():
        prompt += OVERRIDE_RULE_TEMPLATE.format(instructions=instructions.strip())
    return prompt


def file_marker(filename: str) -> str:
    return f"\n--- FILE: {filename} ---\n"


def build_request_parts(documents: Sequence[Dict[str, str]], instructions: str = "") -> List[Dict[str, Any]]:
    """
    Multipart content for one batch: the prompt, then a marker and an
    inline payload per document.

    documents: {"filename", "mime_type", "data" (base64 text)} dicts
    """
    parts: List[Dict[str, Any]] = [{"text": build_batch_prompt(len(documents), instructions)}]
    for doc in documents:
        parts.append({"text": file_marker(doc["filename"])})
        parts.append({
            "inlineData": {
                "mimeType": doc["mime_type"],
                "data": doc["data"],
            }
        })
    return parts
