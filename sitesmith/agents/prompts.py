"""Prompt templates for each generation stage."""
import json
from typing import Any, Dict


def _context(analysis: Dict[str, Any]) -> str:
    return json.dumps(analysis, ensure_ascii=False)


ANALYSIS_TEMPLATE = """You are an expert web application analyst. Read the user's request and extract the features, pages and technical requirements of the application they want.

Respond with JSON only, in exactly this shape:
{{
  "features": ["feature 1", "feature 2"],
  "pages": ["page 1", "page 2"],
  "technical_requirements": {{
    "responsive": true,
    "authentication": false,
    "data_persistence": "localStorage" | "database" | "none",
    "ui_framework": "name of a UI approach or null"
  }}
}}

"features" and "pages" must each contain at least one entry.

Web application request: {prompt}"""


STRUCTURE_TEMPLATE = """You are an expert web developer and project architect. Plan the HTML files for the application described below.

Rules:
- Every file is a top-level HTML file inside the "public" directory. Do not create nested directories.
- For every file, write a "prompt": a detailed generation directive describing the content, sections, forms, navigation and interactive elements the page must contain.
- A "prompt" is an instruction for a later generation step. Never put HTML or any actual file content in it.
- Each prompt should start with "Create a [page type] with at least 10 distinct UI elements:" followed by a numbered list [1], [2], [3] ... of those elements.

Respond with JSON only, in exactly this shape:
{{
  "public": {{
    "type": "directory",
    "children": {{
      "index.html": {{
        "type": "file",
        "prompt": "Create a landing page with at least 10 distinct UI elements: [1] responsive navigation bar with logo and mobile menu; [2] hero section with headline and call-to-action; ..."
      }}
    }}
  }}
}}

Application requirements: {analysis}"""


ENHANCEMENT_TEMPLATE = """Expand this page directive into a specific, modern UI feature checklist.

BASE DIRECTIVE: {directive}
PAGE: {file_name}
CONTEXT: {analysis}

Format the answer as:

LAYOUT & NAVIGATION:
- [element]: [short description]

INTERACTIVE COMPONENTS:
- [element]: [short description]

CONTENT SECTIONS:
- [element]: [short description]

MODERN FEATURES:
- [element]: [short description]

DESIGN PATTERNS:
- [styling]: [implementation note]

Make every item specific and actionable for {file_name}. Be concise but complete."""


PAGE_CONSTRAINTS = """TECHNICAL CONSTRAINTS:
- Produce one complete, self-contained HTML5 document.
- Put ALL CSS inside <style> tags and ALL JavaScript inside <script> tags.
- Do NOT reference external CSS, JavaScript, font or image files (no <link rel="stylesheet">, no <script src>, no <img src> to remote assets).
- Replace images with CSS shapes, gradients or inline SVG.
- Use semantic HTML5 (header, nav, main, section, article, footer).
- Mobile-first responsive layout with CSS Grid and Flexbox.
- Use CSS custom properties for colors and spacing, with smooth transitions and hover/focus states.
- Modern JavaScript (ES6+) with proper event handling.
- Accessibility: ARIA labels, keyboard navigation, sufficient contrast."""


CONTENT_TEMPLATE = """You are an expert modern web developer. Generate the file described below.

{constraints}

File: {file_name}
Specific requirements:
{directive}

Project context: {analysis}

Return ONLY the complete HTML content, without markdown formatting."""


MODIFY_TEMPLATE = """You are an expert web developer. Modify the existing HTML file according to the user's request.

{constraints}
- Keep the responsive design.
- Return the complete modified HTML document, not a diff.

File: {file_name}
Current content:
{content}

Modification request: {instruction}

Return ONLY the complete modified HTML content, without markdown formatting."""


def analysis_prompt(prompt: str) -> str:
    return ANALYSIS_TEMPLATE.format(prompt=prompt)


def structure_prompt(analysis: Dict[str, Any]) -> str:
    return STRUCTURE_TEMPLATE.format(analysis=_context(analysis))


def enhancement_prompt(directive: str, file_name: str, analysis: Dict[str, Any]) -> str:
    return ENHANCEMENT_TEMPLATE.format(directive=directive, file_name=file_name, analysis=_context(analysis))


def content_prompt(file_name: str, directive: str, analysis: Dict[str, Any]) -> str:
    return CONTENT_TEMPLATE.format(
        constraints=PAGE_CONSTRAINTS,
        file_name=file_name,
        directive=directive,
        analysis=_context(analysis),
    )


def modify_prompt(file_name: str, content: str, instruction: str) -> str:
    return MODIFY_TEMPLATE.format(
        constraints=PAGE_CONSTRAINTS,
        file_name=file_name,
        content=content,
        instruction=instruction,
    )
