from __future__ import annotations

from pathlib import Path


def load_prompt(filename: str | Path) -> str:
    """Load a prompt text file; bare names resolve against the bundled prompts."""

    path = Path(filename)
    if not path.is_absolute() and not path.exists():
        path = Path(__file__).resolve().parent / path
    if not path.exists():
        raise RuntimeError(f"Prompt file not found: {filename}")
    return path.read_text(encoding="utf-8").strip() + "\n"


def render_prompt(template: str, *, clinic_name: str) -> str:
    """Fill the clinic placeholders of a prompt or reply template."""

    return template.replace("{clinic_name}", clinic_name)
