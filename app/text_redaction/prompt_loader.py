from pathlib import Path

from app.text_redaction.exceptions import TextRedactionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

TEXT_MARKER = "Text to redact:\n\n"


def load_system_prompt(path: Path | None = None) -> str:
    """Load the redaction system prompt from a file.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled redaction_prompt.txt.

    Raises:
        TextRedactionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "redaction_prompt.txt"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise TextRedactionError(f"Failed to load redaction prompt: {exc}") from exc


def build_user_prompt(text: str) -> str:
    return f"{TEXT_MARKER}{text}"
