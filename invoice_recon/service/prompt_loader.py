from pathlib import Path

from invoice_recon.service.exceptions import JobServiceError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt(name: str, prompt_dir: Path | None = None) -> str:
    """Load a bundled prompt by name (``system_prompt`` or ``user_prompt``).

    Args:
        name: File stem of the prompt, without the ``.txt`` suffix.
        prompt_dir: Directory to read from. Defaults to the bundled prompts.

    Returns:
        The prompt text with trailing whitespace removed.

    Raises:
        JobServiceError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}.txt"
    try:
        return path.read_text(encoding="utf-8").rstrip()
    except OSError as exc:
        raise JobServiceError(f"Failed to load prompt '{name}': {exc}") from exc
