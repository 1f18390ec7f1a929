import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

logger = logging.getLogger(__name__)

FENCE_OPEN = "```yaml"
FENCE_CLOSE = "```"


def extract_yaml(content: str) -> str:
    """
    Return the first ```yaml fenced block of a markdown document.

    Plain YAML files have no fence and are returned unchanged.
    """
    block: list[str] | None = None
    for line in content.splitlines():
        stripped = line.strip()
        if block is None:
            if stripped.startswith(FENCE_OPEN):
                block = []
            continue
        if stripped.startswith(FENCE_CLOSE):
            break
        block.append(line)

    return content if block is None else "\n".join(block)


def load_rules(path: Path | str) -> Rules:
    """
    Load and validate the rules file.

    Raises FileNotFoundError if the file is missing, ValueError if the
    YAML or the schema is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(extract_yaml(path.read_text()))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Rules file {path} must contain a mapping at the top level")

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    logger.debug("Loaded rules from %s", path)
    return rules
