from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import RedirectRules, Rules


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    # Rules may be kept inside a markdown ```yaml fence
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    clean_content = "\n".join(yaml_lines) if found_block else content

    try:
        data = yaml.safe_load(clean_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e


class RedirectRulesAdapter:
    """Exposes the redirects section of the rules to the redirects component."""

    def __init__(self, rules: RedirectRules) -> None:
        self._rules = rules

    def get_cache_duration_seconds(self) -> float:
        return self._rules.cache_duration_seconds

    def get_fetch_timeout_seconds(self) -> float:
        return self._rules.fetch_timeout_seconds

    def get_collection(self) -> str:
        return self._rules.collection
