import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from book_notes.errors import PromptError

from .prompt import Prompt

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS_DIR = Path(__file__).parent / "templates"


class PromptsLibrary:
    """
    Versioned prompt templates, one YAML file per (name, version).

    Every file is loaded and validated up front, so a broken template
    stops the run before the first generation call.
    """

    def __init__(self, directory: str | Path = DEFAULT_PROMPTS_DIR) -> None:
        self._prompts: dict[tuple[str, str], Prompt] = {}
        logger.info("Loading prompt templates from %s", directory)
        self._load_all(Path(directory))
        logger.info("Loaded %d prompt templates", len(self._prompts))

    def get(self, name: str, version: str) -> Prompt:
        try:
            return self._prompts[(name, version)]
        except KeyError:
            known = self.versions(name)
            detail = f"available: {', '.join(known)}" if known else "unknown name"
            logger.error("Prompt %s v%s not found (%s)", name, version, detail)
            raise PromptError(
                f"Prompt '{name}' version '{version}' not found ({detail})"
            ) from None

    def versions(self, name: str) -> list[str]:
        return sorted(v for n, v in self._prompts if n == name)

    def list(self) -> list[tuple[str, str]]:
        return list(self._prompts.keys())

    def _load_all(self, directory: Path) -> None:
        for file_path in sorted(directory.glob("*.yaml")):
            prompt = self._load_prompt(file_path)
            key = (prompt.name, prompt.version)
            if key in self._prompts:
                raise PromptError(
                    f"{file_path}: prompt '{prompt.name}' version "
                    f"'{prompt.version}' is already defined"
                )
            self._prompts[key] = prompt
            logger.debug(
                "Loaded %s v%s from %s", prompt.name, prompt.version, file_path
            )

    def _load_prompt(self, file_path: Path) -> Prompt:
        try:
            with open(file_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise PromptError(f"Cannot load {file_path}: {e}") from e
        if not isinstance(data, dict):
            raise PromptError(f"{file_path}: expected a mapping of prompt fields")
        try:
            return Prompt(**data)
        except ValidationError as e:
            raise PromptError(
                f"{file_path}: {e.error_count()} invalid prompt field(s)"
            ) from e
