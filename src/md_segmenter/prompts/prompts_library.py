import logging
from pathlib import Path

import yaml

from .prompt import Prompt

logger = logging.getLogger(__name__)

BUILTIN_PROMPTS_DIR = Path(__file__).parent / "templates"
DEFAULT_VERSION = "1.0"


class PromptsLibrary:
    """Versioned prompt templates loaded from YAML files.

    With no arguments only the builtin templates are loaded. Directories
    are read in order and a later ``(name, version)`` replaces an earlier
    one, so a deployment can override a builtin prompt by shipping a file
    with the same name and version.
    """

    def __init__(self, *directories: str | Path) -> None:
        self._prompts: dict[tuple[str, str], Prompt] = {}
        for directory in directories or (BUILTIN_PROMPTS_DIR,):
            self._load_dir(Path(directory))
        logger.info("Loaded %d prompts", len(self._prompts))

    def get(self, name: str, version: str = DEFAULT_VERSION) -> Prompt:
        try:
            return self._prompts[(name, version)]
        except KeyError:
            logger.error("Prompt not found: name=%s, version=%s", name, version)
            raise KeyError(f"Prompt '{name}' version '{version}' not found") from None

    def render(self, name: str, version: str = DEFAULT_VERSION, **values: str) -> str:
        return self.get(name, version).render(**values)

    def list(self) -> list[tuple[str, str]]:
        return sorted(self._prompts)

    def _load_dir(self, directory: Path) -> None:
        logger.debug("Loading prompts from %s", directory)
        for file_path in sorted(directory.glob("*.yaml")):
            with open(file_path, encoding="utf-8") as f:
                prompt = Prompt(**yaml.safe_load(f))

            key = (prompt.name, prompt.version)
            if key in self._prompts:
                logger.info("Prompt %s v%s overridden by %s", *key, file_path)
            self._prompts[key] = prompt
