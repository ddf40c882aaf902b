"""Grapheme, module and curriculum data models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from ..utils.errors import ContentError, UnknownModuleError


@dataclass(frozen=True)
class Grapheme:
    """A unit of the Telugu writing system that learners practice."""

    id: str
    glyph: str
    transliteration: str
    module: str
    components: Tuple[str, ...]
    type: str = "consonant"
    difficulty: int = 1
    transliteration_simple: str = ""
    confusable_with: Tuple[str, ...] = ()
    prerequisite_components: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()

    @property
    def is_composite(self) -> bool:
        """Whether the grapheme is built from more than one component."""
        return len(self.components) > 1

    @property
    def simple_transliteration(self) -> str:
        """ASCII transliteration, falling back to the full romanization."""
        return self.transliteration_simple or self.transliteration


@dataclass
class Module:
    """A curriculum module grouping graphemes for one practice session."""

    id: str
    name: str
    description: str = ""
    order: int = 0
    requires_unlock: bool = False
    graphemes: List[Grapheme] = field(default_factory=list)

    def get_grapheme(self, grapheme_id: str) -> Optional[Grapheme]:
        """Get a grapheme by ID."""
        for grapheme in self.graphemes:
            if grapheme.id == grapheme_id:
                return grapheme
        return None


@dataclass
class Curriculum:
    """The full grapheme dataset organized into modules."""

    name: str
    language: str = "te"
    modules: List[Module] = field(default_factory=list)

    def get_module(self, module_id: str) -> Optional[Module]:
        """Get a module by ID."""
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def get_graphemes(self, module_id: str) -> List[Grapheme]:
        """Get the graphemes of a module, easiest first.

        Raises:
            UnknownModuleError: If the module is not in the curriculum
        """
        module = self.get_module(module_id)
        if module is None:
            raise UnknownModuleError(module_id)
        return sorted(module.graphemes, key=lambda g: g.difficulty)

    def get_all_graphemes(self) -> Dict[str, Grapheme]:
        """Get all graphemes across all modules.

        Returns:
            Dict mapping grapheme_id to Grapheme
        """
        graphemes = {}
        for module in self.modules:
            for grapheme in module.graphemes:
                graphemes[grapheme.id] = grapheme
        return graphemes

    def get_grapheme(self, grapheme_id: str) -> Optional[Grapheme]:
        """Get a grapheme by ID from any module."""
        return self.get_all_graphemes().get(grapheme_id)

    def get_module_choices(self) -> List[tuple]:
        """Get (display_name, module_id) pairs in curriculum order."""
        return [(m.name, m.id) for m in sorted(self.modules, key=lambda m: m.order)]


def _parse_grapheme(data: dict, module_id: str) -> Grapheme:
    """Build a Grapheme from one YAML entry."""
    grapheme_id = data.get("id")
    glyph = data.get("glyph")
    if not grapheme_id or not glyph:
        raise ContentError(f"Grapheme in module '{module_id}' is missing id or glyph")

    components = data.get("components")
    if components is None:
        components = [glyph]
    components = tuple(components)
    if not components:
        raise ContentError(f"Grapheme '{grapheme_id}' has no components")

    try:
        difficulty = int(data.get("difficulty", 1))
    except (TypeError, ValueError) as e:
        raise ContentError(
            f"Grapheme '{grapheme_id}' has non-numeric difficulty {data.get('difficulty')!r}"
        ) from e
    if difficulty < 1:
        raise ContentError(f"Grapheme '{grapheme_id}' has invalid difficulty {difficulty}")

    return Grapheme(
        id=str(grapheme_id),
        glyph=glyph,
        transliteration=data.get("transliteration", ""),
        transliteration_simple=data.get("transliteration_simple", ""),
        module=module_id,
        components=components,
        type=data.get("type", "consonant"),
        difficulty=difficulty,
        confusable_with=tuple(data.get("confusable_with", [])),
        prerequisite_components=tuple(data.get("prerequisite_components", [])),
        examples=tuple(data.get("examples", [])),
    )


def parse_curriculum(data: dict) -> Curriculum:
    """Build a Curriculum from a parsed YAML mapping.

    Raises:
        ContentError: If an entry is malformed or an ID is repeated
    """
    if not isinstance(data, dict):
        raise ContentError("Grapheme dataset must be a mapping with a modules list")

    curriculum_data = data.get("curriculum", {}) or {}
    seen_ids = set()

    modules = []
    for index, mod_data in enumerate(data.get("modules", []) or []):
        module_id = mod_data.get("id", "")
        if not module_id:
            raise ContentError(f"Module at position {index} has no id")

        graphemes = []
        for grapheme_data in mod_data.get("graphemes", []) or []:
            grapheme = _parse_grapheme(grapheme_data, module_id)
            if grapheme.id in seen_ids:
                raise ContentError(f"Duplicate grapheme id '{grapheme.id}'")
            seen_ids.add(grapheme.id)
            graphemes.append(grapheme)

        modules.append(
            Module(
                id=module_id,
                name=mod_data.get("name", module_id),
                description=mod_data.get("description", ""),
                order=mod_data.get("order", index),
                requires_unlock=bool(mod_data.get("requires_unlock", False)),
                graphemes=graphemes,
            )
        )

    return Curriculum(
        name=curriculum_data.get("name", ""),
        language=curriculum_data.get("language", "te"),
        modules=modules,
    )


def load_curriculum(curriculum_path: str = "data/graphemes.yaml") -> Curriculum:
    """Load the grapheme dataset from a YAML file.

    Args:
        curriculum_path: Path to the dataset YAML file

    Returns:
        Curriculum with all modules and graphemes
    """
    path = Path(curriculum_path)
    if not path.exists():
        raise FileNotFoundError(f"Grapheme dataset not found: {curriculum_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return parse_curriculum(data)
