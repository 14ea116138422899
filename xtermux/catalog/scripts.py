"""Scripts catalog: categories, risk levels, search and pagination."""

from functools import lru_cache
from importlib import resources
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, TypeAdapter

ALL_CATEGORIES = "All"
ITEMS_PER_PAGE = 10


class Category(BaseModel):
    name: str
    description: str


class Script(BaseModel):
    id: str
    name: str
    description: str
    category: str
    repo_url: str
    install_command: str
    usage: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


CATEGORIES = [
    Category(name=ALL_CATEGORIES, description="Browse all available tools in the repository"),
    Category(name="OSINT", description="Open Source Intelligence & Reconnaissance tools"),
    Category(name="Phishing", description="Social Engineering & Credential Testing tools"),
    Category(name="Spam", description="Stress Testing, SMS & Call Bombing tools"),
    Category(name="Utility", description="General Purpose Helpers, Installers & System tools"),
    Category(name="Exploit", description="System Vulnerability Scanners & Exploitation Frameworks"),
]

_RISK_LEVELS = {
    "Phishing": "High Risk",
    "Exploit": "High Risk",
    "Spam": "Moderate",
}


def risk_level(category: str) -> str:
    """Risk badge shown next to a script; unknown categories are `Safe`."""
    return _RISK_LEVELS.get(category, "Safe")


@lru_cache(maxsize=1)
def load_scripts() -> Tuple[Script, ...]:
    raw = resources.files("xtermux.catalog").joinpath("data/scripts.json").read_text(encoding="utf-8")
    return tuple(TypeAdapter(List[Script]).validate_json(raw))


def get_script(script_id: str) -> Optional[Script]:
    return next((s for s in load_scripts() if s.id == script_id), None)


def filter_scripts(search: str = "", category: str = ALL_CATEGORIES) -> List[Script]:
    """
    Case-insensitive substring match on name or description, optionally
    restricted to one category.
    """
    needle = search.strip().lower()
    matches = []
    for script in load_scripts():
        if needle and needle not in script.name.lower() and needle not in script.description.lower():
            continue
        if category != ALL_CATEGORIES and script.category != category:
            continue
        matches.append(script)
    return matches


def paginate(items: List[Script], offset: int = 0, limit: int = ITEMS_PER_PAGE) -> Tuple[List[Script], bool]:
    page = items[offset:offset + limit]
    return page, offset + len(page) < len(items)
