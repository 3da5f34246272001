from dataclasses import dataclass
from typing import Dict, List

from .errors import UnknownFinder
from .store import Person, PersonStore


@dataclass(frozen=True)
class Finder:
    name: str
    param: str
    field: str

    def run(self, store: PersonStore, value: str) -> List[Person]:
        return store.find_by(self.field, value)


FINDERS: Dict[str, Finder] = {}


def register(finder: Finder) -> Finder:
    FINDERS[finder.name] = finder
    return finder


def get_finder(name: str) -> Finder:
    try:
        return FINDERS[name]
    except KeyError:
        raise UnknownFinder(name) from None


FIND_BY_LAST_NAME = register(Finder(name="findByLastName", param="name", field="last_name"))
