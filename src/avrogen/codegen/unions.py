import logging
import re

from avrogen.codegen.identifiers import make_canonical

logger = logging.getLogger(__name__)


class UnionRegistry:
    """Assigns one generated name per distinct sequence of union branch types.

    Unions are identified by the ordered type names of their branches, so two
    independently declared ``["null", "string"]`` unions share a single
    generated struct. The registry also records which unions already have
    codec traits so a shared union is given exactly one specialization.
    """

    def __init__(self, schema_file: str):
        self._schema_file = schema_file
        self._counter = 0
        self._names: dict[tuple[str, ...], str] = {}
        self._traits_emitted: set[str] = set()

    def _token(self) -> str:
        # Last path component, leading separator included ("/a.avsc" -> "_a_avsc")
        token = self._schema_file
        if (match := re.search(r'[/\\][^/\\]*$', token)) is not None:
            token = match.group(0)
        return make_canonical(token, fold_case=False)

    def lookup(self, branch_types: list[str]) -> str | None:
        return self._names.get(tuple(branch_types))

    def assign(self, branch_types: list[str]) -> str:
        name = f'{self._token()}_Union__{self._counter}__'
        self._counter += 1
        self._names[tuple(branch_types)] = name
        logger.debug(f'Assigned {name} to union of {branch_types}')
        return name

    def traits_emitted(self, name: str) -> bool:
        return name in self._traits_emitted

    def mark_traits_emitted(self, name: str) -> None:
        self._traits_emitted.add(name)
