"""
Retention policy for custom sections.
"""

import re
from typing import Callable, Iterable, List, Optional, Tuple

from ..config import Config
from ..formats.wasm_structures import NAME_SECTION


class InvalidPatternError(ValueError):
    """Raised when a section name pattern fails to compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid section pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def compile_patterns(patterns: Iterable[str]) -> List[re.Pattern]:
    """Compile every pattern up front so a bad one is reported before any input is read."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except (re.error, TypeError) as e:
            raise InvalidPatternError(pattern, str(e)) from e
    return compiled


class RetentionPolicy:
    """
    Decides which custom sections survive stripping.

    Rules are tried in order and the first one that applies wins:

    1. ``strip_all`` removes every custom section.
    2. A non-empty ``delete`` list removes the sections whose name matches
       any of the patterns (searched anywhere in the name).
    3. Otherwise every custom section except ``name`` is removed.
    """

    def __init__(self, strip_all: bool = False, delete: Iterable[str] = ()):
        self.strip_all = strip_all
        self.patterns = compile_patterns(delete)
        self._rules: List[Tuple[str, Callable[[str], Optional[bool]]]] = [
            ('all', self._strip_everything),
            ('delete', self._strip_matching),
            ('default', self._strip_all_but_names),
        ]

    @classmethod
    def from_config(cls, config: Config) -> 'RetentionPolicy':
        return cls(strip_all=config.strip_all, delete=config.delete)

    @property
    def mode(self) -> str:
        """Name of the rule that decides for this policy."""
        for mode, rule in self._rules:
            if rule("") is not None:
                return mode
        raise AssertionError("default rule always applies")

    def should_strip(self, name: str) -> bool:
        """True if the custom section called `name` is removed."""
        for _, rule in self._rules:
            decision = rule(name)
            if decision is not None:
                return decision
        raise AssertionError("default rule always applies")

    def retains(self, name: str) -> bool:
        """True if the custom section called `name` is kept."""
        return not self.should_strip(name)

    def _strip_everything(self, name: str) -> Optional[bool]:
        return True if self.strip_all else None

    def _strip_matching(self, name: str) -> Optional[bool]:
        if not self.patterns:
            return None
        return any(p.search(name) for p in self.patterns)

    def _strip_all_but_names(self, name: str) -> Optional[bool]:
        return name != NAME_SECTION
