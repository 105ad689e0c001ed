"""
Configuration handling for wasm-strip.
"""

from dataclasses import asdict, dataclass, field, fields as dataclass_fields
from typing import List, Optional
import json
from pathlib import Path


@dataclass
class Config:
    """Configuration options for wasm-strip."""

    # Remove every custom section, including `name`
    strip_all: bool = False

    # Regexes selecting the custom sections to remove
    delete: List[str] = field(default_factory=list)

    # Log each section decision to stderr
    verbose: bool = False

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'Config':
        """Load configuration from a JSON file."""
        if path is None:
            path = Path(__file__).parent / 'config.json'

        if not path.exists():
            return cls()

        with open(path, 'r') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")

        # Convert PascalCase/camelCase to snake_case
        converted = {}
        for key, value in data.items():
            snake_key = ''.join(
                f'_{c.lower()}' if c.isupper() else c
                for c in key
            ).lstrip('_')
            converted[snake_key] = value

        # Filter to only include valid fields
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered = {k: v for k, v in converted.items() if k in valid_fields}

        if 'delete' in filtered:
            delete = filtered['delete']
            filtered['delete'] = [delete] if isinstance(delete, str) else list(delete)

        return cls(**filtered)

    def save(self, path: Path) -> None:
        """Save configuration to a JSON file."""
        # Convert snake_case to PascalCase for compatibility
        data = {}
        for key, value in asdict(self).items():
            pascal_key = ''.join(word.capitalize() for word in key.split('_'))
            data[pascal_key] = value

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
