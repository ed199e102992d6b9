"""Export JSON schemas for knowledge base records."""

import json
import sys
from pathlib import Path

from pydantic import BaseModel

from backend.app.models import Document, DocumentSummary, SearchResult

SCHEMA_MODELS: dict[str, type[BaseModel]] = {
    "Document": Document,
    "DocumentSummary": DocumentSummary,
    "SearchResult": SearchResult,
}


def main(schemas_dir: Path = Path("docs/schemas")) -> list[Path]:
    """Export schemas to docs/schemas/."""
    schemas_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for name, model in SCHEMA_MODELS.items():
        path = schemas_dir / f"{name}.schema.json"
        with open(path, "w") as f:
            json.dump(model.model_json_schema(), f, indent=2)
        print(f"Exported {name} schema to {path}")
        written.append(path)

    return written


if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else Path("docs/schemas"))
