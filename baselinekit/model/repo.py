# Data model for batch change checks

from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from baselinekit.constants import DEFAULT_REF


class RepoListError(Exception):
    """Raised when a repository list cannot be parsed."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            super().__init__(f"{source}: {message}")
        else:
            super().__init__(message)


class RepoCheck(BaseModel):
    """One repository to probe for changes."""

    url: str = Field(..., description="Repository URL")
    ref: str = Field(DEFAULT_REF, description="Branch to compare")
    cached_sha: Optional[str] = Field(
        None, description="Commit id last seen locally, if any"
    )

    @field_validator("url", "ref")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be a non-empty string")
        return v

    @classmethod
    def list_from_yaml(
        cls, yaml_str: str, source: Optional[str] = None
    ) -> List["RepoCheck"]:
        """Load a list of checks from YAML.

        Accepts either a top-level list or a mapping with a ``repos`` list.
        Entries may be bare URL strings.

        Raises:
            RepoListError: If the document is not valid YAML or an entry is invalid
        """
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise RepoListError(f"invalid YAML: {e}", source)

        if isinstance(data, dict):
            data = data.get("repos")
        if not isinstance(data, list):
            raise RepoListError("expected a list of repositories", source)

        checks = []
        for i, entry in enumerate(data):
            if isinstance(entry, str):
                entry = {"url": entry}
            if not isinstance(entry, dict):
                raise RepoListError(f"entry {i} must be a mapping or URL", source)
            try:
                checks.append(cls(**entry))
            except ValidationError as e:
                first = e.errors()[0]
                field = ".".join(str(loc) for loc in first.get("loc", ()))
                raise RepoListError(
                    f"entry {i} field '{field}': {first.get('msg', str(e))}", source
                )
        return checks
