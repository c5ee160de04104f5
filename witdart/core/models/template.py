"""
Generated file model — the output artifact of a generation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class GeneratedFile(BaseModel):
    """A file produced by the generator.

    Attributes:
        path:     Where the caller should write the file (informational).
        contents: Full generated source text.
        reason:   Why this file was generated.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    contents: str
    reason: str = ""
