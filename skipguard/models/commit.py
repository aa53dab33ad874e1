from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class CommitDetails(BaseModel):
    """A commit as needed for ancestry walks: its tree, touched files and parents."""

    sha: str
    tree_hash: str
    changed_files: List[str] = Field(default_factory=list)
    parents: List[str] = Field(default_factory=list)
    html_url: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def first_parent(self) -> str | None:
        return self.parents[0] if self.parents else None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "CommitDetails":
        """Build from the payload of ``GET /repos/{owner}/{repo}/commits/{ref}``."""
        tree = (raw.get("commit") or {}).get("tree") or {}
        return cls(
            sha=raw.get("sha") or "",
            tree_hash=tree.get("sha") or "",
            changed_files=[f["filename"] for f in raw.get("files") or [] if f.get("filename")],
            parents=[p["sha"] for p in raw.get("parents") or [] if p.get("sha")],
            html_url=raw.get("html_url") or "",
        )
