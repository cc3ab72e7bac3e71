"""Data model shared by the diff engine components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

DEV_NULL = "/dev/null"


@dataclass(frozen=True)
class RevisionPair:
    """The comparison window of a session."""

    base: str
    head: str


@dataclass(frozen=True)
class GitCommit:
    """A commit between the base and head revisions."""

    sha: str
    message: str
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    author_date: Optional[str] = None
    committer_name: Optional[str] = None
    committer_email: Optional[str] = None
    committer_date: Optional[str] = None
    parents: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitCommit":
        """Build a commit from its JSON form."""
        author = data.get("author") or {}
        committer = data.get("committer") or {}
        return cls(
            sha=data["sha"],
            message=data.get("message", ""),
            author_name=author.get("name"),
            author_email=author.get("email"),
            author_date=author.get("date"),
            committer_name=committer.get("name"),
            committer_email=committer.get("email"),
            committer_date=committer.get("date"),
            parents=tuple(data.get("parents") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert commit to its JSON form."""
        return {
            "sha": self.sha,
            "message": self.message,
            "author": {
                "name": self.author_name,
                "email": self.author_email,
                "date": self.author_date,
            },
            "committer": {
                "name": self.committer_name,
                "email": self.committer_email,
                "date": self.committer_date,
            },
            "parents": list(self.parents),
        }


@dataclass(frozen=True)
class RepositorySnapshot:
    """Files touched between two revisions, fixed for a whole session."""

    modified_files: Tuple[str, ...] = ()
    created_files: Tuple[str, ...] = ()
    deleted_files: Tuple[str, ...] = ()
    commits: Tuple[GitCommit, ...] = ()

    def __post_init__(self) -> None:
        """Freeze list inputs into tuples."""
        for name in ("modified_files", "created_files", "deleted_files", "commits"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositorySnapshot":
        """Build a snapshot from its JSON form."""
        return cls(
            modified_files=data.get("modified_files") or (),
            created_files=data.get("created_files") or (),
            deleted_files=data.get("deleted_files") or (),
            commits=[GitCommit.from_dict(c) for c in data.get("commits") or ()],
        )

    def classify(self, filename: str) -> Optional[str]:
        """Return "modified", "created", "deleted" or None for a path."""
        if filename in self.modified_files:
            return "modified"
        if filename in self.created_files:
            return "created"
        if filename in self.deleted_files:
            return "deleted"
        return None


class ChangeKind(str, Enum):
    """Kind of a single line in a diff chunk."""

    ADD = "add"
    DELETE = "delete"
    CONTEXT = "context"

    @classmethod
    def from_marker(cls, marker: str) -> "ChangeKind":
        """Map a unified diff line marker to a kind."""
        if marker == "+":
            return cls.ADD
        if marker == "-":
            return cls.DELETE
        if marker == " ":
            return cls.CONTEXT
        raise ValueError(f"Unknown diff line marker: {marker!r}")

    @classmethod
    def parse(cls, value: str) -> "ChangeKind":
        """Parse a kind name, accepting the short "del"/"normal" aliases."""
        aliases = {"del": cls.DELETE, "normal": cls.CONTEXT}
        if value in aliases:
            return aliases[value]
        return cls(value)


@dataclass
class LineChange:
    """One line of a chunk, including its diff marker."""

    kind: ChangeKind
    content: str
    old_lineno: Optional[int] = None
    new_lineno: Optional[int] = None


@dataclass
class Chunk:
    """A contiguous block of line changes."""

    header: str = ""
    old_start: int = 0
    old_lines: int = 0
    new_start: int = 0
    new_lines: int = 0
    changes: List[LineChange] = field(default_factory=list)


def _clean_path(path: Optional[str]) -> Optional[str]:
    if not path or path == DEV_NULL:
        return None
    return path


@dataclass
class FileDiffEntry:
    """Structured diff of one file; paths differ when it was renamed."""

    from_path: Optional[str]
    to_path: Optional[str]
    chunks: List[Chunk] = field(default_factory=list)

    def matches(self, filename: str) -> bool:
        """Whether either side of the entry is ``filename``."""
        return filename in (self.from_path, self.to_path)

    def iter_changes(self) -> Iterable[LineChange]:
        """All line changes across chunks, in diff order."""
        for chunk in self.chunks:
            yield from chunk.changes

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileDiffEntry":
        """Build an entry from a pre-structured provider payload.

        Accepts ``{from, to, chunks: [{content, oldStart, ..., changes}]}``
        where each change is ``{type, content}`` with ``type`` one of
        add/del/normal (or delete/context). Line numbers follow the
        ``ln``/``ln1``/``ln2`` convention when present.
        """
        chunks = []
        for raw_chunk in data.get("chunks") or ():
            changes = []
            for raw_change in raw_chunk.get("changes") or ():
                kind = ChangeKind.parse(raw_change["type"])
                old_lineno = new_lineno = None
                if kind is ChangeKind.ADD:
                    new_lineno = raw_change.get("ln")
                elif kind is ChangeKind.DELETE:
                    old_lineno = raw_change.get("ln")
                else:
                    old_lineno = raw_change.get("ln1")
                    new_lineno = raw_change.get("ln2")
                changes.append(
                    LineChange(
                        kind=kind,
                        content=raw_change.get("content", ""),
                        old_lineno=old_lineno,
                        new_lineno=new_lineno,
                    )
                )
            chunks.append(
                Chunk(
                    header=raw_chunk.get("content") or raw_chunk.get("header") or "",
                    old_start=raw_chunk.get("oldStart", raw_chunk.get("old_start", 0)),
                    old_lines=raw_chunk.get("oldLines", raw_chunk.get("old_lines", 0)),
                    new_start=raw_chunk.get("newStart", raw_chunk.get("new_start", 0)),
                    new_lines=raw_chunk.get("newLines", raw_chunk.get("new_lines", 0)),
                    changes=changes,
                )
            )
        return cls(
            from_path=_clean_path(data.get("from")),
            to_path=_clean_path(data.get("to")),
            chunks=chunks,
        )


# Ordered list of per-file entries between two revisions
StructuredDiff = List[FileDiffEntry]


@dataclass
class FileTextDiff:
    """Text views of one file's diff."""

    before: str
    after: str
    diff: str
    added: str
    removed: str


@dataclass
class FilePatch:
    """JSON patch between the two revisions of a file.

    ``before``/``after`` are None when the file is absent at that revision.
    ``patch`` holds RFC 6902 operations as dicts.
    """

    before: Any
    after: Any
    patch: List[Dict[str, Any]] = field(default_factory=list)
