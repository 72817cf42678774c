"""
Pydantic schemas for `note`.

Validation rules:
- `title` is trimmed, required, at most 200 chars and HTML-escaped.
- `content` is required and at most 50,000 chars.
- `category`/`topic` at most 50 chars; `difficulty` in {Easy, Medium, Hard}.
- `tags`: at most 20 items of at most 30 chars; blanks and repeats dropped.
"""
import html
from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DIFFICULTIES = ("Easy", "Medium", "Hard")

TITLE_MAX = 200
CONTENT_MAX = 50_000
LABEL_MAX = 50
TAGS_MAX = 20
TAG_MAX = 30


def _as_text(v: Any, label: str) -> Optional[str]:
    if v is None:
        return None
    if not isinstance(v, str):
        raise ValueError(f"{label} must be a string")
    return v


def _clean_label(v: Any, label: str) -> Optional[str]:
    v = _as_text(v, label)
    if v is None:
        return None
    v = v.strip()
    if len(v) > LABEL_MAX:
        raise ValueError(f"{label} must be at most {LABEL_MAX} characters")
    return html.escape(v)


def _clean_tags(v: Any) -> Optional[List[str]]:
    if v is None:
        return None
    if not isinstance(v, list) or len(v) > TAGS_MAX:
        raise ValueError(f"Tags must be an array with at most {TAGS_MAX} items")
    out: List[str] = []
    for t in v:
        if not isinstance(t, str):
            raise ValueError("Each tag must be a string")
        t = t.strip()
        if len(t) > TAG_MAX:
            raise ValueError(f"Each tag must be at most {TAG_MAX} characters")
        t = html.escape(t)
        if t and t not in out:
            out.append(t)
    return out


def _check_difficulty(v: Any) -> Optional[str]:
    if v is not None and v not in DIFFICULTIES:
        raise ValueError("Difficulty must be Easy, Medium, or Hard")
    return v


class _NoteFields(BaseModel):
    """Optional metadata shared by create and update payloads."""

    model_config = ConfigDict(populate_by_name=True)

    category: Optional[str] = None
    topic: Optional[str] = None
    difficulty: Optional[str] = None
    tags: Optional[List[str]] = None
    is_favorite: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("is_favorite", "isFavorite")
    )
    color: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return _clean_label(v, "Category")

    @field_validator("topic", mode="before")
    @classmethod
    def _topic(cls, v):
        return _clean_label(v, "Topic")

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty(cls, v):
        return _check_difficulty(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v):
        return _clean_tags(v)

    @field_validator("is_favorite", mode="before")
    @classmethod
    def _is_favorite(cls, v):
        if v is not None and not isinstance(v, bool):
            raise ValueError("isFavorite must be a boolean")
        return v

    @field_validator("color", mode="before")
    @classmethod
    def _color(cls, v):
        v = _as_text(v, "Color")
        return html.escape(v.strip()) if v is not None else None


class NoteCreate(_NoteFields):
    title: str = Field(default="", validate_default=True)
    content: str = Field(default="", validate_default=True)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        v = (_as_text(v, "Title") or "").strip()
        if not v:
            raise ValueError("Title is required")
        if len(v) > TITLE_MAX:
            raise ValueError(f"Title must be at most {TITLE_MAX} characters")
        return html.escape(v)

    @field_validator("content", mode="before")
    @classmethod
    def _content(cls, v):
        v = _as_text(v, "Content") or ""
        if not v.strip():
            raise ValueError("Content is required")
        if len(v) > CONTENT_MAX:
            raise ValueError("Content must be at most 50,000 characters")
        return v


class NoteUpdate(_NoteFields):
    """Partial update. Omitted, null or blank title/content keep the stored value."""

    title: Optional[str] = None
    content: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        v = _as_text(v, "Title")
        if v is None or not v.strip():
            return None
        v = v.strip()
        if len(v) > TITLE_MAX:
            raise ValueError(f"Title must be at most {TITLE_MAX} characters")
        return html.escape(v)

    @field_validator("content", mode="before")
    @classmethod
    def _content(cls, v):
        v = _as_text(v, "Content")
        if v is None or not v.strip():
            return None
        if len(v) > CONTENT_MAX:
            raise ValueError("Content must be at most 50,000 characters")
        return v

    def changes(self) -> dict:
        """Fields the caller actually provided, without nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class AttachmentOut(BaseModel):
    url: str
    storage_id: str
    type: Literal["image", "pdf"]
    filename: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    uploaded_at: Optional[str] = None


class NoteOut(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    category: str
    topic: str
    difficulty: Literal["Easy", "Medium", "Hard"]
    tags: List[str]
    attachments: List[AttachmentOut]
    is_favorite: bool
    color: str
    created_at: str
    updated_at: str

    @classmethod
    def from_doc(cls, doc: dict) -> "NoteOut":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        data["user_id"] = str(data["user_id"])
        data.setdefault("attachments", [])
        data.setdefault("tags", [])
        return cls(**data)


class MessageOut(BaseModel):
    message: str
