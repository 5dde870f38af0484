"""Ticket models supplied by the repository host's ticket service."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class TicketField(Enum):
    """Ticket fields, declared in canonical display order."""

    title = "title"
    body = "body"
    responsible = "responsible"
    type = "type"
    status = "status"
    milestone = "milestone"
    mergeSha = "mergeSha"
    mergeTo = "mergeTo"
    topic = "topic"
    labels = "labels"
    watchers = "watchers"
    reviewers = "reviewers"
    voters = "voters"
    mentions = "mentions"
    priority = "priority"
    severity = "severity"

    @property
    def ordinal(self) -> int:
        return list(TicketField).index(self)


class TicketStatus(str, Enum):
    New = "New"
    Open = "Open"
    Closed = "Closed"
    Resolved = "Resolved"
    Fixed = "Fixed"
    Merged = "Merged"
    Wontfix = "Wontfix"
    Declined = "Declined"
    Duplicate = "Duplicate"
    Invalid = "Invalid"
    Abandoned = "Abandoned"
    On_Hold = "On_Hold"


class ReviewScore(str, Enum):
    approved = "approved"
    looks_good = "looks_good"
    not_reviewed = "not_reviewed"
    needs_improvement = "needs_improvement"
    vetoed = "vetoed"


class Patchset(BaseModel):
    """A revision of a proposed change.

    ``number`` increments when the patchset is rewritten, ``rev`` when it
    is fast-forwarded; ``added`` counts commits added by this revision.
    """

    number: int
    rev: int
    type: str = "Proposal"
    base: Optional[str] = None
    tip: str
    added: int = 0


class Review(BaseModel):
    patchset: int
    rev: int
    score: ReviewScore


class Comment(BaseModel):
    text: str
    deleted: bool = False


class Change(BaseModel):
    """One journal entry of a ticket: who changed what."""

    author: str
    fields: Dict[TicketField, Optional[str]] = Field(default_factory=dict)
    comment: Optional[Comment] = None
    patchset: Optional[Patchset] = None
    review: Optional[Review] = None

    def get_field(self, field: TicketField) -> Optional[str]:
        return self.fields.get(field)

    def has_field_changes(self) -> bool:
        return bool(self.fields)

    def has_review(self) -> bool:
        return self.review is not None

    def has_patchset(self) -> bool:
        return self.patchset is not None

    def is_status_change(self) -> bool:
        return TicketField.status in self.fields

    def is_merge(self) -> bool:
        return (
            self.is_status_change()
            and self.fields.get(TicketField.status) == TicketStatus.Merged.value
            and bool(self.fields.get(TicketField.mergeSha))
        )

    def has_comment(self) -> bool:
        return self.comment is not None and not self.comment.deleted


class Ticket(BaseModel):
    """Current snapshot of a ticket plus its change journal."""

    number: int
    repository: str
    title: str
    body: Optional[str] = None
    status: TicketStatus = TicketStatus.New
    responsible: Optional[str] = None
    milestone: Optional[str] = None
    merge_to: Optional[str] = None
    changes: List[Change] = Field(default_factory=list)

    @property
    def patchsets(self) -> List[Patchset]:
        return [c.patchset for c in self.changes if c.patchset is not None]

    def get_patchset(self, number: int, rev: int) -> Optional[Patchset]:
        for patchset in self.patchsets:
            if patchset.number == number and patchset.rev == rev:
                return patchset
        return None
