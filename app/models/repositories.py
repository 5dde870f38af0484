"""Repository, user and ref-update models supplied by the repository host."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

ZERO_ID = "0" * 40

R_HEADS = "refs/heads/"
R_TAGS = "refs/tags/"


class User(BaseModel):
    username: str
    display_name: Optional[str] = None
    email_address: Optional[str] = None
    is_admin: bool = False

    @property
    def display(self) -> str:
        """Display name, falling back to the username."""
        return self.display_name or self.username


class RepositoryModel(BaseModel):
    """A hosted repository.

    Attributes:
        name: Repository path including ``.git`` (e.g. ``libs/foo.git``)
        project_path: Project (folder) the repository belongs to, if any
        is_personal: True for user-owned (``~user/...``) repositories
    """

    name: str
    project_path: Optional[str] = None
    is_personal: bool = False

    @property
    def display_name(self) -> str:
        if self.name.endswith(".git"):
            return self.name[: -len(".git")]
        return self.name


class Commit(BaseModel):
    id: str
    short_message: str = ""


class RefType(str, Enum):
    BRANCH = "branch"
    TAG = "tag"


class RefUpdateType(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    UPDATE_NONFASTFORWARD = "UPDATE_NONFASTFORWARD"
    DELETE = "DELETE"


class RefUpdate(BaseModel):
    """A single ref update received by a push."""

    ref_name: str
    old_id: str = ZERO_ID
    new_id: str = ZERO_ID
    type: RefUpdateType

    @property
    def ref_type(self) -> Optional[RefType]:
        """Branch or tag; None for refs outside those namespaces."""
        if self.ref_name.startswith(R_TAGS):
            return RefType.TAG
        if self.ref_name.startswith(R_HEADS):
            return RefType.BRANCH
        return None

    @property
    def short_ref(self) -> str:
        for prefix in (R_HEADS, R_TAGS):
            if self.ref_name.startswith(prefix):
                return self.ref_name[len(prefix) :]
        return self.ref_name
