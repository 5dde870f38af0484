"""Test data factories for deterministic test data generation."""

from tests.factories.repositories import (
    make_commit,
    make_commits,
    make_directory,
    make_ref_update,
    make_repository,
    make_user,
)
from tests.factories.tickets import (
    make_change,
    make_patchset,
    make_ticket,
)

__all__ = [
    "make_commit",
    "make_commits",
    "make_directory",
    "make_ref_update",
    "make_repository",
    "make_user",
    "make_change",
    "make_patchset",
    "make_ticket",
]
