"""Commit listing shared by push and patchset notifications."""

from typing import List

from models.repositories import Commit
from modules.notifications.links import LinkBuilder

MAX_COMMITS = 5
MAX_SUBJECT_LENGTH = 78


def trim_subject(subject: str, max_length: int = MAX_SUBJECT_LENGTH) -> str:
    if len(subject) <= max_length:
        return subject
    return subject[: max_length - 3] + "..."


def commit_digest(
    links: LinkBuilder,
    repository: str,
    commits: List[Commit],
    old_id: str,
    new_id: str,
    short_length: int,
) -> str:
    """Render up to ``MAX_COMMITS`` commit rows plus a compare link.

    Commits are listed in the order given. With more commits than rows the
    remainder is summarized ("3 more commits"); with 2 to 5 commits a
    "view comparison" link is appended instead.

    Returns:
        The digest, starting with a blank line, or "" when there are no commits
    """
    if not commits:
        return ""

    lines = ["\n\n"]
    for commit in commits[:MAX_COMMITS]:
        url = links.repository_url(repository, None, commit.id)
        short_id = commit.id[:short_length]
        lines.append(f"<{url}|`{short_id}`> {trim_subject(commit.short_message)}\n")

    if len(commits) > 1:
        compare_url = links.repository_url(repository, old_id, new_id)
        remainder = len(commits) - MAX_COMMITS
        if remainder == 1:
            label = "1 more commit"
        elif remainder > 1:
            label = f"{remainder} more commits"
        else:
            label = f"view comparison of these {len(commits)} commits"
        lines.append(f"<{compare_url}|{label}>")

    return "".join(lines)
