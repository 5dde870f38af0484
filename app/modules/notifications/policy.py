"""Feature-flag checks deciding which events are posted."""

from infrastructure.configuration import NotificationFeatureSettings
from models.repositories import RefType, RefUpdate, RepositoryModel


def should_post_repository(
    settings: NotificationFeatureSettings, repository: RepositoryModel
) -> bool:
    if repository.is_personal:
        return settings.POST_PERSONAL_REPOS
    return True


def should_post_ref(settings: NotificationFeatureSettings, update: RefUpdate) -> bool:
    match update.ref_type:
        case RefType.BRANCH:
            return settings.POST_BRANCHES
        case RefType.TAG:
            return settings.POST_TAGS
        case _:
            return False


def should_post_tickets(settings: NotificationFeatureSettings) -> bool:
    return settings.POST_TICKETS


def should_post_comments(settings: NotificationFeatureSettings) -> bool:
    return settings.POST_TICKETS and settings.POST_TICKET_COMMENTS
