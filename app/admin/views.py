from sqladmin import ModelView

from app.session.models import UserSession
from app.user.models import User


class UserAdmin(ModelView, model=User):
    name = "User"
    name_plural = "Users"

    column_list = [
        User.email,
        User.first_name,
        User.last_name,
        User.provider,
        User.role,
        User.status,
        User.id,
        User.created_at,
        User.updated_at,
    ]

    column_searchable_list = [
        User.email,
        User.first_name,
        User.last_name,
        User.social_id,
    ]

    column_sortable_list = [
        User.email,
        User.role,
        User.status,
        User.created_at,
        User.updated_at,
    ]

    # Password hashes are set through the API, never edited by hand.
    column_details_exclude_list = [User.password]
    form_excluded_columns = [User.password, User.created_at, User.updated_at]


class SessionAdmin(ModelView, model=UserSession):
    """Open sessions. Deleting a row revokes that session's refresh token."""

    name = "Session"
    name_plural = "Sessions"

    can_create = False
    can_edit = False

    column_list = [
        UserSession.id,
        UserSession.user_id,
        UserSession.created_at,
        UserSession.updated_at,
    ]
    column_searchable_list = [UserSession.user_id]
    column_sortable_list = [UserSession.created_at]
    column_details_exclude_list = [UserSession.hash]
