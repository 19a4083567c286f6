"""
Concrete model definition for refresh sessions.

The model is swappable through 'swapper' so that integrating projects can
extend the session row (for example with tenant columns) while the library
keeps resolving the right table at runtime.
"""

import swapper

from drf_token_sessions.compat import Type
from drf_token_sessions.base.models import AbstractRefreshSession


def get_session_model() -> Type[AbstractRefreshSession]:
    """
    Resolves the active RefreshSession model class at runtime.
    """
    return swapper.load_model("drf_token_sessions", "RefreshSession")


class RefreshSession(AbstractRefreshSession):
    """
    The default concrete implementation of a refresh session.
    """

    class Meta(AbstractRefreshSession.Meta):
        swappable = swapper.swappable_setting("drf_token_sessions", "RefreshSession")
