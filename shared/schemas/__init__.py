"""Pydantic v2 schemas shared between the API, the worker and the CLI."""

from .uploads import *  # noqa: F401,F403
from .steps import *  # noqa: F401,F403
from .projects import *  # noqa: F401,F403
from .reminders import *  # noqa: F401,F403
from .admin import *  # noqa: F401,F403
