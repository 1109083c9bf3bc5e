"""Infrastructure for the intake portal: local storage and outbound transports.

Nothing in here knows about HTTP; the API and the worker compose these pieces.
"""

__version__ = "0.3.0"
