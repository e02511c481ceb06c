"""
Error taxonomy shared by the game engine, the progress sink and the chat relay.

Operations invoked outside their valid state are not errors: the engine
treats them as silent no-ops and reports ``False`` to the caller.
"""


class DataUnavailable(Exception):
    """The question store failed or returned nothing usable at load time."""


class SinkWriteFailure(Exception):
    """A points award, progress upsert or achievement insert failed."""


class UpstreamChatFailure(Exception):
    """The LLM provider failed or returned no content."""


class SessionNotFound(Exception):
    """No live game session matches the given id for this user."""
