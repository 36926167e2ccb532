"""FastAPI dependency utilities."""

from starlette.requests import HTTPConnection

from cofound.application.use_cases.messaging import MessagingContext, build_default_context


def get_messaging_context(connection: HTTPConnection) -> MessagingContext:
    """Return the messaging context attached to the running application.

    The context is built lazily so tests can install their own through
    ``app.state.messaging_context`` before the first request.
    """

    context = getattr(connection.app.state, "messaging_context", None)
    if context is None:
        context = build_default_context()
        connection.app.state.messaging_context = context
    return context
