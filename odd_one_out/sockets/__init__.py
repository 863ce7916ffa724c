"""Socket.IO change feed: clients subscribe per game room."""


def register_handlers() -> None:
    """Import the handler module so its @socketio.on decorators run.

    Must be called before ``socketio.init_app``: decorators that run while
    the extension has no server are queued and replayed on every init.
    """
    from . import handlers  # noqa: F401
