class LobbyFeed:
    """Public listing of sessions, rebuilt from the registry on every call."""

    EVENT = 'gamesList'

    def __init__(self, registry, transport):
        self.registry = registry
        self.transport = transport

    def snapshot(self):
        return self.registry.list()

    def send_to(self, sid):
        self.transport.send(sid, self.EVENT, self.snapshot())

    def republish_to_all(self):
        self.transport.broadcast_all(self.EVENT, self.snapshot())
