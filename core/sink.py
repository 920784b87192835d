from core.config import DETECTOR_CONFIG, THINGSBOARD_URL
from core.thingsboard import send_to_thingsboard_async
from core.mqtt_relay import MqttRelayClient


class EventSink:
    """
    Batas keluar/masuk event.

    Outbound: publish BumpEvent dan PositionFix, fire-and-forget (tanpa ack, tanpa retry).
    Inbound: bump dari perangkat lain diteruskan ke handler apa adanya.
    """

    name = 'none'

    def __init__(self):
        self.inbound_handler = None

    def set_inbound_handler(self, handler):
        self.inbound_handler = handler

    def connect(self):
        return True

    def close(self):
        pass

    def publish_bump(self, event):
        raise NotImplementedError

    def publish_position(self, fix, device_id):
        raise NotImplementedError

    def deliver_remote(self, payload):
        if self.inbound_handler is not None:
            self.inbound_handler(payload)


class NullSink(EventSink):
    """Tanpa transport: event hanya dicatat ke console"""

    def publish_bump(self, event):
        print(f"📡 (offline) bump {event.id} not published")

    def publish_position(self, fix, device_id):
        pass


class ThingsBoardSink(EventSink):
    name = 'thingsboard'

    def __init__(self, url=None):
        super().__init__()
        self.url = url or THINGSBOARD_URL

    def publish_bump(self, event):
        send_to_thingsboard_async(event.to_payload(), "bump", url=self.url)

    def publish_position(self, fix, device_id):
        send_to_thingsboard_async(fix.to_payload(device_id), "pos", url=self.url)


class MqttSink(EventSink):
    name = 'mqtt'

    def __init__(self, relay=None, client_id=None):
        super().__init__()
        self.relay = relay or MqttRelayClient(client_id=client_id or DETECTOR_CONFIG['device_id'])
        self.relay.on_bump = self.deliver_remote

    def connect(self):
        return self.relay.connect()

    def close(self):
        self.relay.disconnect()

    def publish_bump(self, event):
        self.relay.publish(self.relay.topic_bump, event.to_payload())

    def publish_position(self, fix, device_id):
        self.relay.publish(self.relay.topic_pos, fix.to_payload(device_id))


def make_sink(transport=None):
    transport = transport or DETECTOR_CONFIG['transport']
    if transport == ThingsBoardSink.name:
        return ThingsBoardSink()
    if transport == MqttSink.name:
        return MqttSink()
    if transport != NullSink.name:
        print(f"⚠️ Unknown transport '{transport}', events will not be published")
    return NullSink()
