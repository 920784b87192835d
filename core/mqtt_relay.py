import json
import paho.mqtt.client as mqtt_client

from core.config import MQTT_CONFIG


class MqttRelayClient:
    """
    Client MQTT untuk relay publish/subscribe antar perangkat.

    Dua jenis pesan: '<prefix>/pos' (posisi) dan '<prefix>/bump' (event bump).
    Publish tanpa acknowledgment, subscribe ke topic bump.
    """

    def __init__(self, config=None, client_id="road-bump-monitor", client=None):
        self.config = config or MQTT_CONFIG
        prefix = self.config['topic_prefix']
        self.topic_pos = f"{prefix}/pos"
        self.topic_bump = f"{prefix}/bump"
        self.connected = False
        self.on_bump = None

        if client is None:
            client = mqtt_client.Client(
                mqtt_client.CallbackAPIVersion.VERSION2,
                client_id=client_id
            )
        self.client = client
        if self.config.get('username'):
            self.client.username_pw_set(self.config['username'], self.config.get('password'))
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message

    def connect(self):
        try:
            self.client.connect(self.config['broker'], self.config['port'], self.config['keepalive'])
            self.client.loop_start()
            print(f"🚀 MQTT client dimulai ({self.config['broker']}:{self.config['port']})")
            return True
        except Exception as e:
            print(f"❌ Gagal memulai MQTT client: {e}")
            return False

    def disconnect(self):
        try:
            self.client.loop_stop()
            self.client.disconnect()
        except Exception as e:
            print(f"⚠️ MQTT disconnect error: {e}")
        self.connected = False

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code == 0:
            print("✅ MQTT client terhubung ke broker")
            self.connected = True
            client.subscribe(self.topic_bump)
            print(f"📡 Subscribed to topic: {self.topic_bump}")
        else:
            print(f"❌ MQTT connect refused: {reason_code}")
            self.connected = False

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        self.connected = False
        print(f"⚠️ MQTT terputus: {reason_code}")

    def _on_message(self, client, userdata, msg):
        """Callback untuk bump dari perangkat lain"""
        try:
            payload = json.loads(msg.payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            print(f"❌ Error decoding MQTT message on {msg.topic}: {e}")
            return

        if msg.topic == self.topic_bump and self.on_bump is not None:
            self.on_bump(payload)

    def publish(self, topic, payload):
        if not self.connected:
            print(f"⚠️ MQTT tidak terhubung - {topic} tidak dikirim")
            return False
        try:
            result = self.client.publish(topic, json.dumps(payload))
        except Exception as e:
            print(f"❌ Error publishing to {topic}: {e}")
            return False

        if result.rc == 0:
            return True
        print(f"❌ Gagal publish ke {topic}: {result.rc}")
        return False
