import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ThingsBoard Configuration
THINGSBOARD_CONFIG = {
    'server': os.getenv('THINGSBOARD_SERVER'),
    'port': os.getenv('THINGSBOARD_PORT', '80'),
    'access_token': os.getenv('THINGSBOARD_ACCESS_TOKEN'),
    'timeout': float(os.getenv('THINGSBOARD_TIMEOUT', '10')),
}

# Build ThingsBoard URL (None jika belum dikonfigurasi)
if THINGSBOARD_CONFIG['server'] and THINGSBOARD_CONFIG['access_token']:
    THINGSBOARD_URL = f"http://{THINGSBOARD_CONFIG['server']}:{THINGSBOARD_CONFIG['port']}/api/v1/{THINGSBOARD_CONFIG['access_token']}/telemetry"
else:
    THINGSBOARD_URL = None

# MQTT broker untuk relay publish/subscribe antar perangkat
MQTT_CONFIG = {
    'broker': os.getenv('MQTT_BROKER', 'localhost'),
    'port': int(os.getenv('MQTT_PORT', '1883')),
    'topic_prefix': os.getenv('MQTT_TOPIC_PREFIX', 'road_bump'),
    'keepalive': int(os.getenv('MQTT_KEEPALIVE', '60')),
    'username': os.getenv('MQTT_USERNAME'),
    'password': os.getenv('MQTT_PASSWORD'),
}

FLASK_CONFIG = {
    'host': os.getenv('FLASK_HOST', '0.0.0.0'),
    'port': int(os.getenv('FLASK_PORT', '5000')),
    'debug': os.getenv('FLASK_DEBUG', 'False').lower() == "true",
}

# Konfigurasi sesi deteksi
DETECTOR_CONFIG = {
    'device_id': os.getenv('DEVICE_ID', 'flask-server'),
    'variant': os.getenv('DETECTOR_VARIANT', 'baseline'),   # baseline | enhanced
    'transport': os.getenv('EVENT_TRANSPORT', 'none'),      # thingsboard | mqtt | none
    'publish_positions': os.getenv('PUBLISH_POSITIONS', 'True').lower() == "true",
    'auto_start': os.getenv('AUTO_START', 'False').lower() == "true",
}

UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'static')
