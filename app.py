from flask import Flask
import matplotlib
matplotlib.use('Agg')
from core.config import DETECTOR_CONFIG, FLASK_CONFIG, THINGSBOARD_URL, MQTT_CONFIG
from core.sink import make_sink
from core.thingsboard import test_thingsboard_conn
from analysis.detector import BumpDetector
from routes.common import DETECTOR_KEY
from routes.multisensor import multisensor_bp
from routes.session import session_bp
from routes.status import status_bp
from routes.analysis import analysis_bp
from routes.debug import debug_bp


def create_app(detector=None):
    app = Flask(__name__)

    if detector is None:
        detector = BumpDetector(
            DETECTOR_CONFIG['device_id'],
            variant=DETECTOR_CONFIG['variant'],
            sink=make_sink(DETECTOR_CONFIG['transport']),
            publish_positions=DETECTOR_CONFIG['publish_positions'],
        )
    app.extensions[DETECTOR_KEY] = detector

    app.register_blueprint(multisensor_bp)
    app.register_blueprint(session_bp)
    app.register_blueprint(status_bp)
    app.register_blueprint(analysis_bp)
    app.register_blueprint(debug_bp)

    return app


app = create_app()

if __name__ == '__main__':
    detector = app.extensions[DETECTOR_KEY]

    print("🚀 Road Bump Monitor Flask Server Starting...")
    print("=" * 60)
    print(f"🚗 Detector variant: {detector.variant} | device: {detector.device_id}")
    print(f"📡 Transport: {detector.sink.name}")
    print("=" * 60)

    if detector.sink.name == 'thingsboard':
        print(f"🟢 ThingsBoard URL: {THINGSBOARD_URL}")
        test_thingsboard_conn()
    elif detector.sink.name == 'mqtt':
        print(f"🟢 MQTT broker: {MQTT_CONFIG['broker']}:{MQTT_CONFIG['port']} (prefix {MQTT_CONFIG['topic_prefix']})")
        if not detector.sink.connect():
            print("⚠️ MQTT connection failed - bumps will not be relayed")

    if DETECTOR_CONFIG['auto_start']:
        detector.start()

    print(f"🌐 Server running on http://{FLASK_CONFIG['host']}:{FLASK_CONFIG['port']}")
    print("=" * 60)

    app.run(**FLASK_CONFIG)
