from flask import Blueprint, request, jsonify
from datetime import datetime
import math
import time

from analysis.models import PositionFix, AccelSample
from routes.common import get_detector

multisensor_bp = Blueprint('multisensor', __name__)


def _finite_float(value):
    """float() yang menolak inf / NaN (JSON 1e999 atau "nan" lolos dari float biasa)"""
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value: {value!r}")
    return number


def _optional_float(data, key):
    value = data.get(key)
    if value is None:
        return None
    return _finite_float(value)


def parse_sensor_data(data, now_ms=None):
    """
    Parse satu pembacaan sensor (format flat seperti payload ESP32 / ponsel)

    Return (fix, sample, errors). fix / sample bernilai None jika bagiannya tidak ada
    atau tidak valid.
    """
    errors = []
    if now_ms is None:
        now_ms = time.time() * 1000.0

    try:
        timestamp = _finite_float(data.get('timestamp', now_ms))
    except (TypeError, ValueError):
        errors.append(f"invalid timestamp: {data.get('timestamp')!r}")
        timestamp = now_ms

    fix = None
    if data.get('latitude') is not None and data.get('longitude') is not None:
        try:
            fix = PositionFix(
                latitude=_finite_float(data['latitude']),
                longitude=_finite_float(data['longitude']),
                timestamp=timestamp,
                speed_mps=_optional_float(data, 'speed'),
                accuracy_m=_optional_float(data, 'accuracy'),
            )
        except (TypeError, ValueError) as e:
            errors.append(f"invalid gps: {e}")

    sample = None
    if all(data.get(key) is not None for key in ['accelX', 'accelY', 'accelZ']):
        try:
            sample = AccelSample(
                x=_finite_float(data['accelX']),
                y=_finite_float(data['accelY']),
                z=_finite_float(data['accelZ']),
                timestamp=timestamp,
            )
        except (TypeError, ValueError) as e:
            errors.append(f"invalid accel: {e}")

    return fix, sample, errors


def process_sensor_data(detector, data):
    """Fix diproses sebelum sampel, supaya bump memakai posisi yang sudah diketahui"""
    fix, sample, errors = parse_sensor_data(data)
    for error in errors:
        print(f"⚠️ Skip bagian data: {error}")

    if data.get('gps_error'):
        detector.on_location_error(data['gps_error'])

    fix_update = detector.on_fix(fix) if fix is not None else None
    event = detector.on_sample(sample) if sample is not None else None

    return {
        'fix_processed': fix_update is not None,
        'path_appended': fix_update.path_appended if fix_update is not None else False,
        'sample_processed': sample is not None and detector.running,
        'bump': event.to_payload() if event is not None else None,
        'errors': errors,
    }


@multisensor_bp.route('/multisensor', methods=['POST'])
def multisensor():
    """Endpoint untuk menerima satu pembacaan sensor (accelerometer dan/atau GPS)"""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"error": "No data received"}), 400

    detector = get_detector()
    result = process_sensor_data(detector, data)

    return jsonify({
        "status": "success" if detector.running else "idle",
        "timestamp": datetime.now().isoformat(),
        "detector_state": detector.classifier.state,
        "speed_kmh": round(detector.geo.speed_kmh, 1),
        **result
    }), 200


@multisensor_bp.route('/offline-data', methods=['POST'])
def process_offline_data():
    """Endpoint untuk menerima batch pembacaan offline, diproses berurutan"""
    data_batch = request.get_json(silent=True)
    if not data_batch or not isinstance(data_batch, list):
        return jsonify({"error": "No data received"}), 400

    print(f"📥 Received {len(data_batch)} offline data points")

    detector = get_detector()
    bumps = []
    skipped = 0
    for data in data_batch:
        if not isinstance(data, dict):
            skipped += 1
            continue
        result = process_sensor_data(detector, data)
        if result['bump'] is not None:
            bumps.append(result['bump'])

    return jsonify({
        "status": "success" if detector.running else "idle",
        "message": f"Processed {len(data_batch) - skipped} offline data points",
        "skipped": skipped,
        "bumps": bumps,
        "timestamp": datetime.now().isoformat()
    }), 200
