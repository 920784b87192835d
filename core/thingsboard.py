from datetime import datetime
import threading
import requests
from core.config import THINGSBOARD_URL, THINGSBOARD_CONFIG

TELEMETRY_PREFIX = "rbm_"


def build_telemetry(payload_data, data_type):
    """Key diberi prefix rbm_ supaya sumber data terlihat jelas di dashboard ThingsBoard"""
    telemetry = {f"{TELEMETRY_PREFIX}{key}": value for key, value in payload_data.items()}
    telemetry.update({
        f"{TELEMETRY_PREFIX}data_source": "road_bump_monitor",
        f"{TELEMETRY_PREFIX}data_type": data_type,
        f"{TELEMETRY_PREFIX}timestamp": datetime.now().isoformat(),
    })
    return telemetry


def test_thingsboard_conn(url=None):
    ok = send_to_thingsboard({
        "startup_test": "Road bump monitor starting",
        "startup_timestamp": datetime.now().isoformat(),
        "message_kinds": "pos + bump",
    }, "startup_test", url=url)

    if ok:
        print("✅ ThingsBoard connection successful")
    else:
        print("⚠️ ThingsBoard connection failed - check configuration")
    return ok


def send_to_thingsboard(payload_data, data_type="bump", url=None):
    """Kirim satu pesan telemetry via HTTP. Return True jika diterima (HTTP 200)."""
    url = url or THINGSBOARD_URL
    if not url:
        print(f"⚠️ ThingsBoard: URL not configured, {data_type} not sent")
        return False

    try:
        response = requests.post(
            url,
            json=build_telemetry(payload_data, data_type),
            headers={'Content-Type': 'application/json'},
            timeout=THINGSBOARD_CONFIG['timeout']
        )
    except requests.exceptions.RequestException as e:
        print(f"❌ ThingsBoard connection error ({data_type}): {e}")
        return False

    if response.status_code != 200:
        print(f"⚠️ ThingsBoard: HTTP {response.status_code} for {data_type} - {response.text}")
        return False

    print(f"✅ ThingsBoard: {data_type} sent")
    return True


def send_to_thingsboard_async(payload_data, data_type="bump", url=None):
    """Fire-and-forget: kirim di thread terpisah, tanpa menunggu hasil, tanpa retry"""
    thread = threading.Thread(
        target=send_to_thingsboard,
        args=(payload_data, data_type),
        kwargs={'url': url},
        daemon=True
    )
    thread.start()
    return thread
