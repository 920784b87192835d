import math

import pytest

from thresholds import EARTH_RADIUS, GRAVITY
from analysis.detector import BumpDetector
from analysis.models import AccelSample, PositionFix
from core.sink import EventSink

BASE_LAT = -6.2000
BASE_LON = 106.8166


class RecordingSink(EventSink):
    name = 'recording'

    def __init__(self):
        super().__init__()
        self.bumps = []
        self.positions = []
        self.closed = False

    def publish_bump(self, event):
        self.bumps.append(event)

    def publish_position(self, fix, device_id):
        self.positions.append((fix, device_id))

    def close(self):
        self.closed = True


def meters_to_lat(meters):
    """Selisih latitude (derajat) untuk jarak tertentu sepanjang meridian"""
    return math.degrees(meters / EARTH_RADIUS)


def points_north(n, spacing_m, lat=BASE_LAT, lon=BASE_LON):
    return [(lat + meters_to_lat(i * spacing_m), lon) for i in range(n)]


def make_fix(lat=BASE_LAT, lon=BASE_LON, ts=0.0, speed=None):
    return PositionFix(latitude=lat, longitude=lon, timestamp=ts, speed_mps=speed)


def bump_sample(extra, ts):
    """Sampel diam di sumbu z ditambah hentakan 'extra' m/s²"""
    return AccelSample(x=0.0, y=0.0, z=GRAVITY + extra, timestamp=ts)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def detector(sink):
    detector = BumpDetector('test-device', variant='baseline', sink=sink)
    assert detector.start()
    return detector


@pytest.fixture
def client(sink):
    from app import create_app

    detector = BumpDetector('test-device', variant='baseline', sink=sink)
    app = create_app(detector=detector)
    app.config['TESTING'] = True
    return app.test_client()
