import pytest

from analysis.classifier import ARMED
from analysis.detector import BumpDetector, ensure_motion_permission
from analysis.models import AccelSample
from thresholds import GRAVITY

from conftest import RecordingSink, bump_sample, make_fix, points_north


class FailingSink(RecordingSink):
    def publish_bump(self, event):
        raise ConnectionError("relay down")


def drive_path(detector, points, step_ms=1000):
    for i, (lat, lon) in enumerate(points):
        detector.on_fix(make_fix(lat=lat, lon=lon, ts=i * step_ms))


def test_idle_detector_ignores_input(sink):
    detector = BumpDetector('dev', sink=sink)
    assert detector.on_sample(bump_sample(30, 0)) is None
    assert detector.on_fix(make_fix()) is None
    assert detector.geo.get_path() == []
    assert sink.positions == []


@pytest.mark.parametrize('request_permission, expected', [
    (None, True),
    (lambda: 'granted', True),
    (lambda: 'denied', False),
])
def test_motion_permission(request_permission, expected):
    assert ensure_motion_permission(request_permission) is expected


def test_permission_error_counts_as_denied():
    def broken():
        raise RuntimeError("no sensor API")

    detector = BumpDetector('dev')
    assert detector.start(broken) is False
    assert not detector.running


def test_start_is_idempotent(detector):
    assert detector.start()
    assert detector.running


def test_bump_detected_and_published(detector, sink):
    event = detector.on_sample(bump_sample(12, 1000))
    assert event is not None
    assert sink.bumps == [event]
    assert detector.local_events == [event]
    assert detector.feed.get_data()[0]['id'] == event.id


def test_small_vibration_ignored(detector, sink):
    assert detector.on_sample(bump_sample(2, 0)) is None
    assert sink.bumps == []


def test_event_tagged_with_latest_fix(detector):
    first, second = points_north(2, 50)
    detector.on_fix(make_fix(lat=first[0], lon=first[1], ts=0))
    event_a = detector.on_sample(bump_sample(12, 100))
    detector.on_fix(make_fix(lat=second[0], lon=second[1], ts=20000))
    event_b = detector.on_sample(bump_sample(12, 20100))
    assert event_a.coords == first
    assert event_b.coords == second


def test_baseline_event_without_fix_has_no_coords(detector):
    event = detector.on_sample(bump_sample(12, 0))
    assert event.coords is None
    assert event.to_payload()['lat'] is None


def test_strong_bump_highlights_segment(detector):
    # 12 m/detik -> 43.2 km/h -> sensitivity 14, threshold kuat 17
    drive_path(detector, points_north(10, 12))
    assert detector.tuner.params.sensitivity_threshold == 14

    weak = detector.on_sample(bump_sample(15, 9500))
    assert weak is not None
    assert detector.segments == []

    strong = detector.on_sample(bump_sample(20, 20000))
    assert strong is not None
    assert len(detector.segments) == 1
    segment = detector.segments[0]
    assert segment.event_id == strong.id
    assert segment.points[-1] == strong.coords
    assert segment.length_m >= 30.0


def test_strong_bump_without_path_has_no_segment(detector):
    event = detector.on_sample(bump_sample(25, 0))
    assert event is not None
    assert detector.segments == []


def test_cooldown_between_bumps(detector):
    # Diam: cooldown 2500 ms
    assert detector.on_sample(bump_sample(12, 0)) is not None
    assert detector.on_sample(bump_sample(12, 2000)) is None
    assert detector.on_sample(bump_sample(12, 2500)) is not None


def test_restart_is_cold(detector):
    assert detector.on_sample(bump_sample(12, 0)) is not None
    detector.stop()
    assert detector.on_sample(bump_sample(12, 10)) is None
    detector.start()
    assert detector.classifier.state == ARMED
    assert detector.on_sample(bump_sample(12, 20)) is not None


def test_path_survives_stop_start(detector):
    drive_path(detector, points_north(3, 12))
    detector.stop()
    detector.start()
    assert len(detector.geo.get_path()) == 3
    assert detector.geo.latest_fix is not None


def test_tuning_follows_speed(detector):
    detector.on_fix(make_fix(ts=0, speed=20.0))
    status = detector.get_status()
    assert status['speed_kmh'] == 72.0
    assert status['tuning']['sensitivity'] == 16
    assert status['tuning']['cooldown_ms'] == 800


def test_manual_tuning_overrides_speed(detector):
    detector.set_auto_tune(False)
    detector.set_manual_tuning(18, 1000)
    detector.on_fix(make_fix(ts=0, speed=20.0))
    assert detector.on_sample(bump_sample(17, 100)) is None
    assert detector.on_sample(bump_sample(19, 200)) is not None


def test_invalid_manual_tuning_rejected(detector):
    with pytest.raises(ValueError):
        detector.set_manual_tuning(0, 1000)


def test_remote_bump_while_idle_only_touches_feed(sink):
    detector = BumpDetector('dev', sink=sink)
    sink.deliver_remote({'id': 'r1', 'deviceId': 'other', 'lat': 1.0, 'lng': 2.0})
    assert detector.feed.get_data() == [{'id': 'r1', 'deviceId': 'other', 'lat': 1.0, 'lng': 2.0}]
    assert detector.local_events == []
    assert detector.classifier.state == ARMED
    assert sink.bumps == []


def test_remote_snapshot_newest_first(detector):
    count = detector.on_remote_snapshot([{'id': 'old'}, {'id': 'new'}])
    assert count == 2
    assert [b['id'] for b in detector.feed.get_data()] == ['new', 'old']


def test_publish_failure_does_not_break_detection():
    sink = FailingSink()
    detector = BumpDetector('dev', sink=sink)
    detector.start()
    first = detector.on_sample(bump_sample(12, 0))
    assert first is not None
    assert detector.local_events == [first]
    assert detector.on_sample(bump_sample(12, 5000)) is not None


def test_positions_published(detector, sink):
    fix = make_fix(ts=0, speed=1.0)
    detector.on_fix(fix)
    assert sink.positions == [(fix, 'test-device')]


def test_positions_not_published_when_disabled(sink):
    detector = BumpDetector('dev', sink=sink, publish_positions=False)
    detector.start()
    detector.on_fix(make_fix())
    assert sink.positions == []


def test_enhanced_requires_fix_and_speed(sink):
    detector = BumpDetector('dev', variant='enhanced', sink=sink)
    detector.start()

    def jolt(t0):
        events = [
            detector.on_sample(AccelSample(0, 0, GRAVITY, t0)),
            detector.on_sample(AccelSample(0, 0, GRAVITY + 10, t0 + 20)),
        ]
        return [e for e in events if e is not None]

    assert jolt(0) == []

    detector.on_fix(make_fix(ts=0, speed=1.0))
    assert jolt(100) == []

    detector.on_fix(make_fix(ts=1000, speed=5.0))
    events = jolt(200)
    assert len(events) == 1
    event = events[0]
    assert event.coords == make_fix().coords
    assert event.speed_kmh == pytest.approx(18.0)
    assert event.accel_magnitude > 3.0


def test_unknown_variant_rejected():
    with pytest.raises(ValueError):
        BumpDetector('dev', variant='turbo')


def test_destroy_releases_everything(detector, sink):
    drive_path(detector, points_north(3, 12))
    detector.on_sample(bump_sample(12, 5000))
    detector.destroy()
    assert sink.closed
    assert not detector.running
    assert detector.geo.get_path() == []
    assert detector.feed.get_data() == []
    with pytest.raises(RuntimeError):
        detector.start()


def test_status_snapshot(detector):
    detector.on_sample(bump_sample(3, 0))
    status = detector.get_status()
    assert status['running'] is True
    assert status['variant'] == 'baseline'
    assert status['detector_state'] == ARMED
    assert status['last_signal']['linear'] == pytest.approx(3.0)
    assert status['last_signal']['jerk'] is None
    assert status['transport'] == 'recording'


def test_nan_sample_does_not_disable_enhanced_detection(sink):
    detector = BumpDetector('dev', variant='enhanced', sink=sink)
    detector.start()
    detector.on_fix(make_fix(ts=0, speed=5.0))

    readings = [GRAVITY, float('nan'), GRAVITY, GRAVITY, GRAVITY + 20]
    events = [
        detector.on_sample(AccelSample(0, 0, z, 5000 + i * 5))
        for i, z in enumerate(readings)
    ]
    assert events[:4] == [None, None, None, None]
    assert events[4] is not None


def test_non_finite_fix_not_published(detector, sink):
    assert detector.on_fix(make_fix(lat=float('inf'), ts=0)) is None
    assert sink.positions == []
    assert detector.geo.latest_fix is None
