import threading

from thresholds import DETECTOR_VARIANTS
from analysis.auto_tuner import AutoTuner
from analysis.buffer import BumpFeed
from analysis.classifier import BumpClassifier, get_bump_severity, get_high_threshold
from analysis.correlator import SegmentCorrelator
from analysis.geo_tracker import GeoTracker
from filters.conditioner import make_conditioner
from core.sink import NullSink


def ensure_motion_permission(request_permission=None):
    """
    Izin sensor gerak.

    Tanpa API izin (None / bukan callable) dianggap diizinkan. Error saat meminta izin = ditolak.
    """
    if not callable(request_permission):
        return True
    try:
        return request_permission() == 'granted'
    except Exception as e:
        print(f"⚠️ Motion permission request failed: {e}")
        return False


class BumpDetector:
    """
    Satu sesi deteksi bump untuk satu perangkat.

    Lifecycle: construct -> start -> stop -> (start lagi ...) -> destroy.
    Semua entry point diserialisasi dengan satu lock.
    """

    def __init__(self, device_id, variant='baseline', sink=None, publish_positions=True):
        if variant not in DETECTOR_VARIANTS:
            raise ValueError(f"Unknown detector variant '{variant}', expected one of {sorted(DETECTOR_VARIANTS)}")
        self.config = DETECTOR_VARIANTS[variant]
        self.device_id = device_id
        self.variant = variant
        self.publish_positions = publish_positions
        self.lock = threading.RLock()

        self.geo = GeoTracker()
        self.tuner = AutoTuner(
            auto_tune=self.config['auto_tune'],
            manual_sensitivity=self.config.get('manual_sensitivity'),
            manual_cooldown_ms=self.config.get('manual_cooldown_ms'),
            limits=self.config.get('manual_limits'),
        )
        self.conditioner = make_conditioner(self.config['conditioner'])
        self.classifier = BumpClassifier(
            device_id,
            require_fix=self.config['require_fix'],
            min_speed_kmh=self.config['min_speed_kmh'],
        )
        self.correlator = SegmentCorrelator()

        self.feed = BumpFeed()
        self.local_events = []
        self.segments = []
        self.last_signal = None

        self.sink = sink or NullSink()
        self.sink.set_inbound_handler(self.on_remote_bump)

        self.running = False
        self.destroyed = False

    # === LIFECYCLE ===

    def start(self, request_permission=None):
        """Mulai deteksi. Return False jika izin sensor gerak ditolak."""
        with self.lock:
            if self.destroyed:
                raise RuntimeError("Detector already destroyed")
            if self.running:
                return True
            if not ensure_motion_permission(request_permission):
                print("❌ Motion permission denied - detection not started")
                return False

            # Selalu mulai dingin: ARMED, cooldown kosong
            self.conditioner.reset()
            self.classifier.reset()
            self.running = True
            print(f"🟢 Detection started ({self.variant}, device={self.device_id})")
            return True

    def stop(self):
        """Berhenti menerima sampel dan buang state detektor (tidak di-flush)"""
        with self.lock:
            if not self.running:
                return
            self.running = False
            self.conditioner.reset()
            self.classifier.reset()
            self.last_signal = None
            print("🔴 Detection stopped")

    def destroy(self):
        with self.lock:
            self.stop()
            self.geo.reset()
            self.feed.clear()
            self.local_events.clear()
            self.segments.clear()
            self.sink.set_inbound_handler(None)
            self.sink.close()
            self.destroyed = True

    # === INPUT ===

    def on_fix(self, fix):
        """Fix GPS. Diabaikan jika deteksi tidak berjalan."""
        with self.lock:
            if not self.running:
                return None

            update = self.geo.on_fix(fix)
            if update is None:
                return None
            if update.speed_updated:
                self.tuner.update_speed(update.speed_kmh)

        if self.publish_positions:
            self._publish(self.sink.publish_position, fix, self.device_id)
        return update

    def on_location_error(self, error):
        with self.lock:
            self.geo.on_location_error(error)

    def on_sample(self, sample):
        """Sampel accelerometer. Return BumpEvent jika terdeteksi, selain itu None."""
        with self.lock:
            if not self.running:
                return None

            signal = self.conditioner.on_sample(sample)
            self.last_signal = signal
            tuning = self.tuner.params

            event = self.classifier.classify(
                signal,
                sample.timestamp,
                tuning,
                self.geo.latest_fix,
                self.geo.speed_kmh,
            )
            if event is None:
                return None

            self.local_events.append(event)
            self.feed.add_local(event)
            print(
                f"💥 Bump {event.id}: metric={event.accel_magnitude:.2f} "
                f"score={event.score:.2f} ({get_bump_severity(event.score)}) "
                f"speed={event.speed_kmh:.1f} km/h at {event.coords}"
            )

            high = get_high_threshold(
                tuning.sensitivity_threshold,
                self.config['high_floor'],
                self.config['high_margin'],
            )
            if signal.metric >= high:
                segment = self.correlator.on_strong_event(event.coords, self.geo.get_path(), event.id)
                if segment is not None:
                    self.segments.append(segment)
                    print(f"🟥 Hot segment {len(segment.points)} points, {segment.length_m:.1f}m")

        self._publish(self.sink.publish_bump, event)
        return event

    def on_remote_bump(self, payload):
        """Bump dari perangkat lain: masuk feed apa adanya, state detektor tidak disentuh"""
        with self.lock:
            self.feed.add_remote(payload)

    def on_remote_snapshot(self, payloads):
        with self.lock:
            return self.feed.add_remote_snapshot(payloads)

    # === TUNING ===

    def set_auto_tune(self, enabled):
        with self.lock:
            self.tuner.set_auto(enabled)
            return self.tuner.params

    def set_manual_tuning(self, sensitivity, cooldown_ms):
        with self.lock:
            return self.tuner.set_manual(sensitivity, cooldown_ms)

    # === STATE ===

    def get_status(self):
        with self.lock:
            tuning = self.tuner.params
            fix = self.geo.latest_fix
            return {
                'running': self.running,
                'variant': self.variant,
                'device_id': self.device_id,
                'detector_state': self.classifier.state,
                'speed_kmh': round(self.geo.speed_kmh, 1),
                'latest_fix': fix.to_payload(self.device_id) if fix is not None else None,
                'tuning': {
                    'auto_tune': self.tuner.auto_tune,
                    'cooldown_ms': tuning.cooldown_ms,
                    'sensitivity': tuning.sensitivity_threshold,
                    'source': tuning.source,
                },
                'last_signal': {
                    'linear': self.last_signal.linear_magnitude,
                    'jerk': self.last_signal.jerk_magnitude,
                } if self.last_signal is not None else None,
                'path_points': self.geo.path.get_count(),
                'feed_count': self.feed.get_data_count(),
                'local_bumps': len(self.local_events),
                'segments': len(self.segments),
                'transport': self.sink.name,
            }

    def _publish(self, publish, *args):
        # Kegagalan publish tidak boleh mempengaruhi deteksi
        try:
            publish(*args)
        except Exception as e:
            print(f"❌ Publish error ({self.sink.name}): {e}")
