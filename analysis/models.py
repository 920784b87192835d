from dataclasses import dataclass
from typing import Optional, Tuple

Coords = Tuple[float, float]  # (latitude, longitude)


@dataclass(frozen=True, slots=True)
class PositionFix:
    """Satu fix GPS dari sumber lokasi (timestamp dalam ms)"""
    latitude: float
    longitude: float
    timestamp: float
    speed_mps: Optional[float] = None
    accuracy_m: Optional[float] = None

    @property
    def coords(self) -> Coords:
        return (self.latitude, self.longitude)

    def to_payload(self, device_id):
        """Format pesan 'pos' untuk relay"""
        return {
            'deviceId': device_id,
            'lat': self.latitude,
            'lng': self.longitude,
            'speed': self.speed_mps if self.speed_mps is not None else 0,
            'accuracy': self.accuracy_m,
            'ts': self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class AccelSample:
    """Sampel accelerometer mentah (termasuk gravitasi), m/s²"""
    x: float
    y: float
    z: float
    timestamp: float


@dataclass(frozen=True, slots=True)
class ConditionedSignal:
    linear_magnitude: float
    jerk_magnitude: Optional[float] = None

    @property
    def metric(self) -> float:
        # Varian jerk selalu mengisi jerk_magnitude, varian gravitasi tidak pernah
        if self.jerk_magnitude is not None:
            return self.jerk_magnitude
        return self.linear_magnitude


@dataclass(frozen=True, slots=True)
class TuningParams:
    cooldown_ms: float
    sensitivity_threshold: float
    source: str = 'auto'


@dataclass(frozen=True, slots=True)
class BumpEvent:
    """Event bump yang terdeteksi secara lokal. Tidak pernah diubah setelah dibuat."""
    id: str
    device_id: str
    timestamp: float
    coords: Optional[Coords]
    accel_magnitude: float
    speed_kmh: float
    score: float

    def to_payload(self):
        """Format pesan 'bump' untuk relay dan feed tampilan"""
        lat, lng = self.coords if self.coords is not None else (None, None)
        return {
            'id': self.id,
            'deviceId': self.device_id,
            'ts': self.timestamp,
            'lat': lat,
            'lng': lng,
            'accel': round(self.accel_magnitude, 2),
            'speedKmh': round(self.speed_kmh, 1),
            'score': self.score,
        }


@dataclass(frozen=True, slots=True)
class HighlightedSegment:
    """Potongan jalur (lama -> baru) di sekitar bump kuat"""
    event_id: str
    points: Tuple[Coords, ...] = ()
    length_m: float = 0.0

    def to_payload(self):
        return {
            'event_id': self.event_id,
            'points': [list(p) for p in self.points],
            'length_m': round(self.length_m, 2),
        }


@dataclass(frozen=True, slots=True)
class FixUpdate:
    """Hasil GeoTracker.on_fix"""
    speed_kmh: float
    speed_updated: bool
    path_appended: bool
