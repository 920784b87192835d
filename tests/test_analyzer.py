import os

import pytest

from analysis.analyzer import analyze_bumps, analyze_speed_data, build_session_summary
from analysis.visualizer import create_session_visualization

from conftest import bump_sample, make_fix, points_north


def drive_and_bump(detector):
    for i, (lat, lon) in enumerate(points_north(10, 12)):
        detector.on_fix(make_fix(lat=lat, lon=lon, ts=i * 1000))
    detector.on_sample(bump_sample(15, 9500))
    detector.on_sample(bump_sample(20, 20000))


def test_empty_analysis():
    assert analyze_bumps([])['count'] == 0
    assert analyze_speed_data([])['has_speed_data'] is False


def test_summary_of_session(detector):
    drive_and_bump(detector)
    detector.on_remote_bump({'id': 'remote'})

    summary = build_session_summary(detector)
    assert summary['bumps']['count'] == 2
    assert summary['bumps']['geotagged'] == 2
    assert summary['bumps']['max_score'] == pytest.approx(5.0)
    assert sum(summary['bumps']['severity_counts'].values()) == 2
    assert summary['path']['points'] == 10
    assert summary['path']['length_m'] == pytest.approx(108.0, rel=1e-6)
    assert summary['segments']['count'] == 1
    assert summary['remote_bumps'] == 1
    assert summary['speed']['count'] == 9
    assert summary['speed']['avg_speed'] == pytest.approx(43.2, rel=1e-6)
    assert summary['speed_at_bump']['count'] == 2
    assert summary['speed_at_bump']['avg_speed'] == pytest.approx(43.2, rel=1e-6)


def test_summary_speed_covers_whole_drive(detector):
    detector.on_fix(make_fix(ts=0, speed=5.0))
    detector.on_fix(make_fix(ts=1000, speed=20.0))

    summary = build_session_summary(detector)
    assert summary['speed']['min_speed'] == pytest.approx(18.0)
    assert summary['speed']['max_speed'] == pytest.approx(72.0)
    assert summary['speed_at_bump']['has_speed_data'] is False


def test_visual_report_written(detector, tmp_path):
    drive_and_bump(detector)
    filepath, filename = create_session_visualization(detector, folder=str(tmp_path))
    assert filename.endswith('.png')
    assert os.path.getsize(filepath) > 0


def test_visual_report_without_data(detector, tmp_path):
    filepath, _ = create_session_visualization(detector, folder=str(tmp_path))
    assert os.path.exists(filepath)
