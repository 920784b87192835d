import matplotlib
matplotlib.use('Agg')  # menggunakan mode non-GUI
import matplotlib.pyplot as plt
from datetime import datetime
import os
from core.config import UPLOAD_FOLDER
from analysis.analyzer import build_session_summary
from analysis.classifier import get_bump_severity

SEVERITY_COLORS = {
    'light': 'gold',
    'moderate': 'orange',
    'heavy': 'red',
    'normal': 'gray',
}


def create_session_visualization(detector, folder=None):
    """Membuat laporan visual sesi (PNG): jalur, timeline skor, histogram keparahan, info"""
    folder = folder or UPLOAD_FOLDER
    os.makedirs(folder, exist_ok=True)

    summary = build_session_summary(detector)
    with detector.lock:
        events = list(detector.local_events)
        segments = list(detector.segments)
        path = detector.geo.get_path()

    fig, ((ax1, ax2), (ax3, ax4)) = plt.subplots(2, 2, figsize=(16, 12))

    # 1. Jalur + segmen merah + bump
    if len(path) >= 2:
        ax1.plot([p[1] for p in path], [p[0] for p in path],
                 linewidth=2, color='tab:cyan', alpha=0.9, label='Jalur')
        for i, segment in enumerate(segments):
            ax1.plot([p[1] for p in segment.points], [p[0] for p in segment.points],
                     linewidth=5, color='red', alpha=0.9,
                     label='Segmen bump kuat' if i == 0 else None)
        tagged = [e for e in events if e.coords is not None]
        if tagged:
            ax1.scatter([e.coords[1] for e in tagged], [e.coords[0] for e in tagged],
                        s=[40 + e.score * 20 for e in tagged],
                        c=[SEVERITY_COLORS[get_bump_severity(e.score)] for e in tagged],
                        edgecolors='black', zorder=3, label='Bump')
        ax1.legend()
    else:
        ax1.text(0.5, 0.5, 'Belum ada jalur GPS',
                 ha='center', va='center', transform=ax1.transAxes, fontsize=14)
    ax1.set_title('Jalur Perjalanan')
    ax1.set_xlabel('Longitude')
    ax1.set_ylabel('Latitude')
    ax1.grid(True, alpha=0.3)

    # 2. Timeline skor bump
    if events:
        t0 = events[0].timestamp
        times = [(e.timestamp - t0) / 1000.0 for e in events]
        ax2.plot(times, [e.score for e in events],
                 marker='o', linewidth=2, markersize=5, color='red', alpha=0.8)
        ax2.axhline(y=summary['bumps']['avg_score'], color='blue', linestyle=':', alpha=0.7,
                    label=f"Avg: {summary['bumps']['avg_score']:.2f}")
        ax2.legend()
    else:
        ax2.text(0.5, 0.5, 'Tidak ada bump\nterdeteksi',
                 ha='center', va='center', transform=ax2.transAxes, fontsize=14)
    ax2.set_title('Skor Bump')
    ax2.set_xlabel('Waktu sejak bump pertama (detik)')
    ax2.set_ylabel('Skor')
    ax2.grid(True, alpha=0.3)

    # 3. Jumlah per tingkat keparahan
    counts = summary['bumps']['severity_counts']
    ax3.bar(list(counts.keys()), list(counts.values()),
            color=[SEVERITY_COLORS[k] for k in counts])
    ax3.set_title('Tingkat Keparahan')
    ax3.set_ylabel('Jumlah')
    ax3.grid(True, axis='y', alpha=0.3)

    # 4. Info sesi
    info_text = f"VARIAN: {summary['variant'].upper()}\n"
    info_text += f"DEVICE: {summary['device_id']}\n\n"
    info_text += f"BUMP LOKAL: {summary['bumps']['count']}\n"
    info_text += f"   Skor max: {summary['bumps']['max_score']:.2f}\n"
    info_text += f"   Bump remote: {summary['remote_bumps']}\n\n"
    info_text += f"JALUR:\n"
    info_text += f"   {summary['path']['points']} titik, {summary['path']['length_m']:.1f} m\n"
    info_text += f"   Segmen merah: {summary['segments']['count']}\n\n"
    info_text += f"KECEPATAN TERAMATI:\n"
    if summary['speed']['has_speed_data']:
        info_text += f"   {summary['speed']['speed_range']}\n"
        info_text += f"   Rata-rata: {summary['speed']['avg_speed']:.1f} km/h\n"
        if summary['speed_at_bump']['has_speed_data']:
            info_text += f"   Saat bump: {summary['speed_at_bump']['speed_range']}"
    else:
        info_text += f"   Data tidak tersedia"

    ax4.text(0.05, 0.95, info_text, ha='left', va='top', transform=ax4.transAxes,
             fontsize=10, bbox=dict(boxstyle="round,pad=0.5", facecolor='lightgray', alpha=0.8))
    ax4.set_title('Info Sesi')
    ax4.axis('off')

    plt.tight_layout()

    # Save dengan timestamp
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    filename = f'road_bumps_{timestamp}.png'
    filepath = os.path.join(folder, filename)
    plt.savefig(filepath, dpi=100, bbox_inches='tight')
    plt.close(fig)

    return filepath, filename
