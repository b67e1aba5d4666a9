"""
Focus Pomodoro - Pomodoro timer with webcam distraction detection.

Runs a Focus/Break countdown, samples the webcam every few seconds with a
COCO object detector to tell studying from distracted time, and stores
every finished focus session in a local SQLite database that also feeds
the per-user statistics and the leaderboard.

Run:
    python main.py --user alice --display-name "Alice"
    python main.py --user alice --stats
    python main.py --leaderboard 10
"""

import argparse
import logging
import signal
import sys

from PyQt5.QtCore import QTimer
from PyQt5.QtWidgets import QApplication

from core.database import Database
from core.logging_setup import configure_logging
from core.services.leaderboard_service import LeaderboardService
from core.services.session_service import SessionService
from core.services.user_service import UserService
from core.session_tracker import SessionRecorder
from core.settings import AppSettings
from monitoring.activity_sampler import ActivitySampler
from monitoring.coco_detector import CocoObjectDetector
from timer.alerts import AlarmPlayer, AlertDispatcher, TrayNotifier
from timer.phase_controller import PhaseController
from timer.session_runner import PomodoroRunner

logger = logging.getLogger("focus_pomodoro")


def build_parser():
    parser = argparse.ArgumentParser(description="Pomodoro timer with distraction detection")
    parser.add_argument("--user", help="user id sessions are saved under")
    parser.add_argument("--display-name", help="name shown on the leaderboard")
    parser.add_argument("--focus", type=int, help="focus minutes (1-60)")
    parser.add_argument("--break", dest="break_minutes", type=int, help="break minutes (1-30)")
    parser.add_argument("--no-camera", action="store_true", help="run without distraction detection")
    parser.add_argument("--settings", help="INI file to use instead of the system settings store")
    parser.add_argument("--stats", action="store_true", help="print the user's statistics and exit")
    parser.add_argument("--leaderboard", type=int, metavar="N", help="print the top N users and exit")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def print_stats(db, user_id):
    stats = SessionService(db).get_user_stats(user_id)
    rank = LeaderboardService(db).get_user_rank(user_id)
    print(f"Stats for {user_id} (rank #{rank})" if rank else f"Stats for {user_id} (unranked)")
    print(f"  Today:   {stats.today_minutes} min in {stats.today_sessions} sessions")
    print(f"  Week:    {stats.week_minutes} min")
    print(f"  Month:   {stats.month_minutes} min")
    print(f"  Total:   {stats.total_minutes} min in {stats.total_sessions} sessions")
    print(f"  Average: {stats.average_session_length} min per session")
    print(f"  Streak:  {stats.streak} days")


def print_leaderboard(db, limit):
    entries = LeaderboardService(db).get_leaderboard(limit)
    if not entries:
        print("No users yet.")
        return
    for entry in entries:
        minutes = entry.total_study_time // 60
        print(f"{entry.rank:>3}. {entry.display_name:<24} {minutes:>6} min  {entry.total_sessions:>4} sessions")


def build_sampler(settings):
    detector = CocoObjectDetector(
        settings.detector_model_path,
        settings.detector_config_path,
        min_confidence=settings.detector_min_confidence,
    )
    try:
        detector.load()
    except Exception:
        logger.exception("Could not load the object detector; detection disabled")
        return None

    return ActivitySampler(
        detector,
        camera_index=settings.camera_index,
        sample_interval=settings.sample_interval,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.leaderboard is not None and args.leaderboard < 1:
        parser.error("--leaderboard needs N >= 1")

    settings = AppSettings(args.settings)
    configure_logging(args.log_level or settings.log_level)

    db = Database(settings.database_path)

    if args.leaderboard is not None:
        try:
            print_leaderboard(db, args.leaderboard)
        finally:
            db.close()
        return 0
    if args.stats:
        try:
            if not args.user:
                print("--stats needs --user")
                return 2
            print_stats(db, args.user)
        finally:
            db.close()
        return 0

    if args.user:
        UserService(db).ensure_user(args.user, display_name=args.display_name)
    else:
        logger.warning("No user given, sessions will not be saved")

    if args.focus is not None or args.break_minutes is not None:
        settings.save_durations(
            args.focus if args.focus is not None else settings.focus_minutes,
            args.break_minutes if args.break_minutes is not None else settings.break_minutes,
        )

    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    recorder = SessionRecorder(SessionService(db))
    controller = PhaseController(
        focus_minutes=settings.focus_minutes,
        break_minutes=settings.break_minutes,
        user_id=args.user,
        recorder=recorder,
        alert_sink=AlertDispatcher(TrayNotifier(), AlarmPlayer(settings.alarm_sound_path)),
        auto_continue=settings.auto_continue,
    )

    sampler = None
    if settings.camera_enabled and not args.no_camera:
        sampler = build_sampler(settings)

    runner = PomodoroRunner(controller, sampler=sampler, recorder=recorder)
    runner.ticked.connect(
        lambda snap: logger.debug(
            "%s %s studying=%ss distracted=%ss",
            snap.phase.value, snap.display_time,
            snap.tally.studying_seconds, snap.tally.distracted_seconds,
        )
    )
    runner.phase_changed.connect(lambda phase: logger.info("Phase: %s", phase))
    runner.status_changed.connect(lambda status: logger.info("Detection: %s", status))

    runner.enable_camera()
    runner.start()

    # Ctrl+C: Qt only hands control back to Python between events
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    keepalive = QTimer()
    keepalive.timeout.connect(lambda: None)
    keepalive.start(250)

    app.aboutToQuit.connect(runner.shutdown)
    try:
        return app.exec_()
    finally:
        runner.shutdown()
        db.close()


if __name__ == "__main__":
    sys.exit(main())
