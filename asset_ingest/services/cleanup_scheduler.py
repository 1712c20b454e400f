"""
Cleanup Scheduler Service

Manages scheduled expiry of uploaded assets older than UPLOAD_TTL_HOURS.
Uses APScheduler for interval job execution. Expiry is off unless the TTL
is configured.
"""

import logging
import shutil
from datetime import datetime, timedelta
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from asset_ingest.config import settings
from asset_ingest.services.file_storage import get_asset_storage

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

CLEANUP_JOB_ID = "cleanup_expired_uploads"


def _is_expired(path: Path, cutoff: datetime) -> bool:
    return datetime.fromtimestamp(path.stat().st_mtime) < cutoff


async def cleanup_expired_uploads(ttl_hours: int | None = None) -> dict:
    """
    Delete uploads older than the TTL.

    Removes regular files in the upload and thumbnail directories, and
    abandoned staging batches, whose modification time exceeds the TTL.

    Args:
        ttl_hours: Override for settings.UPLOAD_TTL_HOURS

    Returns:
        dict: Summary of cleanup operation with counts
    """
    ttl_hours = ttl_hours if ttl_hours is not None else settings.UPLOAD_TTL_HOURS
    cleanup_summary = {
        "directories_scanned": 0,
        "files_deleted": 0,
        "errors": 0,
    }

    if ttl_hours is None:
        logger.debug("Upload expiry disabled, nothing to clean up")
        return cleanup_summary

    cutoff = datetime.now() - timedelta(hours=ttl_hours)
    storage = get_asset_storage()

    for directory, remove_dirs in (
        (storage.upload_path, False),
        (storage.thumbnails_path, False),
        (storage.staging_path, True),
    ):
        if not directory.exists():
            logger.debug(f"Cleanup directory does not exist: {directory}")
            continue

        cleanup_summary["directories_scanned"] += 1

        try:
            for entry in directory.iterdir():
                if entry.is_dir() != remove_dirs:
                    continue

                try:
                    if not _is_expired(entry, cutoff):
                        continue
                    if remove_dirs:
                        shutil.rmtree(entry)
                    else:
                        entry.unlink()
                    cleanup_summary["files_deleted"] += 1
                    logger.info(f"Cleaned up expired upload: {entry}")

                except OSError as e:
                    cleanup_summary["errors"] += 1
                    logger.error(f"Failed to clean up {entry}: {e}")

        except OSError as e:
            cleanup_summary["errors"] += 1
            logger.error(f"Failed to scan directory {directory}: {e}")

    logger.info(
        f"Cleanup completed: {cleanup_summary['files_deleted']} entries deleted, "
        f"{cleanup_summary['errors']} errors"
    )

    return cleanup_summary


def start_cleanup_scheduler():
    """
    Start the cleanup scheduler when upload expiry is configured.

    Safe to call multiple times - will not add duplicate jobs.
    """
    if settings.UPLOAD_TTL_HOURS is None:
        logger.info("UPLOAD_TTL_HOURS not set, upload expiry disabled")
        return

    if scheduler.running:
        logger.debug("Scheduler already running")
        return

    if not scheduler.get_job(CLEANUP_JOB_ID):
        scheduler.add_job(
            cleanup_expired_uploads,
            "interval",
            hours=settings.CLEANUP_INTERVAL_HOURS,
            id=CLEANUP_JOB_ID,
            name="Delete expired uploads",
            replace_existing=True,
        )
        logger.info(
            f"Scheduled cleanup job: every {settings.CLEANUP_INTERVAL_HOURS} hour(s), "
            f"TTL: {settings.UPLOAD_TTL_HOURS} hours"
        )

    scheduler.start()
    logger.info("Cleanup scheduler started")


def stop_cleanup_scheduler():
    """Stop the cleanup scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Cleanup scheduler stopped")


def get_scheduler_status() -> dict:
    """
    Get current scheduler status for health checks.

    Returns:
        dict: Scheduler status including running state and job info
    """
    job = scheduler.get_job(CLEANUP_JOB_ID)
    return {
        "running": scheduler.running,
        "job_scheduled": job is not None,
        "next_run": str(job.next_run_time) if job else None,
        "interval_hours": settings.CLEANUP_INTERVAL_HOURS,
        "ttl_hours": settings.UPLOAD_TTL_HOURS,
    }
