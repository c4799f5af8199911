"""Backup directory planning and preparation."""

from drushfs.backup.planner import BACKUP_DIR_CONTEXT_KEY, BackupPlanner

__all__ = ["BACKUP_DIR_CONTEXT_KEY", "BackupPlanner"]
