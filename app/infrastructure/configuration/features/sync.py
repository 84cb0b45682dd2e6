"""Data sync feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class SyncFeatureSettings(FeatureSettings):
    """Configuration for the sync coordinator and local backups.

    Environment Variables:
        SYNC_AUTO_ENABLED: Start the periodic staleness check (default: True)
        SYNC_INTERVAL_SECONDS: Seconds between staleness checks (default: 300)
        SYNC_BACKUP_RETENTION: Local backups kept after pruning (default: 5)
        SYNC_STATE_DIR: Directory holding last_sync_time and backups
            (default: .datasync)
    """

    auto_enabled: bool = Field(
        default=True,
        alias="SYNC_AUTO_ENABLED",
        description="Run the periodic staleness check",
    )
    interval_seconds: float = Field(
        default=300.0,
        gt=0,
        alias="SYNC_INTERVAL_SECONDS",
        description="Interval between staleness checks (seconds, 5 minutes)",
    )
    backup_retention: int = Field(
        default=5,
        ge=1,
        alias="SYNC_BACKUP_RETENTION",
        description="Number of local backups kept",
    )
    state_dir: str = Field(
        default=".datasync",
        alias="SYNC_STATE_DIR",
        description="Directory for local sync state and backups",
    )
