"""Back up a month of agency files and record where they went."""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from . import db
from .errors import StoreDisconnectError
from .models import BackupRecord, StageConfig
from .storage import CloudClient

console = Console(stderr=True)


def run(
    config: StageConfig,
    paths: list[str],
    cloud: Optional[CloudClient] = None,
) -> BackupRecord:
    """Upload paths and insert one BackupRecord for config's agency/year/month.

    Steps: connect to mongo, upload every path, insert the record, disconnect.
    The first failure propagates as a StageError and nothing is inserted
    unless every upload succeeded. The mongo connection is closed on every
    path out once it has been opened; a failure to close is only reported.
    """
    if cloud is None:
        cloud = CloudClient.from_config(config)

    client = db.connect(config.mongo_uri)
    try:
        collection = db.get_collection(
            client, config.mongo_db_name, config.mongo_backup_coll
        )

        console.print(f"Uploading {len(paths)} file(s) for {config.aid}")
        backups = cloud.backup(paths, config.aid)

        record = BackupRecord(
            aid=config.aid,
            year=config.year,
            month=config.month,
            backups=backups,
        )
        inserted_id = db.insert_backup_record(collection, record)
        console.print(
            f"[green]✓[/green] Recorded {len(backups)} backup(s) for "
            f"{config.aid} {config.year}-{config.month:02d} ({inserted_id})"
        )
    finally:
        try:
            db.disconnect(client)
        except StoreDisconnectError as e:
            console.print(f"[yellow]Warning:[/yellow] {escape(str(e))}")

    return record
