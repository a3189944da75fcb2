"""Print every stored image record and whether its blob is still on disk.

This script reuses the same `DATABASE_DIR` behavior as the application via
`utils.settings.Settings` and `utils.database_init.AsyncDatabaseInitializer`.

Run: set the `DATABASE_DIR` environment variable (or put it in `.env`)
      and run `python print_db.py`.
"""
import asyncio
from pathlib import Path

from dal.image_dal import ImageDAL
from models.image_record import ImageRecord
from utils.database_init import AsyncDatabaseInitializer
from utils.settings import Settings


def format_record(record: ImageRecord) -> str:
    """Return a one-line summary of a record, flagging a missing blob.

    Args:
        record: The stored image record.

    Returns:
        A line such as `<id> photo.png -> <key> (10 bytes, image/png)`.
    """
    uploaded = record.uploaded_at.isoformat() if record.uploaded_at else "-"
    line = (
        f"{record.id} {record.original_name!r} -> {record.name} "
        f"({record.file_size} bytes, {record.mime_type}, uploaded {uploaded})"
    )
    if not Path(record.file_path).is_file():
        line += " [blob missing]"
    return line


async def main() -> None:
    """Ensure the DB exists and print all image records, newest first."""
    settings = Settings.from_env()
    initializer = AsyncDatabaseInitializer(settings.db_path, settings.db_connect_timeout)
    records = await ImageDAL(initializer).list_images()
    print(f"{len(records)} image(s) in {settings.db_path}")
    for record in records:
        print("  " + format_record(record))


if __name__ == "__main__":
    asyncio.run(main())
