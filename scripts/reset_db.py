import asyncio
import sys
from pathlib import Path


async def recreate_db():
    # Ensure project root on import path
    project_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))

    # Import models to register metadata tables
    from app.database import create_tables, drop_tables, engine  # type: ignore
    import models.post  # noqa: F401

    await drop_tables()
    await create_tables()
    await engine.dispose()


if __name__ == '__main__':
    asyncio.run(recreate_db())
    print('Database schema recreated.')
