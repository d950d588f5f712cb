import time

import psycopg2
from sqlalchemy.engine import make_url

from flightdesk.core.config import settings

url = make_url(settings.DATABASE_URL)

if not url.drivername.startswith("postgresql"):
    print(f"[wait_for_db] {url.drivername} needs no wait.")
else:
    host = url.host or "localhost"
    port = url.port or 5432
    user = url.username or "flightdesk"
    password = url.password or "flightdesk"
    dbname = url.database or "flightdesk"

    timeout_s = settings.DB_WAIT_TIMEOUT
    start = time.time()
    last_err = None

    print(f"[wait_for_db] Waiting for Postgres at {host}:{port} db={dbname} user={user} (timeout={timeout_s}s)")
    while True:
        try:
            conn = psycopg2.connect(host=host, port=port, user=user, password=password, dbname=dbname,
                                    connect_timeout=settings.DB_CONNECT_TIMEOUT)
            conn.close()
            print("[wait_for_db] Postgres is ready.")
            break
        except psycopg2.OperationalError as e:
            last_err = e
            if time.time() - start > timeout_s:
                print(f"[wait_for_db] Timed out waiting for DB. Last error: {last_err}")
                raise
            time.sleep(1)
