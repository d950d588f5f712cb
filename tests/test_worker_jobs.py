from unittest import mock

from flightdesk.db.session import Storage
from flightdesk.models.email_log import EmailLog
from flightdesk.services import email_service
from flightdesk.tasks import worker_jobs


def test_process_email_queue_uses_given_storage(storage, mail_cfg):
    with storage.session_scope() as s:
        s.add(EmailLog(id="x", to_email="x@example.com", subject="s", body="b", status="failed"))
        s.commit()

    with mock.patch.object(email_service, "default_settings", mail_cfg), \
            mock.patch.object(email_service, "send_email") as send:
        result = worker_jobs.process_email_queue(limit=10, storage=storage)

    assert result["sent"] == 1
    send.assert_called_once()


def test_process_email_queue_skips_unmigrated_database(tmp_path, mail_cfg):
    empty = Storage(f"sqlite:///{tmp_path / 'empty.db'}")
    with mock.patch.object(email_service, "default_settings", mail_cfg):
        result = worker_jobs.process_email_queue(storage=empty)
    empty.dispose()
    assert result["skipped"] is True
