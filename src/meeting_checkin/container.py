from __future__ import annotations

from dataclasses import dataclass

from .checkin.mysql_checkin_repository import MySQLCheckInRepository
from .checkin.repository import CheckInRepository
from .checkin.service import CheckInService
from .database.connection import DBConfig, DatabaseConnection
from .identity.keycloak import KeycloakClient
from .identity.service import AuthService, UserAdminService
from .mailers.service import MailerService
from .mailers.storage import MailerStorage
from .meetings.importer import ShareholderImportService
from .meetings.service import MeetingService
from .meetings.snapshots import SnapshotService
from .progress.broker import ProgressBroker
from .properties.mysql_property_repository import MySQLPropertyRepository
from .properties.repository import PropertyRepository
from .properties.service import PropertyService
from .reports.service import CheckInReportService
from .shareholders.mysql_shareholder_repository import MySQLShareholderRepository
from .shareholders.repository import ShareholderRepository
from .shareholders.service import ShareholderService
from .transfers.service import PropertyTransferService
from .undo_requests.mysql_undo_request_repository import MySQLUndoRequestRepository
from .undo_requests.repository import UndoRequestRepository
from .undo_requests.service import UndoRequestService


@dataclass(frozen=True)
class Container:
    db_config: dict

    shareholders_repo: ShareholderRepository
    properties_repo: PropertyRepository
    checkin_repo: CheckInRepository
    undo_requests_repo: UndoRequestRepository

    shareholder_service: ShareholderService
    property_service: PropertyService
    checkin_service: CheckInService
    undo_request_service: UndoRequestService
    meeting_service: MeetingService
    snapshot_service: SnapshotService
    import_service: ShareholderImportService
    transfer_service: PropertyTransferService
    report_service: CheckInReportService
    mailer_service: MailerService
    mailer_storage: MailerStorage
    progress: ProgressBroker
    auth_service: AuthService
    user_admin_service: UserAdminService


def build_container(*, db_config: dict, keycloak: dict, mailer_dir: str) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    shareholders_repo = MySQLShareholderRepository(conn)
    properties_repo = MySQLPropertyRepository(conn)
    checkin_repo = MySQLCheckInRepository(conn)
    undo_requests_repo = MySQLUndoRequestRepository(conn)

    keycloak_client = KeycloakClient(
        issuer=str(keycloak["issuer"]),
        realm=str(keycloak["realm"]),
        client_id=str(keycloak["client_id"]),
        client_secret=str(keycloak["client_secret"]),
    )

    checkin_service = CheckInService(checkin_repo)
    meeting_service = MeetingService()
    snapshot_service = SnapshotService()
    mailer_storage = MailerStorage(mailer_dir)
    progress = ProgressBroker()

    return Container(
        db_config=dict(db_config),
        shareholders_repo=shareholders_repo,
        properties_repo=properties_repo,
        checkin_repo=checkin_repo,
        undo_requests_repo=undo_requests_repo,
        shareholder_service=ShareholderService(shareholders_repo, properties_repo),
        property_service=PropertyService(properties_repo, shareholders_repo),
        checkin_service=checkin_service,
        undo_request_service=UndoRequestService(undo_requests_repo, checkin_service),
        meeting_service=meeting_service,
        snapshot_service=snapshot_service,
        import_service=ShareholderImportService(meeting_service, snapshot_service),
        transfer_service=PropertyTransferService(),
        report_service=CheckInReportService(),
        mailer_service=MailerService(meeting_service, mailer_storage, progress),
        mailer_storage=mailer_storage,
        progress=progress,
        auth_service=AuthService(keycloak_client),
        user_admin_service=UserAdminService(keycloak_client),
    )
