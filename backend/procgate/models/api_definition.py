"""ApiDefinition ORM — registry row mapping (project, module, function) to a stored procedure.

Invariants:
    - serial_no is an auto-increment integer primary key
    - (project_name, module_name, function_name) is unique (uq_GenericApi)
    - is_debug_enabled / is_active hold "Y" or "N" only (validated before insert)
    - Rows are never updated or deleted by the gateway itself

Design Decisions:
    - Legacy PascalCase column names kept (SerialNo, ProjectName, ...): the table is
      shared with existing stored procedures and tooling (ADR: schema compatibility)
    - to_api_dict() emits camelCase keys — the registry's public contract
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from procgate.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApiDefinition(Base):
    """Registered gateway API — metadata for one stored procedure."""
    __tablename__ = "tbl_GenericAPIDefinition"
    __table_args__ = (
        UniqueConstraint(
            "ProjectName", "ModuleName", "FunctionName", name="uq_GenericApi",
        ),
    )

    serial_no: Mapped[int] = mapped_column(
        "SerialNo", Integer, primary_key=True, autoincrement=True,
    )
    project_name: Mapped[str] = mapped_column("ProjectName", String(50), nullable=False)
    module_name: Mapped[str] = mapped_column("ModuleName", String(50), nullable=False)
    function_name: Mapped[str] = mapped_column("FunctionName", String(50), nullable=False)
    procedure_name: Mapped[str] = mapped_column("ProcedureName", String(1000), nullable=False)
    is_debug_enabled: Mapped[str] = mapped_column("IsDebugEnabled", String(1), nullable=False)
    is_active: Mapped[str] = mapped_column("IsActive", String(1), nullable=False)
    api_description: Mapped[str] = mapped_column("APIDescription", String(1000), nullable=False)
    app_server_file_path: Mapped[str] = mapped_column(
        "AppServerFilePath", String(255), nullable=False,
    )
    owner: Mapped[str] = mapped_column("Owner", String(50), nullable=False)
    update_by: Mapped[str] = mapped_column("UpdateBy", String(50), nullable=False)
    update_timestamp: Mapped[datetime] = mapped_column(
        "UpdateTimeStamp",
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        onupdate=_utc_now,
    )

    def to_api_dict(self) -> dict:
        return {
            "serialNo": self.serial_no,
            "projectName": self.project_name,
            "moduleName": self.module_name,
            "functionName": self.function_name,
            "procedureName": self.procedure_name,
            "isDebugEnabled": self.is_debug_enabled,
            "isActive": self.is_active,
            "apiDescription": self.api_description,
            "appServerFilePath": self.app_server_file_path,
            "owner": self.owner,
            "updateBy": self.update_by,
            "updateTimestamp": (
                self.update_timestamp.isoformat() if self.update_timestamp else None
            ),
        }
