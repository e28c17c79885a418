from datetime import datetime

from sqlalchemy import String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.database.database import Base


class SearchRecordEntity(Base):
    """SQLAlchemy model for the admin search history table."""
    __tablename__ = "search_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Admin principals live in the external identity store, so no foreign key here
    admin_id: Mapped[str] = mapped_column(String(450), nullable=False)
    search_criteria: Mapped[str] = mapped_column(Text, nullable=False)
    search_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# Serves "latest N searches of an admin" without a sort
Index(
    'ix_search_records_admin_timestamp',
    SearchRecordEntity.admin_id,
    SearchRecordEntity.search_timestamp.desc(),
)
