"""Utility model for application state."""

from datetime import datetime
from app.extensions import db

LAST_ROSTER_SYNC_KEY = "last_roster_sync_datetime"


class Util(db.Model):
    """Key-value store for application state like roster sync timestamps."""

    __tablename__ = "util"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=True)
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    def __repr__(self) -> str:
        return f"<Util {self.key}={self.value}>"

    @classmethod
    def get(cls, key: str, default: str | None = None) -> str | None:
        """Get a value by key."""
        record = db.session.get(cls, key)
        return record.value if record else default

    @classmethod
    def set(cls, key: str, value: str) -> None:
        """Set a value by key. The caller owns the commit."""
        record = db.session.get(cls, key)
        if record:
            record.value = value
        else:
            db.session.add(cls(key=key, value=value))

    @classmethod
    def get_last_roster_sync(cls) -> datetime | None:
        value = cls.get(LAST_ROSTER_SYNC_KEY)
        if value:
            return datetime.fromisoformat(value)
        return None

    @classmethod
    def set_last_roster_sync(cls, dt: datetime) -> None:
        cls.set(LAST_ROSTER_SYNC_KEY, dt.isoformat())
