"""Flask-SQLAlchemy models for the tables the ORM-backed features use.

Shareholders and properties are related through the ``shareholder_id``
business key, never through the numeric row id.
"""
from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


@contextmanager
def transaction():
    """Commit the ORM session on success, roll it back and re-raise on error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


class Meeting(db.Model):
    __tablename__ = "meetings"

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.Integer, nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    total_shareholders = db.Column(db.Integer, nullable=False, default=0)
    checked_in = db.Column(db.Integer, nullable=False, default=0)
    data_source = db.Column(db.String(20), nullable=False, default="excel")
    has_initial_data = db.Column(db.Boolean, nullable=False, default=False)
    mailers_generated = db.Column(db.Boolean, nullable=False, default=False)
    mailer_generation_date = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class Shareholder(db.Model):
    __tablename__ = "shareholders"

    id = db.Column(db.Integer, primary_key=True)
    shareholder_id = db.Column(db.String(32), nullable=False, unique=True)
    name = db.Column(db.String(255), nullable=False)
    meeting_id = db.Column(db.String(32), index=True)
    owner_mailing_address = db.Column(db.String(255))
    owner_city_state_zip = db.Column(db.String(255))
    is_new = db.Column(db.Boolean, nullable=False, default=False)
    designee = db.Column(db.String(255))
    comment = db.Column(db.Text)
    checked_in_at = db.Column(db.DateTime)
    signature_image = db.Column(db.Text)
    signature_hash = db.Column(db.String(64))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    properties = db.relationship(
        "Property",
        primaryjoin="Shareholder.shareholder_id == foreign(Property.shareholder_id)",
        order_by="Property.account",
        viewonly=True,
    )


class Property(db.Model):
    __tablename__ = "properties"

    id = db.Column(db.Integer, primary_key=True)
    account = db.Column(db.String(32), nullable=False, index=True)
    num_of = db.Column(db.String(32))
    customer_name = db.Column(db.String(255))
    customer_mailing_address = db.Column(db.String(255))
    city_state_zip = db.Column(db.String(255))
    owner_name = db.Column(db.String(255))
    owner_mailing_address = db.Column(db.String(255))
    owner_city_state_zip = db.Column(db.String(255))
    resident_name = db.Column(db.String(255))
    resident_mailing_address = db.Column(db.String(255))
    resident_city_state_zip = db.Column(db.String(255))
    service_address = db.Column(db.String(255))
    checked_in = db.Column(db.Boolean, nullable=False, default=False)
    shareholder_id = db.Column(db.String(32), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class PropertyTransfer(db.Model):
    __tablename__ = "property_transfers"

    id = db.Column(db.Integer, primary_key=True)
    property_id = db.Column(db.Integer, nullable=False, index=True)
    from_shareholder_id = db.Column(db.String(32), nullable=False)
    to_shareholder_id = db.Column(db.String(32), nullable=False)
    transfer_date = db.Column(db.DateTime, nullable=False, default=datetime.now)
    meeting_id = db.Column(db.String(32))
    created_by = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class Snapshot(db.Model):
    __tablename__ = "snapshots"

    id = db.Column(db.Integer, primary_key=True)
    meeting_id = db.Column(db.String(32), nullable=False, index=True)
    snapshot_date = db.Column(db.DateTime, nullable=False, default=datetime.now)
    data = db.Column(db.JSON, nullable=False)
    changes = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


def as_dict(row: db.Model, *, exclude: tuple[str, ...] = ()) -> dict:
    return {c.name: getattr(row, c.name) for c in row.__table__.columns if c.name not in exclude}
