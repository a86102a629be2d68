# /quadriparlanti/db/models/work_models.py

"""
ORM models for student works and the admin review workflow.

A `Work` is created by a teacher (`created_by`) and moves through
draft -> pending_review -> published / needs_revision. Every admin decision is
recorded as a `WorkReview`.
"""

from sqlalchemy import Column, String, Integer, JSON, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from ..base_class import Base
from .user_model import _new_id, _utcnow


class Work(Base):
    id = Column(String(36), primary_key=True, index=True, default=_new_id)
    title_it = Column(String, nullable=False)
    title_en = Column(String, nullable=True)
    description_it = Column(Text, nullable=False)
    description_en = Column(Text, nullable=True)
    class_name = Column(String, nullable=False)
    teacher_name = Column(String, nullable=False)
    school_year = Column(String, nullable=False)
    status = Column(String, index=True, nullable=False, default="draft")
    license = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    view_count = Column(Integer, nullable=False, default=0)
    edit_count = Column(Integer, nullable=False, default=0)

    # Ownership is by profile id; hard-deleting a teacher is refused while
    # this link exists.
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)

    creator = relationship("User")
    attachments = relationship("WorkAttachment", back_populates="work", cascade="all, delete-orphan")
    links = relationship("WorkLink", back_populates="work", cascade="all, delete-orphan")
    reviews = relationship("WorkReview", back_populates="work", cascade="all, delete-orphan")


class WorkAttachment(Base):
    __tablename__ = "work_attachments"

    id = Column(String(36), primary_key=True, index=True, default=_new_id)
    work_id = Column(String(36), ForeignKey("works.id"), nullable=False, index=True)
    file_name = Column(String, nullable=False)
    file_size_bytes = Column(Integer, nullable=False)
    file_type = Column(String, nullable=False)  # 'pdf' or 'image'
    mime_type = Column(String, nullable=False)
    storage_path = Column(String, nullable=False)
    thumbnail_path = Column(String, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), default=_utcnow)

    work = relationship("Work", back_populates="attachments")


class WorkLink(Base):
    __tablename__ = "work_links"

    id = Column(String(36), primary_key=True, index=True, default=_new_id)
    work_id = Column(String(36), ForeignKey("works.id"), nullable=False, index=True)
    url = Column(String, nullable=False)
    link_type = Column(String, nullable=False, default="other")  # youtube / vimeo / drive / other
    custom_label = Column(String, nullable=True)
    preview_title = Column(String, nullable=True)
    preview_thumbnail_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    work = relationship("Work", back_populates="links")


class WorkReview(Base):
    __tablename__ = "work_reviews"

    id = Column(String(36), primary_key=True, index=True, default=_new_id)
    work_id = Column(String(36), ForeignKey("works.id"), nullable=False, index=True)
    reviewer_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    action = Column(String, nullable=False)  # 'approved' or 'rejected'
    comments = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), default=_utcnow)

    work = relationship("Work", back_populates="reviews")
    reviewer = relationship("User")
