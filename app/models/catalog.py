"""Content catalog models - categories, question bank and papers.

Questions live in a central bank and are attached to papers through
PaperQuestion link rows that carry the display order.
"""

import enum
import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.models import AuditMixin, UUIDMixin, str_enum


class QuestionType(str, enum.Enum):
    MCQ = "mcq"
    SHORT_ANSWER = "short_answer"


class Category(UUIDMixin, AuditMixin, Base):
    """Paper category. Nested through parent_id; slug is the local segment only."""

    __tablename__ = "tbl_categories"
    __table_args__ = (Index("ix_categories_parent", "parent_id"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    icon: Mapped[Optional[str]] = mapped_column(String(64))
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tbl_categories.id", ondelete="SET NULL")
    )
    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    keywords: Mapped[Optional[str]] = mapped_column(Text)
    meta_title: Mapped[Optional[str]] = mapped_column(Text)
    meta_description: Mapped[Optional[str]] = mapped_column(Text)


class QuestionCategory(UUIDMixin, AuditMixin, Base):
    __tablename__ = "tbl_question_categories"
    __table_args__ = (Index("ix_question_categories_parent", "parent_id"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tbl_question_categories.id", ondelete="SET NULL")
    )


class Question(UUIDMixin, AuditMixin, Base):
    __tablename__ = "tbl_questions"
    __table_args__ = (Index("ix_questions_category", "question_category_id"),)

    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[QuestionType] = mapped_column(str_enum(QuestionType, "question_type"), nullable=False)
    # JSON list of option strings (MCQ only)
    options: Mapped[Optional[str]] = mapped_column(Text)
    # JSON string or list of strings
    correct_answer: Mapped[str] = mapped_column(Text, nullable=False)
    explanation: Mapped[Optional[str]] = mapped_column(Text)
    question_category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tbl_question_categories.id", ondelete="SET NULL")
    )


class Paper(UUIDMixin, AuditMixin, Base):
    __tablename__ = "tbl_papers"
    __table_args__ = (
        Index("ix_papers_category", "category_id"),
        Index("ix_papers_slug", "slug", unique=True),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tbl_categories.id", ondelete="RESTRICT"), nullable=False
    )
    question_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    year: Mapped[Optional[int]] = mapped_column(Integer)
    session: Mapped[Optional[str]] = mapped_column(String(64))
    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    questions_per_page: Mapped[Optional[int]] = mapped_column(Integer)
    keywords: Mapped[Optional[str]] = mapped_column(Text)
    meta_title: Mapped[Optional[str]] = mapped_column(Text)
    meta_description: Mapped[Optional[str]] = mapped_column(Text)


class PaperQuestion(UUIDMixin, Base):
    """Link between a paper and a bank question, with its position in the paper."""

    __tablename__ = "tbl_paper_questions"
    __table_args__ = (
        Index("ix_paper_questions_paper", "paper_id"),
        Index("ix_paper_questions_question", "question_id"),
    )

    paper_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tbl_papers.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tbl_questions.id", ondelete="CASCADE"), nullable=False
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
