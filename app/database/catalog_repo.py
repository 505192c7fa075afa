"""Repository layer for categories, the question bank and papers."""

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalog import Category, Paper, PaperQuestion, Question, QuestionCategory
from app.utils.exceptions import DatabaseException

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Repository for paper categories and question categories."""

    @staticmethod
    async def list_categories(db: AsyncSession) -> list[Category]:
        result = await db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_category(db: AsyncSession, category_id: uuid.UUID) -> Optional[Category]:
        return await db.get(Category, category_id)

    @staticmethod
    async def count_children(db: AsyncSession, category_id: uuid.UUID) -> int:
        result = await db.execute(select(func.count(Category.id)).where(Category.parent_id == category_id))
        return int(result.scalar() or 0)

    @staticmethod
    async def list_question_categories(db: AsyncSession) -> list[QuestionCategory]:
        result = await db.execute(select(QuestionCategory).order_by(QuestionCategory.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_question_category(db: AsyncSession, category_id: uuid.UUID) -> Optional[QuestionCategory]:
        return await db.get(QuestionCategory, category_id)


class QuestionRepository:
    """Repository for bank questions."""

    @staticmethod
    async def list_questions(
        db: AsyncSession, category_ids: Optional[Sequence[uuid.UUID]] = None
    ) -> list[Question]:
        stmt = select(Question)
        if category_ids is not None:
            stmt = stmt.where(Question.question_category_id.in_(list(category_ids)))
        result = await db.execute(stmt.order_by(Question.created_date.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_question(db: AsyncSession, question_id: uuid.UUID) -> Optional[Question]:
        return await db.get(Question, question_id)

    @staticmethod
    async def get_questions(db: AsyncSession, question_ids: Sequence[uuid.UUID]) -> list[Question]:
        if not question_ids:
            return []
        result = await db.execute(select(Question).where(Question.id.in_(list(question_ids))))
        return list(result.scalars().all())

    @staticmethod
    async def delete_question(db: AsyncSession, question: Question) -> int:
        """
        Delete a bank question together with every paper link to it.

        Args:
            db: Database session
            question: Question to delete

        Returns:
            Number of paper links removed
        """
        try:
            logger.info(f"Request for delete_question: {question.id}")
            result = await db.execute(delete(PaperQuestion).where(PaperQuestion.question_id == question.id))
            await db.delete(question)
            await db.commit()
            removed = result.rowcount or 0
            logger.info(f"Response for delete_question: {removed} paper links removed")
            return removed
        except SQLAlchemyError:
            await db.rollback()
            logger.error("A system failure occurred @delete_question", exc_info=True)
            raise DatabaseException("Failed to delete question")


class PaperRepository:
    """Repository for papers and their question links."""

    @staticmethod
    async def list_papers(
        db: AsyncSession,
        category_ids: Optional[Sequence[uuid.UUID]] = None,
        published_only: bool = False,
    ) -> list[Paper]:
        stmt = select(Paper)
        if category_ids is not None:
            stmt = stmt.where(Paper.category_id.in_(list(category_ids)))
        if published_only:
            stmt = stmt.where(Paper.published.is_(True))
        result = await db.execute(stmt.order_by(Paper.featured.desc(), Paper.title))
        return list(result.scalars().all())

    @staticmethod
    async def get_paper(db: AsyncSession, paper_id: uuid.UUID) -> Optional[Paper]:
        return await db.get(Paper, paper_id)

    @staticmethod
    async def get_paper_by_slug(db: AsyncSession, slug: str) -> Optional[Paper]:
        result = await db.execute(select(Paper).where(Paper.slug == slug))
        return result.scalar_one_or_none()

    @staticmethod
    async def slug_taken(db: AsyncSession, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        stmt = select(Paper.id).where(Paper.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Paper.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_links(db: AsyncSession, paper_id: uuid.UUID) -> list[tuple[PaperQuestion, Question]]:
        """Fetch a paper's links joined to their questions, in paper order."""
        result = await db.execute(
            select(PaperQuestion, Question)
            .join(Question, PaperQuestion.question_id == Question.id)
            .where(PaperQuestion.paper_id == paper_id)
            .order_by(PaperQuestion.order, PaperQuestion.id)
        )
        return [(row[0], row[1]) for row in result.all()]

    @staticmethod
    async def get_links(db: AsyncSession, paper_id: uuid.UUID, link_ids: Sequence[uuid.UUID]) -> list[PaperQuestion]:
        result = await db.execute(
            select(PaperQuestion).where(PaperQuestion.paper_id == paper_id, PaperQuestion.id.in_(list(link_ids)))
        )
        return list(result.scalars().all())

    @staticmethod
    async def next_order(db: AsyncSession, paper_id: uuid.UUID) -> int:
        result = await db.execute(select(func.max(PaperQuestion.order)).where(PaperQuestion.paper_id == paper_id))
        max_order = result.scalar()
        return 0 if max_order is None else max_order + 1

    @staticmethod
    async def delete_links(db: AsyncSession, paper_id: uuid.UUID, link_ids: Sequence[uuid.UUID]) -> int:
        result = await db.execute(
            delete(PaperQuestion).where(PaperQuestion.paper_id == paper_id, PaperQuestion.id.in_(list(link_ids)))
        )
        return result.rowcount or 0
