"""Service layer for papers and the questions attached to them.

A paper does not own its questions. Bank questions are linked through
PaperQuestion rows whose order field gives the position in the paper;
new links are appended after the current last position.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.catalog_repo import CategoryRepository, PaperRepository, QuestionRepository
from app.models.catalog import Paper, PaperQuestion
from app.schemas.catalog import (
    PaperCreate,
    PaperQuestionResponse,
    PaperQuestionsAdd,
    PaperResponse,
    PaperUpdate,
    QuestionOrderItem,
    QuestionOrderUpdate,
)
from app.services.category_service import CategoryService
from app.services.question_service import QuestionService
from app.utils.exceptions import DatabaseException, NotFoundException, ValidationException
from app.utils.slugs import slugify

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = {"year", "session", "questions_per_page", "keywords", "meta_title", "meta_description"}


class PaperService:
    """Service for paper business logic."""

    @staticmethod
    async def unique_slug(db: AsyncSession, source: str, exclude_id: Optional[uuid.UUID] = None) -> str:
        """Slug for source, suffixed -2, -3, ... until no other paper uses it."""
        base = slugify(source) or "paper"
        slug = base
        suffix = 2
        while await PaperRepository.slug_taken(db, slug, exclude_id):
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    @staticmethod
    async def get_paper_model(db: AsyncSession, paper_id: uuid.UUID) -> Paper:
        paper = await PaperRepository.get_paper(db, paper_id)
        if paper is None:
            raise NotFoundException(f"Paper {paper_id} not found")
        return paper

    @staticmethod
    async def get_paper(db: AsyncSession, paper_id: uuid.UUID) -> PaperResponse:
        return PaperResponse.model_validate(await PaperService.get_paper_model(db, paper_id))

    @staticmethod
    async def get_paper_by_slug(db: AsyncSession, slug: str, include_unpublished: bool = False) -> PaperResponse:
        paper = await PaperRepository.get_paper_by_slug(db, slug)
        if paper is None or (not paper.published and not include_unpublished):
            raise NotFoundException(f"Paper '{slug}' not found")
        return PaperResponse.model_validate(paper)

    @staticmethod
    async def list_papers(
        db: AsyncSession, category_id: Optional[uuid.UUID] = None, published_only: bool = False
    ) -> list[PaperResponse]:
        """
        List papers, featured first.

        Args:
            db: Database session
            category_id: When given, papers in this category or any of its subcategories
            published_only: Hide drafts

        Returns:
            List of PaperResponse
        """
        category_ids = None
        if category_id is not None:
            category_ids = await CategoryService.descendant_ids(db, category_id)
            if not category_ids:
                raise NotFoundException(f"Category {category_id} not found")
        papers = await PaperRepository.list_papers(db, category_ids, published_only)
        return [PaperResponse.model_validate(paper) for paper in papers]

    @staticmethod
    async def _check_category(db: AsyncSession, category_id: uuid.UUID) -> None:
        if await CategoryRepository.get_category(db, category_id) is None:
            raise NotFoundException(f"Category {category_id} not found")

    @staticmethod
    async def create_paper(db: AsyncSession, data: PaperCreate, actor_id: Optional[str] = None) -> PaperResponse:
        await PaperService._check_category(db, data.category_id)
        values = data.model_dump()
        values["slug"] = await PaperService.unique_slug(db, data.slug or data.title)
        paper = Paper(**values, created_by=actor_id)
        db.add(paper)
        await db.commit()
        await db.refresh(paper)
        logger.info(f"Paper created: id={paper.id}, slug={paper.slug}")
        return PaperResponse.model_validate(paper)

    @staticmethod
    async def update_paper(
        db: AsyncSession, paper_id: uuid.UUID, data: PaperUpdate, actor_id: Optional[str] = None
    ) -> PaperResponse:
        paper = await PaperService.get_paper_model(db, paper_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("category_id"):
            await PaperService._check_category(db, changes["category_id"])
        if "slug" in changes:
            source = changes["slug"] or changes.get("title") or paper.title
            changes["slug"] = await PaperService.unique_slug(db, source, exclude_id=paper.id)

        for field, value in changes.items():
            if value is None and field not in _NULLABLE_FIELDS:
                continue
            setattr(paper, field, value)
        paper.updated_by = actor_id
        await db.commit()
        await db.refresh(paper)
        return PaperResponse.model_validate(paper)

    @staticmethod
    async def delete_paper(db: AsyncSession, paper_id: uuid.UUID) -> None:
        """Delete a paper with its question links. Bank questions are kept."""
        paper = await PaperService.get_paper_model(db, paper_id)
        links = await PaperRepository.list_links(db, paper_id)
        await PaperRepository.delete_links(db, paper_id, [link.id for link, _ in links])
        await db.delete(paper)
        await db.commit()
        logger.info(f"Paper {paper_id} deleted")

    @staticmethod
    async def duplicate_paper(db: AsyncSession, paper_id: uuid.UUID, actor_id: Optional[str] = None) -> PaperResponse:
        """Copy a paper as an unpublished draft that links the same questions in the same order."""
        source = await PaperService.get_paper_model(db, paper_id)
        values = PaperResponse.model_validate(source).model_dump(
            exclude={"id", "created_date", "updated_date", "slug", "title", "published", "featured"}
        )
        title = f"{source.title} (Copy)"
        copy = Paper(
            **values,
            title=title,
            slug=await PaperService.unique_slug(db, title),
            published=False,
            featured=False,
            created_by=actor_id,
        )
        db.add(copy)
        await db.flush()
        for order, (link, _) in enumerate(await PaperRepository.list_links(db, source.id)):
            db.add(PaperQuestion(paper_id=copy.id, question_id=link.question_id, order=order))
        await db.commit()
        await db.refresh(copy)
        return PaperResponse.model_validate(copy)

    @staticmethod
    async def fetch_questions_for_paper(db: AsyncSession, paper_id: uuid.UUID) -> list[PaperQuestionResponse]:
        """Questions of a paper in display order, each with its link id."""
        await PaperService.get_paper_model(db, paper_id)
        return [
            PaperQuestionResponse(
                **QuestionService.to_response(question).model_dump(),
                link_id=link.id,
                order=link.order,
            )
            for link, question in await PaperRepository.list_links(db, paper_id)
        ]

    @staticmethod
    async def add_question_to_paper(
        db: AsyncSession, paper_id: uuid.UUID, question_id: uuid.UUID
    ) -> list[PaperQuestionResponse]:
        return await PaperService.add_questions_batch(db, paper_id, PaperQuestionsAdd(question_ids=[question_id]))

    @staticmethod
    async def add_questions_batch(
        db: AsyncSession, paper_id: uuid.UUID, data: PaperQuestionsAdd, actor_id: Optional[str] = None
    ) -> list[PaperQuestionResponse]:
        """
        Link existing bank questions and create-and-link new ones in one transaction.

        Existing ids come first in the given order, then the new questions.
        Every unknown question id is reported; nothing is written then.

        Args:
            db: Database session
            paper_id: Target paper
            data: Existing question ids and new question bodies
            actor_id: Admin performing the change

        Returns:
            The paper's questions after the change
        """
        await PaperService.get_paper_model(db, paper_id)
        if not data.question_ids and not data.new_questions:
            raise ValidationException("No questions to add")

        found = {q.id for q in await QuestionRepository.get_questions(db, data.question_ids)}
        missing = [str(qid) for qid in data.question_ids if qid not in found]
        if missing:
            raise NotFoundException("Some questions were not found", details={"questionIds": missing})

        try:
            logger.info(
                f"Request for add_questions_batch: paper_id={paper_id}, "
                f"existing={len(data.question_ids)}, new={len(data.new_questions)}"
            )
            order = await PaperRepository.next_order(db, paper_id)
            question_ids = list(data.question_ids)
            for new_question in data.new_questions:
                question = QuestionService.build_question(new_question, actor_id)
                db.add(question)
                await db.flush()
                question_ids.append(question.id)
            for question_id in question_ids:
                db.add(PaperQuestion(paper_id=paper_id, question_id=question_id, order=order))
                order += 1
            await db.commit()
            logger.info(f"Response for add_questions_batch: {len(question_ids)} questions linked")
        except SQLAlchemyError:
            await db.rollback()
            logger.error("A system failure occurred @add_questions_batch", exc_info=True)
            raise DatabaseException("Failed to add questions to paper")

        return await PaperService.fetch_questions_for_paper(db, paper_id)

    @staticmethod
    async def update_question_order(
        db: AsyncSession, paper_id: uuid.UUID, link_id: uuid.UUID, order: int
    ) -> list[PaperQuestionResponse]:
        return await PaperService.batch_update_question_order(
            db, paper_id, QuestionOrderUpdate(items=[QuestionOrderItem(link_id=link_id, order=order)])
        )

    @staticmethod
    async def batch_update_question_order(
        db: AsyncSession, paper_id: uuid.UUID, data: QuestionOrderUpdate
    ) -> list[PaperQuestionResponse]:
        """Set the order of several links at once; all links must belong to the paper."""
        await PaperService.get_paper_model(db, paper_id)
        requested = {item.link_id: item.order for item in data.items}
        links = await PaperRepository.get_links(db, paper_id, list(requested))
        if len(links) != len(requested):
            known = {link.id for link in links}
            missing = [str(link_id) for link_id in requested if link_id not in known]
            raise NotFoundException("Some questions are not part of this paper", details={"linkIds": missing})
        for link in links:
            link.order = requested[link.id]
        await db.commit()
        return await PaperService.fetch_questions_for_paper(db, paper_id)

    @staticmethod
    async def remove_questions_from_paper(
        db: AsyncSession, paper_id: uuid.UUID, link_ids: list[uuid.UUID]
    ) -> int:
        """Unlink questions from a paper; the bank questions stay."""
        await PaperService.get_paper_model(db, paper_id)
        removed = await PaperRepository.delete_links(db, paper_id, link_ids)
        await db.commit()
        logger.info(f"Removed {removed} questions from paper {paper_id}")
        return removed

    @staticmethod
    async def copy_paper_questions(
        db: AsyncSession, source_paper_id: uuid.UUID, target_paper_id: uuid.UUID
    ) -> list[PaperQuestionResponse]:
        """Append the source paper's questions to the target paper, keeping their relative order."""
        if source_paper_id == target_paper_id:
            raise ValidationException("Source and target paper must differ")
        await PaperService.get_paper_model(db, source_paper_id)
        await PaperService.get_paper_model(db, target_paper_id)

        source_links = await PaperRepository.list_links(db, source_paper_id)
        order = await PaperRepository.next_order(db, target_paper_id)
        for link, _ in source_links:
            db.add(PaperQuestion(paper_id=target_paper_id, question_id=link.question_id, order=order))
            order += 1
        await db.commit()
        logger.info(f"Copied {len(source_links)} questions from paper {source_paper_id} to {target_paper_id}")
        return await PaperService.fetch_questions_for_paper(db, target_paper_id)
