"""Service layer for the question bank."""

import json
import logging
import uuid
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.catalog_repo import CategoryRepository, QuestionRepository
from app.models.catalog import Question
from app.schemas.catalog import QuestionCreate, QuestionResponse, QuestionUpdate
from app.services.category_service import QuestionCategoryService
from app.utils.exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = {"explanation", "question_category_id"}


def _load_answer(raw: str):
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


class QuestionService:
    """Service for question bank business logic."""

    @staticmethod
    def to_response(question: Question) -> QuestionResponse:
        return QuestionResponse(
            id=question.id,
            question_text=question.question_text,
            type=question.type,
            options=json.loads(question.options or "[]"),
            correct_answer=_load_answer(question.correct_answer),
            explanation=question.explanation,
            question_category_id=question.question_category_id,
            created_date=question.created_date,
            updated_date=question.updated_date,
        )

    @staticmethod
    def build_question(data: QuestionCreate, actor_id: Optional[str] = None) -> Question:
        """Unsaved Question row from validated input."""
        return Question(
            question_text=data.question_text.strip(),
            type=data.type,
            options=json.dumps(data.options),
            correct_answer=json.dumps(data.correct_answer),
            explanation=data.explanation,
            question_category_id=data.question_category_id,
            created_by=actor_id,
        )

    @staticmethod
    async def get_question_model(db: AsyncSession, question_id: uuid.UUID) -> Question:
        question = await QuestionRepository.get_question(db, question_id)
        if question is None:
            raise NotFoundException(f"Question {question_id} not found")
        return question

    @staticmethod
    async def get_question(db: AsyncSession, question_id: uuid.UUID) -> QuestionResponse:
        return QuestionService.to_response(await QuestionService.get_question_model(db, question_id))

    @staticmethod
    async def list_questions(
        db: AsyncSession, question_category_id: Optional[uuid.UUID] = None
    ) -> list[QuestionResponse]:
        """List bank questions, optionally limited to a question category and its subcategories."""
        category_ids = None
        if question_category_id is not None:
            category_ids = await QuestionCategoryService.descendant_ids(db, question_category_id)
            if not category_ids:
                raise NotFoundException(f"Question category {question_category_id} not found")
        questions = await QuestionRepository.list_questions(db, category_ids)
        return [QuestionService.to_response(q) for q in questions]

    @staticmethod
    async def _check_category(db: AsyncSession, category_id: Optional[uuid.UUID]) -> None:
        if category_id and await CategoryRepository.get_question_category(db, category_id) is None:
            raise NotFoundException(f"Question category {category_id} not found")

    @staticmethod
    async def create_question(
        db: AsyncSession, data: QuestionCreate, actor_id: Optional[str] = None
    ) -> QuestionResponse:
        await QuestionService._check_category(db, data.question_category_id)
        question = QuestionService.build_question(data, actor_id)
        db.add(question)
        await db.commit()
        await db.refresh(question)
        logger.info(f"Question created: id={question.id}, type={question.type.value}")
        return QuestionService.to_response(question)

    @staticmethod
    async def update_question(
        db: AsyncSession, question_id: uuid.UUID, data: QuestionUpdate, actor_id: Optional[str] = None
    ) -> QuestionResponse:
        """
        Apply a partial update.

        The merged question is validated as a whole so a type change and its
        options/answer are checked together.
        """
        question = await QuestionService.get_question_model(db, question_id)
        current = QuestionService.to_response(question)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in _NULLABLE_FIELDS
        }
        try:
            merged = QuestionCreate(**{**current.model_dump(include=set(QuestionCreate.model_fields)), **changes})
        except PydanticValidationError as e:
            raise ValidationException(
                "Invalid question",
                details=[{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]} for err in e.errors()],
            )
        await QuestionService._check_category(db, merged.question_category_id)

        question.question_text = merged.question_text.strip()
        question.type = merged.type
        question.options = json.dumps(merged.options)
        question.correct_answer = json.dumps(merged.correct_answer)
        question.explanation = merged.explanation
        question.question_category_id = merged.question_category_id
        question.updated_by = actor_id
        await db.commit()
        await db.refresh(question)
        return QuestionService.to_response(question)

    @staticmethod
    async def delete_question(db: AsyncSession, question_id: uuid.UUID) -> int:
        """Delete a bank question; it disappears from every paper using it."""
        question = await QuestionService.get_question_model(db, question_id)
        return await QuestionRepository.delete_question(db, question)
