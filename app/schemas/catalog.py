"""Category, question bank and paper schemas."""

import uuid
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator

from app.models.catalog import QuestionType


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = Field(None, max_length=2000)
    icon: Optional[str] = Field(None, max_length=64)
    parent_id: Optional[uuid.UUID] = None
    featured: bool = False
    keywords: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = Field(None, max_length=2000)
    icon: Optional[str] = Field(None, max_length=64)
    parent_id: Optional[uuid.UUID] = None
    featured: Optional[bool] = None
    keywords: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class CategoryResponse(CategoryBase):
    id: uuid.UUID
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryNode(CategoryResponse):
    """Category in the tree; full_slug is the slash-joined path from the root."""

    full_slug: str
    children: list["CategoryNode"] = Field(default_factory=list)


class FlatCategory(BaseModel):
    id: uuid.UUID
    name: str
    level: int
    is_parent: bool


class QuestionCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: Optional[uuid.UUID] = None


class QuestionCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    parent_id: Optional[uuid.UUID] = None


class QuestionCategoryNode(BaseModel):
    id: uuid.UUID
    name: str
    parent_id: Optional[uuid.UUID] = None
    children: list["QuestionCategoryNode"] = Field(default_factory=list)


class QuestionBase(BaseModel):
    question_text: str = Field(..., min_length=1)
    type: QuestionType
    options: list[str] = Field(default_factory=list)
    correct_answer: Union[str, list[str]]
    explanation: Optional[str] = None
    question_category_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def _check_answer(self) -> "QuestionBase":
        if self.type == QuestionType.MCQ:
            options = [option.strip() for option in self.options if option.strip()]
            if len(options) < 2:
                raise ValueError("Multiple choice questions need at least two options")
            answers = self.correct_answer if isinstance(self.correct_answer, list) else [self.correct_answer]
            if not answers or any(answer not in options for answer in answers):
                raise ValueError("The correct answer must be one of the options")
            self.options = options
        else:
            self.options = []
            if not self.correct_answer:
                raise ValueError("A correct answer is required")
        return self


class QuestionCreate(QuestionBase):
    pass


class QuestionUpdate(BaseModel):
    question_text: Optional[str] = Field(None, min_length=1)
    type: Optional[QuestionType] = None
    options: Optional[list[str]] = None
    correct_answer: Optional[Union[str, list[str]]] = None
    explanation: Optional[str] = None
    question_category_id: Optional[uuid.UUID] = None


class QuestionResponse(QuestionBase):
    id: uuid.UUID
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None


class PaperBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field("", max_length=255, description="Derived from the title when blank")
    description: str = Field("", max_length=5000)
    category_id: uuid.UUID
    question_count: int = Field(0, ge=0)
    duration: int = Field(0, ge=0, description="Minutes")
    year: Optional[int] = Field(None, ge=1900, le=2100)
    session: Optional[str] = Field(None, max_length=64)
    featured: bool = False
    published: bool = False
    questions_per_page: Optional[int] = Field(None, ge=1)
    keywords: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class PaperCreate(PaperBase):
    pass


class PaperUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    category_id: Optional[uuid.UUID] = None
    question_count: Optional[int] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    session: Optional[str] = Field(None, max_length=64)
    featured: Optional[bool] = None
    published: Optional[bool] = None
    questions_per_page: Optional[int] = Field(None, ge=1)
    keywords: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class PaperResponse(PaperBase):
    id: uuid.UUID
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaperQuestionResponse(QuestionResponse):
    """Bank question as it appears in a paper."""

    link_id: uuid.UUID
    order: int


class PaperQuestionsAdd(BaseModel):
    """Link existing bank questions and/or create new ones, appended in order."""

    question_ids: list[uuid.UUID] = Field(default_factory=list)
    new_questions: list[QuestionCreate] = Field(default_factory=list)


class QuestionOrderItem(BaseModel):
    link_id: uuid.UUID
    order: int = Field(..., ge=0)


class QuestionOrderUpdate(BaseModel):
    items: list[QuestionOrderItem] = Field(..., min_length=1)


class PaperQuestionsRemove(BaseModel):
    link_ids: list[uuid.UUID] = Field(..., min_length=1)
