"""Service layer for paper categories and question categories.

Categories are stored flat with a parent pointer. The tree, full slug
paths and the lookup helpers below work on the built tree so a single
query serves every navigation need.
"""

import logging
import uuid
from collections import deque
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.catalog_repo import CategoryRepository
from app.models.catalog import Category, QuestionCategory
from app.schemas.catalog import (
    CategoryCreate,
    CategoryNode,
    CategoryResponse,
    CategoryUpdate,
    FlatCategory,
    QuestionCategoryCreate,
    QuestionCategoryNode,
    QuestionCategoryUpdate,
)
from app.utils.exceptions import ConflictException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)


def build_category_tree(categories: list[Category]) -> list[CategoryNode]:
    """
    Nest flat categories into a tree.

    Full slugs are the slash-joined local slugs from the root. Roots are
    sorted featured first then by name, children by name. Categories whose
    parent is missing are dropped from the tree.
    """
    nodes = {
        category.id: CategoryNode(
            **CategoryResponse.model_validate(category).model_dump(), full_slug=category.slug
        )
        for category in categories
    }
    roots: list[CategoryNode] = []
    for category in categories:
        node = nodes[category.id]
        if category.parent_id is None:
            roots.append(node)
        elif category.parent_id in nodes:
            nodes[category.parent_id].children.append(node)

    def _assign_slugs(level: list[CategoryNode], parent_slug: str) -> None:
        for node in level:
            node.full_slug = f"{parent_slug}/{node.slug}" if parent_slug else node.slug
            node.children.sort(key=lambda child: child.name.lower())
            _assign_slugs(node.children, node.full_slug)

    _assign_slugs(roots, "")
    roots.sort(key=lambda node: (not node.featured, node.name.lower()))
    return roots


def find_category_by_id(tree: list[CategoryNode], category_id: uuid.UUID) -> Optional[CategoryNode]:
    for node in tree:
        if node.id == category_id:
            return node
        found = find_category_by_id(node.children, category_id)
        if found:
            return found
    return None


def find_category_by_slug(tree: list[CategoryNode], full_slug: str) -> Optional[CategoryNode]:
    for node in tree:
        if node.full_slug == full_slug:
            return node
        found = find_category_by_slug(node.children, full_slug)
        if found:
            return found
    return None


def descendant_category_ids(tree: list[CategoryNode], start_id: uuid.UUID) -> list[uuid.UUID]:
    """Ids of a category and everything below it, breadth first. Empty when start_id is unknown."""
    start = find_category_by_id(tree, start_id)
    if start is None:
        return []
    ids: list[uuid.UUID] = []
    queue = deque([start])
    while queue:
        current = queue.popleft()
        ids.append(current.id)
        queue.extend(current.children)
    return ids


def flatten_categories(tree: list[CategoryNode], level: int = 0) -> list[FlatCategory]:
    """Depth-first list for select inputs, with nesting level and parent flag."""
    flat: list[FlatCategory] = []
    for node in tree:
        flat.append(FlatCategory(id=node.id, name=node.name, level=level, is_parent=bool(node.children)))
        flat.extend(flatten_categories(node.children, level + 1))
    return flat


def category_path(tree: list[CategoryNode], category_id: uuid.UUID) -> Optional[list[CategoryResponse]]:
    """Breadcrumb from the root down to the category, or None if it is not in the tree."""
    for node in tree:
        crumb = CategoryResponse.model_validate(node.model_dump(exclude={"children", "full_slug"}))
        if node.id == category_id:
            return [crumb]
        below = category_path(node.children, category_id)
        if below is not None:
            return [crumb] + below
    return None


def build_question_category_tree(categories: list[QuestionCategory]) -> list[QuestionCategoryNode]:
    nodes = {c.id: QuestionCategoryNode(id=c.id, name=c.name, parent_id=c.parent_id) for c in categories}
    roots: list[QuestionCategoryNode] = []
    for category in categories:
        node = nodes[category.id]
        if category.parent_id is None:
            roots.append(node)
        elif category.parent_id in nodes:
            nodes[category.parent_id].children.append(node)

    def _sort(level: list[QuestionCategoryNode]) -> None:
        level.sort(key=lambda node: node.name.lower())
        for node in level:
            _sort(node.children)

    _sort(roots)
    return roots


def flatten_question_categories(tree: list[QuestionCategoryNode], level: int = 0) -> list[FlatCategory]:
    flat: list[FlatCategory] = []
    for node in tree:
        flat.append(FlatCategory(id=node.id, name=node.name, level=level, is_parent=bool(node.children)))
        flat.extend(flatten_question_categories(node.children, level + 1))
    return flat


def descendant_question_category_ids(
    tree: list[QuestionCategoryNode], start_id: uuid.UUID
) -> list[uuid.UUID]:
    queue = deque(tree)
    start = None
    while queue:
        node = queue.popleft()
        if node.id == start_id:
            start = node
            break
        queue.extend(node.children)
    if start is None:
        return []
    ids: list[uuid.UUID] = []
    queue = deque([start])
    while queue:
        current = queue.popleft()
        ids.append(current.id)
        queue.extend(current.children)
    return ids


class CategoryService:
    """Service for category business logic."""

    @staticmethod
    async def fetch_category_tree(db: AsyncSession) -> list[CategoryNode]:
        return build_category_tree(await CategoryRepository.list_categories(db))

    @staticmethod
    async def get_category(db: AsyncSession, category_id: uuid.UUID) -> CategoryNode:
        node = find_category_by_id(await CategoryService.fetch_category_tree(db), category_id)
        if node is None:
            raise NotFoundException(f"Category {category_id} not found")
        return node

    @staticmethod
    async def get_category_by_slug(db: AsyncSession, full_slug: str) -> CategoryNode:
        node = find_category_by_slug(await CategoryService.fetch_category_tree(db), full_slug.strip("/"))
        if node is None:
            raise NotFoundException(f"Category '{full_slug}' not found")
        return node

    @staticmethod
    async def get_category_path(db: AsyncSession, category_id: uuid.UUID) -> list[CategoryResponse]:
        path = category_path(await CategoryService.fetch_category_tree(db), category_id)
        if path is None:
            raise NotFoundException(f"Category {category_id} not found")
        return path

    @staticmethod
    async def get_flattened_categories(db: AsyncSession) -> list[FlatCategory]:
        return flatten_categories(await CategoryService.fetch_category_tree(db))

    @staticmethod
    async def descendant_ids(db: AsyncSession, category_id: uuid.UUID) -> list[uuid.UUID]:
        return descendant_category_ids(await CategoryService.fetch_category_tree(db), category_id)

    @staticmethod
    async def _check_parent(db: AsyncSession, category_id: Optional[uuid.UUID], parent_id: Optional[uuid.UUID]) -> None:
        if parent_id is None:
            return
        if await CategoryRepository.get_category(db, parent_id) is None:
            raise NotFoundException(f"Parent category {parent_id} not found")
        if category_id is not None and parent_id in await CategoryService.descendant_ids(db, category_id):
            raise ValidationException("A category cannot be moved under itself or one of its subcategories")

    @staticmethod
    async def create_category(db: AsyncSession, data: CategoryCreate, actor_id: Optional[str] = None) -> CategoryResponse:
        await CategoryService._check_parent(db, None, data.parent_id)
        category = Category(**data.model_dump(), created_by=actor_id)
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return CategoryResponse.model_validate(category)

    @staticmethod
    async def update_category(
        db: AsyncSession, category_id: uuid.UUID, data: CategoryUpdate, actor_id: Optional[str] = None
    ) -> CategoryResponse:
        category = await CategoryRepository.get_category(db, category_id)
        if category is None:
            raise NotFoundException(f"Category {category_id} not found")
        changes = data.model_dump(exclude_unset=True)
        if "parent_id" in changes:
            await CategoryService._check_parent(db, category_id, changes["parent_id"])
        for field, value in changes.items():
            if value is not None or field == "parent_id":
                setattr(category, field, value)
        category.updated_by = actor_id
        await db.commit()
        await db.refresh(category)
        return CategoryResponse.model_validate(category)

    @staticmethod
    async def delete_category(db: AsyncSession, category_id: uuid.UUID) -> None:
        category = await CategoryRepository.get_category(db, category_id)
        if category is None:
            raise NotFoundException(f"Category {category_id} not found")
        if await CategoryRepository.count_children(db, category_id):
            raise ConflictException("Delete or move the subcategories of this category first")
        await db.delete(category)
        await db.commit()
        logger.info(f"Category {category_id} deleted")


class QuestionCategoryService:
    """Service for question bank categories."""

    @staticmethod
    async def fetch_tree(db: AsyncSession) -> list[QuestionCategoryNode]:
        return build_question_category_tree(await CategoryRepository.list_question_categories(db))

    @staticmethod
    async def get_flattened(db: AsyncSession) -> list[FlatCategory]:
        return flatten_question_categories(await QuestionCategoryService.fetch_tree(db))

    @staticmethod
    async def descendant_ids(db: AsyncSession, category_id: uuid.UUID) -> list[uuid.UUID]:
        return descendant_question_category_ids(await QuestionCategoryService.fetch_tree(db), category_id)

    @staticmethod
    async def create(db: AsyncSession, data: QuestionCategoryCreate, actor_id: Optional[str] = None) -> QuestionCategoryNode:
        if data.parent_id and await CategoryRepository.get_question_category(db, data.parent_id) is None:
            raise NotFoundException(f"Parent question category {data.parent_id} not found")
        category = QuestionCategory(name=data.name, parent_id=data.parent_id, created_by=actor_id)
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return QuestionCategoryNode(id=category.id, name=category.name, parent_id=category.parent_id)

    @staticmethod
    async def update(
        db: AsyncSession, category_id: uuid.UUID, data: QuestionCategoryUpdate, actor_id: Optional[str] = None
    ) -> QuestionCategoryNode:
        category = await CategoryRepository.get_question_category(db, category_id)
        if category is None:
            raise NotFoundException(f"Question category {category_id} not found")
        changes = data.model_dump(exclude_unset=True)
        if changes.get("parent_id") is not None:
            if changes["parent_id"] in await QuestionCategoryService.descendant_ids(db, category_id):
                raise ValidationException("A category cannot be moved under itself or one of its subcategories")
        if changes.get("name"):
            category.name = changes["name"]
        if "parent_id" in changes:
            category.parent_id = changes["parent_id"]
        category.updated_by = actor_id
        await db.commit()
        await db.refresh(category)
        return QuestionCategoryNode(id=category.id, name=category.name, parent_id=category.parent_id)

    @staticmethod
    async def delete(db: AsyncSession, category_id: uuid.UUID) -> None:
        category = await CategoryRepository.get_question_category(db, category_id)
        if category is None:
            raise NotFoundException(f"Question category {category_id} not found")
        await db.delete(category)
        await db.commit()
