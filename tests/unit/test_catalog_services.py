import uuid

import pytest
import pytest_asyncio

from app.models import Category, QuestionCategory
from app.models.catalog import QuestionType
from app.schemas.catalog import (
    CategoryCreate,
    CategoryUpdate,
    PaperCreate,
    PaperQuestionsAdd,
    QuestionCreate,
    QuestionOrderItem,
    QuestionOrderUpdate,
)
from app.services.category_service import (
    CategoryService,
    build_category_tree,
    build_question_category_tree,
    category_path,
    descendant_category_ids,
    descendant_question_category_ids,
    find_category_by_slug,
    flatten_categories,
)
from app.services.paper_service import PaperService
from app.services.question_service import QuestionService
from app.utils.exceptions import ConflictException, NotFoundException, ValidationException
from app.utils.slugs import slugify


def mcq(text: str) -> QuestionCreate:
    return QuestionCreate(
        question_text=text,
        type=QuestionType.MCQ,
        options=["A", "B", "C"],
        correct_answer="B",
    )


@pytest.fixture
def categories():
    matric = Category(id=uuid.uuid4(), name="Matric", slug="matric", featured=False)
    fsc = Category(id=uuid.uuid4(), name="FSc", slug="fsc", featured=True)
    physics = Category(id=uuid.uuid4(), name="Physics", slug="physics", parent_id=matric.id, featured=False)
    biology = Category(id=uuid.uuid4(), name="Biology", slug="biology", parent_id=matric.id, featured=False)
    mechanics = Category(id=uuid.uuid4(), name="Mechanics", slug="mechanics", parent_id=physics.id, featured=False)
    orphan = Category(id=uuid.uuid4(), name="Orphan", slug="orphan", parent_id=uuid.uuid4(), featured=False)
    return {c.slug: c for c in (matric, fsc, physics, biology, mechanics, orphan)}


class TestCategoryTree:
    def test_roots_featured_first_children_by_name(self, categories):
        tree = build_category_tree(list(categories.values()))
        assert [node.name for node in tree] == ["FSc", "Matric"]
        assert [child.name for child in tree[1].children] == ["Biology", "Physics"]

    def test_full_slugs(self, categories):
        tree = build_category_tree(list(categories.values()))
        node = find_category_by_slug(tree, "matric/physics/mechanics")
        assert node is not None
        assert node.id == categories["mechanics"].id
        assert find_category_by_slug(tree, "physics/mechanics") is None

    def test_orphans_are_dropped(self, categories):
        tree = build_category_tree(list(categories.values()))
        assert all(item.name != "Orphan" for item in flatten_categories(tree))

    def test_descendants_include_the_start(self, categories):
        tree = build_category_tree(list(categories.values()))
        ids = descendant_category_ids(tree, categories["matric"].id)
        assert ids[0] == categories["matric"].id
        assert set(ids) == {categories[s].id for s in ("matric", "physics", "biology", "mechanics")}
        assert descendant_category_ids(tree, uuid.uuid4()) == []

    def test_flatten_levels(self, categories):
        flat = flatten_categories(build_category_tree(list(categories.values())))
        assert [(item.name, item.level, item.is_parent) for item in flat] == [
            ("FSc", 0, False),
            ("Matric", 0, True),
            ("Biology", 1, False),
            ("Physics", 1, True),
            ("Mechanics", 2, False),
        ]

    def test_path(self, categories):
        tree = build_category_tree(list(categories.values()))
        path = category_path(tree, categories["mechanics"].id)
        assert [crumb.name for crumb in path] == ["Matric", "Physics", "Mechanics"]
        assert category_path(tree, uuid.uuid4()) is None

    def test_question_category_descendants(self):
        root = QuestionCategory(id=uuid.uuid4(), name="Science")
        child = QuestionCategory(id=uuid.uuid4(), name="Chemistry", parent_id=root.id)
        tree = build_question_category_tree([child, root])
        assert descendant_question_category_ids(tree, root.id) == [root.id, child.id]
        assert descendant_question_category_ids(tree, child.id) == [child.id]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Physics 2023", "physics-2023"),
        ("  Past   Paper -- Part I ", "past-paper-part-i"),
        ("Maths & Stats!", "maths-stats"),
        ("", ""),
    ],
)
def test_slugify(text, expected):
    assert slugify(text) == expected


class TestCategoryService:
    async def test_cannot_move_under_a_descendant(self, test_db):
        root = await CategoryService.create_category(test_db, CategoryCreate(name="Matric", slug="matric"))
        child = await CategoryService.create_category(
            test_db, CategoryCreate(name="Physics", slug="physics", parent_id=root.id)
        )

        with pytest.raises(ValidationException):
            await CategoryService.update_category(test_db, root.id, CategoryUpdate(parent_id=child.id))
        with pytest.raises(ValidationException):
            await CategoryService.update_category(test_db, root.id, CategoryUpdate(parent_id=root.id))

    async def test_unknown_parent(self, test_db):
        with pytest.raises(NotFoundException):
            await CategoryService.create_category(
                test_db, CategoryCreate(name="Physics", slug="physics", parent_id=uuid.uuid4())
            )

    async def test_delete_with_children_conflicts(self, test_db):
        root = await CategoryService.create_category(test_db, CategoryCreate(name="Matric", slug="matric"))
        await CategoryService.create_category(
            test_db, CategoryCreate(name="Physics", slug="physics", parent_id=root.id)
        )
        with pytest.raises(ConflictException):
            await CategoryService.delete_category(test_db, root.id)


class TestPaperQuestions:
    @pytest_asyncio.fixture
    async def category(self, test_db):
        return await CategoryService.create_category(test_db, CategoryCreate(name="Matric", slug="matric"))

    async def test_slugs_are_unique(self, test_db, category):
        first = await PaperService.create_paper(test_db, PaperCreate(title="Physics 2023", category_id=category.id))
        second = await PaperService.create_paper(test_db, PaperCreate(title="Physics 2023", category_id=category.id))
        assert first.slug == "physics-2023"
        assert second.slug == "physics-2023-2"

    async def test_batch_add_then_reorder(self, test_db, category):
        paper = await PaperService.create_paper(test_db, PaperCreate(title="Physics", category_id=category.id))
        existing = await QuestionService.create_question(test_db, mcq("Existing"))

        questions = await PaperService.add_questions_batch(
            test_db, paper.id, PaperQuestionsAdd(question_ids=[existing.id], new_questions=[mcq("New")])
        )
        assert [(q.question_text, q.order) for q in questions] == [("Existing", 0), ("New", 1)]

        reordered = await PaperService.batch_update_question_order(
            test_db,
            paper.id,
            QuestionOrderUpdate(
                items=[
                    QuestionOrderItem(link_id=questions[0].link_id, order=1),
                    QuestionOrderItem(link_id=questions[1].link_id, order=0),
                ]
            ),
        )
        assert [q.question_text for q in reordered] == ["New", "Existing"]

    async def test_missing_question_ids_are_reported(self, test_db, category):
        paper = await PaperService.create_paper(test_db, PaperCreate(title="Physics", category_id=category.id))
        missing = uuid.uuid4()
        with pytest.raises(NotFoundException) as exc:
            await PaperService.add_questions_batch(test_db, paper.id, PaperQuestionsAdd(question_ids=[missing]))
        assert exc.value.details == {"questionIds": [str(missing)]}

    async def test_empty_batch(self, test_db, category):
        paper = await PaperService.create_paper(test_db, PaperCreate(title="Physics", category_id=category.id))
        with pytest.raises(ValidationException):
            await PaperService.add_questions_batch(test_db, paper.id, PaperQuestionsAdd())

    async def test_duplicate_and_copy(self, test_db, category):
        paper = await PaperService.create_paper(
            test_db, PaperCreate(title="Physics", category_id=category.id, published=True)
        )
        await PaperService.add_questions_batch(
            test_db, paper.id, PaperQuestionsAdd(new_questions=[mcq("Q1"), mcq("Q2")])
        )

        copy = await PaperService.duplicate_paper(test_db, paper.id)
        assert copy.title == "Physics (Copy)"
        assert not copy.published
        copied = await PaperService.fetch_questions_for_paper(test_db, copy.id)
        assert [q.question_text for q in copied] == ["Q1", "Q2"]

        appended = await PaperService.copy_paper_questions(test_db, paper.id, copy.id)
        assert [(q.question_text, q.order) for q in appended][2:] == [("Q1", 2), ("Q2", 3)]

        with pytest.raises(ValidationException):
            await PaperService.copy_paper_questions(test_db, paper.id, paper.id)

    async def test_deleting_a_question_unlinks_it(self, test_db, category):
        paper = await PaperService.create_paper(test_db, PaperCreate(title="Physics", category_id=category.id))
        questions = await PaperService.add_questions_batch(
            test_db, paper.id, PaperQuestionsAdd(new_questions=[mcq("Q1")])
        )
        removed = await QuestionService.delete_question(test_db, questions[0].id)
        assert removed == 1
        assert await PaperService.fetch_questions_for_paper(test_db, paper.id) == []
