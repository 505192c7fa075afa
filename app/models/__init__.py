from app.models.base import Base
from app.models.catalog import Category, Paper, PaperQuestion, Question, QuestionCategory, QuestionType
from app.models.models import EmailTemplate, Page, SiteSetting, User
from app.models.order import Order
from app.models.plan import Discount, PaymentMethod, Plan
from app.models.subscription import UserPlan
from app.models.support import ContactSubmission, SubmissionReply, SubmissionStatus
from app.models.usage import Bookmark, Download, SupportRequest

__all__ = [
    "Base",
    "Bookmark",
    "Category",
    "ContactSubmission",
    "Discount",
    "Download",
    "EmailTemplate",
    "Order",
    "Page",
    "Paper",
    "PaperQuestion",
    "PaymentMethod",
    "Plan",
    "Question",
    "QuestionCategory",
    "QuestionType",
    "SiteSetting",
    "SubmissionReply",
    "SubmissionStatus",
    "SupportRequest",
    "User",
    "UserPlan",
]
