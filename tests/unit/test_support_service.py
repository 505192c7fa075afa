import pytest
from sqlalchemy import func, select

from app.models import SupportRequest
from app.models.support import SubmissionStatus
from app.schemas.subscriptions import SubscriptionChangeOptions
from app.schemas.support import BugReportContact, GeneralContact, ReplyCommand
from app.services.subscription_service import SubscriptionService
from app.services.support_service import SupportService
from app.utils.exceptions import ConflictException, ForbiddenException
from tests.fixtures import SAMPLE_CONTACT


async def support_request_count(db, user_id: str) -> int:
    result = await db.execute(select(func.count(SupportRequest.id)).where(SupportRequest.user_id == user_id))
    return int(result.scalar() or 0)


class TestSubmitContactForm:
    async def test_anonymous_ticket_starts_open_and_unread(self, test_db):
        ticket = await SupportService(test_db).submit_contact_form(GeneralContact(**SAMPLE_CONTACT))
        assert ticket.status == SubmissionStatus.OPEN
        assert not ticket.is_read
        assert not ticket.priority
        assert ticket.user_id is None
        assert ticket.replies == []

    async def test_topic_fields_are_kept_as_details(self, test_db):
        payload = BugReportContact(
            **{**SAMPLE_CONTACT, "topic": "Report a Bug", "page_url": "https://prepify.app/papers/x"}
        )
        ticket = await SupportService(test_db).submit_contact_form(payload)
        assert ticket.details == {"page_url": "https://prepify.app/papers/x"}

    async def test_free_plan_ticket_is_filed_without_priority(self, test_db, student):
        user_id = student.id
        ticket = await SupportService(test_db).submit_contact_form(GeneralContact(**SAMPLE_CONTACT), user_id=user_id)
        assert ticket.user_id == user_id
        assert not ticket.priority
        assert await support_request_count(test_db, user_id) == 0

    async def test_priority_quota(self, test_db, student, scholar_plan):
        user_id = student.id
        await SubscriptionService.change_subscription(
            test_db, user_id, scholar_plan.id, SubscriptionChangeOptions(pricing_option_label="1 Month")
        )
        service = SupportService(test_db)

        first = await service.submit_contact_form(GeneralContact(**SAMPLE_CONTACT), user_id=user_id)
        second = await service.submit_contact_form(GeneralContact(**SAMPLE_CONTACT), user_id=user_id)

        assert first.priority
        assert not second.priority
        assert await support_request_count(test_db, user_id) == 1


class TestReplies:
    async def test_admin_and_user_replies_move_the_ticket(self, test_db, student, admin):
        user_id, admin_id = student.id, admin.id
        service = SupportService(test_db)
        ticket = await service.submit_contact_form(GeneralContact(**SAMPLE_CONTACT), user_id=user_id)

        ack = await service.add_reply(
            ticket.id, ReplyCommand(message="We are on it", client_ref="tmp-1"), admin_id, "Admin", is_admin=True
        )
        assert ack.client_ref == "tmp-1"
        assert ack.status == SubmissionStatus.REPLIED
        viewed = await service.get_user_submission(ticket.id, user_id)
        assert viewed.is_read
        assert viewed.last_replied_at == ack.reply.created_at

        ack = await service.add_reply(ticket.id, ReplyCommand(message="Thanks!"), user_id, "Student", is_admin=False)
        assert ack.status == SubmissionStatus.OPEN
        viewed = await service.get_user_submission(ticket.id, user_id)
        assert not viewed.is_read
        assert [reply.message for reply in viewed.replies] == ["We are on it", "Thanks!"]

    async def test_closed_ticket_takes_no_replies(self, test_db, student):
        user_id = student.id
        service = SupportService(test_db)
        ticket = await service.submit_contact_form(GeneralContact(**SAMPLE_CONTACT), user_id=user_id)
        await service.set_status(ticket.id, SubmissionStatus.CLOSED)

        with pytest.raises(ConflictException):
            await service.add_reply(ticket.id, ReplyCommand(message="Hello?"), user_id, "Student", is_admin=False)

    async def test_only_the_owner_can_reply(self, test_db, student):
        service = SupportService(test_db)
        ticket = await service.submit_contact_form(GeneralContact(**SAMPLE_CONTACT), user_id=student.id)

        with pytest.raises(ForbiddenException):
            await service.add_reply(ticket.id, ReplyCommand(message="Me too"), "someone-else", "Other", is_admin=False)

    async def test_admin_view_marks_the_ticket_read(self, test_db):
        service = SupportService(test_db)
        ticket = await service.submit_contact_form(GeneralContact(**SAMPLE_CONTACT))
        assert (await service.get_admin_submission(ticket.id)).is_read

        unread = await service.mark_read(ticket.id, False)
        assert not unread.is_read
