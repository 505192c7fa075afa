"""initial schema

Revision ID: 3f1c9a7d2b10
Revises: 
Create Date: 2026-10-19 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column('created_by', sa.String(128), nullable=True),
        sa.Column('created_date', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_by', sa.String(128), nullable=True),
        sa.Column('updated_date', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'tbl_plans',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('pricing_options', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('features', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('popular', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_ad_supported', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
    )

    op.create_table(
        'tbl_users',
        sa.Column('id', sa.String(128), primary_key=True, nullable=False),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('role', sa.String(32), nullable=False, server_default='user'),
        sa.Column('plan_id', sa.Uuid(), sa.ForeignKey('tbl_plans.id', ondelete='SET NULL'), nullable=True),
        sa.Column('plan_expiry_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_tbl_users_email', 'tbl_users', ['email'])

    op.create_table(
        'tbl_payment_methods',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('details', sa.Text(), nullable=False, server_default='{}'),
        *_audit_columns(),
    )

    op.create_table(
        'tbl_discounts',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(64), nullable=True),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('applies_to_all_plans', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('applicable_plan_ids', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('applies_to_all_durations', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('applicable_durations', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_tbl_discounts_code', 'tbl_discounts', ['code'])

    op.create_table(
        'tbl_user_plan_history',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(128), sa.ForeignKey('tbl_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('plan_id', sa.Uuid(), nullable=False),
        sa.Column('plan_name', sa.String(255), nullable=False),
        sa.Column('subscription_date', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('order_id', sa.Uuid(), nullable=True),
    )
    op.create_index('ix_user_plan_history_user', 'tbl_user_plan_history', ['user_id'])
    # At most one current record per user
    op.create_index(
        'uq_user_plan_history_current',
        'tbl_user_plan_history',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text("status = 'current'"),
        sqlite_where=sa.text("status = 'current'"),
    )

    op.create_table(
        'tbl_orders',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(128), sa.ForeignKey('tbl_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_name', sa.Text(), nullable=True),
        sa.Column('user_email', sa.String(320), nullable=True),
        sa.Column('plan_id', sa.Uuid(), nullable=False),
        sa.Column('plan_name', sa.String(255), nullable=False),
        sa.Column('pricing_option_label', sa.String(255), nullable=False),
        sa.Column('original_price', sa.Float(), nullable=False),
        sa.Column('discount_id', sa.Uuid(), nullable=True),
        sa.Column('discount_code', sa.String(64), nullable=True),
        sa.Column('discount_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('final_amount', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(255), nullable=False),
        sa.Column('payment_method_type', sa.String(32), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_orders_user', 'tbl_orders', ['user_id'])
    op.create_index('ix_orders_status', 'tbl_orders', ['status'])

    op.create_table(
        'tbl_settings',
        sa.Column('key', sa.String(64), primary_key=True, nullable=False),
        sa.Column('value', sa.Text(), nullable=False, server_default='{}'),
        sa.Column('updated_date', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'tbl_pages',
        sa.Column('slug', sa.String(128), primary_key=True, nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('meta_title', sa.Text(), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
    )

    op.create_table(
        'tbl_email_templates',
        sa.Column('id', sa.String(128), primary_key=True, nullable=False),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('is_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        'tbl_categories',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(64), nullable=True),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('tbl_categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('keywords', sa.Text(), nullable=True),
        sa.Column('meta_title', sa.Text(), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_categories_parent', 'tbl_categories', ['parent_id'])

    op.create_table(
        'tbl_question_categories',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column(
            'parent_id', sa.Uuid(), sa.ForeignKey('tbl_question_categories.id', ondelete='SET NULL'), nullable=True
        ),
        *_audit_columns(),
    )
    op.create_index('ix_question_categories_parent', 'tbl_question_categories', ['parent_id'])

    op.create_table(
        'tbl_questions',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('options', sa.Text(), nullable=True),
        sa.Column('correct_answer', sa.Text(), nullable=False),
        sa.Column('explanation', sa.Text(), nullable=True),
        sa.Column(
            'question_category_id',
            sa.Uuid(),
            sa.ForeignKey('tbl_question_categories.id', ondelete='SET NULL'),
            nullable=True,
        ),
        *_audit_columns(),
    )
    op.create_index('ix_questions_category', 'tbl_questions', ['question_category_id'])

    op.create_table(
        'tbl_papers',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('category_id', sa.Uuid(), sa.ForeignKey('tbl_categories.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('question_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('session', sa.String(64), nullable=True),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('questions_per_page', sa.Integer(), nullable=True),
        sa.Column('keywords', sa.Text(), nullable=True),
        sa.Column('meta_title', sa.Text(), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_papers_category', 'tbl_papers', ['category_id'])
    op.create_index('ix_papers_slug', 'tbl_papers', ['slug'], unique=True)

    op.create_table(
        'tbl_paper_questions',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('paper_id', sa.Uuid(), sa.ForeignKey('tbl_papers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', sa.Uuid(), sa.ForeignKey('tbl_questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_paper_questions_paper', 'tbl_paper_questions', ['paper_id'])
    op.create_index('ix_paper_questions_question', 'tbl_paper_questions', ['question_id'])

    op.create_table(
        'tbl_contact_submissions',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('topic', sa.String(128), nullable=False),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('details', sa.Text(), nullable=False, server_default='{}'),
        sa.Column('user_id', sa.String(128), sa.ForeignKey('tbl_users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('priority', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('status', sa.String(32), nullable=False, server_default='open'),
        sa.Column('last_replied_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_contact_submissions_user', 'tbl_contact_submissions', ['user_id'])
    op.create_index('ix_contact_submissions_created', 'tbl_contact_submissions', ['created_at'])

    op.create_table(
        'tbl_submission_replies',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            'submission_id', sa.Uuid(), sa.ForeignKey('tbl_contact_submissions.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('author_id', sa.String(128), nullable=False),
        sa.Column('author_name', sa.String(255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_submission_replies_submission', 'tbl_submission_replies', ['submission_id', 'created_at'])

    op.create_table(
        'tbl_bookmarks',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(128), sa.ForeignKey('tbl_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('paper_id', sa.Uuid(), sa.ForeignKey('tbl_papers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('removed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_bookmarks_user_paper', 'tbl_bookmarks', ['user_id', 'paper_id'])

    op.create_table(
        'tbl_downloads',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(128), sa.ForeignKey('tbl_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('paper_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_downloads_user_created', 'tbl_downloads', ['user_id', 'created_at'])

    op.create_table(
        'tbl_support_requests',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(128), sa.ForeignKey('tbl_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'submission_id', sa.Uuid(), sa.ForeignKey('tbl_contact_submissions.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_support_requests_user_created', 'tbl_support_requests', ['user_id', 'created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_support_requests_user_created', table_name='tbl_support_requests')
    op.drop_table('tbl_support_requests')
    op.drop_index('ix_downloads_user_created', table_name='tbl_downloads')
    op.drop_table('tbl_downloads')
    op.drop_index('ix_bookmarks_user_paper', table_name='tbl_bookmarks')
    op.drop_table('tbl_bookmarks')
    op.drop_index('ix_submission_replies_submission', table_name='tbl_submission_replies')
    op.drop_table('tbl_submission_replies')
    op.drop_index('ix_contact_submissions_created', table_name='tbl_contact_submissions')
    op.drop_index('ix_contact_submissions_user', table_name='tbl_contact_submissions')
    op.drop_table('tbl_contact_submissions')
    op.drop_index('ix_paper_questions_question', table_name='tbl_paper_questions')
    op.drop_index('ix_paper_questions_paper', table_name='tbl_paper_questions')
    op.drop_table('tbl_paper_questions')
    op.drop_index('ix_papers_slug', table_name='tbl_papers')
    op.drop_index('ix_papers_category', table_name='tbl_papers')
    op.drop_table('tbl_papers')
    op.drop_index('ix_questions_category', table_name='tbl_questions')
    op.drop_table('tbl_questions')
    op.drop_index('ix_question_categories_parent', table_name='tbl_question_categories')
    op.drop_table('tbl_question_categories')
    op.drop_index('ix_categories_parent', table_name='tbl_categories')
    op.drop_table('tbl_categories')
    op.drop_table('tbl_email_templates')
    op.drop_table('tbl_pages')
    op.drop_table('tbl_settings')
    op.drop_index('ix_orders_status', table_name='tbl_orders')
    op.drop_index('ix_orders_user', table_name='tbl_orders')
    op.drop_table('tbl_orders')
    op.drop_index('uq_user_plan_history_current', table_name='tbl_user_plan_history')
    op.drop_index('ix_user_plan_history_user', table_name='tbl_user_plan_history')
    op.drop_table('tbl_user_plan_history')
    op.drop_index('ix_tbl_discounts_code', table_name='tbl_discounts')
    op.drop_table('tbl_discounts')
    op.drop_table('tbl_payment_methods')
    op.drop_index('ix_tbl_users_email', table_name='tbl_users')
    op.drop_table('tbl_users')
    op.drop_table('tbl_plans')
