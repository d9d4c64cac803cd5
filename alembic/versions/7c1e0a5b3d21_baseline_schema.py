"""baseline_schema

Revision ID: 7c1e0a5b3d21
Revises:
Create Date: 2026-10-19 09:12:41.118204

Creates accounts, plans, subscriptions, payments, jobs, applications and bookmarks.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7c1e0a5b3d21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

plan_type = sa.Enum('FREE', 'PREMIUM', name='plantype')
subscription_status = sa.Enum('PENDING', 'ACTIVE', 'CANCELLED', name='subscriptionstatus')
payment_status = sa.Enum('PENDING', 'COMPLETED', name='paymentstatus')
job_type = sa.Enum('FULL_TIME', 'PART_TIME', 'CONTRACT', 'INTERNSHIP', name='jobtype')
application_status = sa.Enum(
    'PENDING', 'REVIEWING', 'SHORTLISTED', 'INTERVIEWING', 'ACCEPTED', 'REJECTED', 'WITHDRAWN',
    name='applicationstatus',
)


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    return table_name in inspect(bind).get_table_names()


def _timestamps(*names):
    return [
        sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False)
        for name in names
    ]


def upgrade() -> None:
    """Create every table that does not exist yet."""
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('skills', sa.Text(), nullable=True),
            sa.Column('bio', sa.Text(), nullable=True),
            sa.Column('location', sa.String(), nullable=True),
            sa.Column('is_banned', sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps('created_at'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not table_exists('companies'):
        op.create_table('companies',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('website', sa.String(), nullable=True),
            sa.Column('about', sa.Text(), nullable=True),
            sa.Column('industry', sa.String(), nullable=True),
            sa.Column('logo', sa.String(), nullable=True),
            sa.Column('is_banned', sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps('created_at'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_companies_id'), 'companies', ['id'], unique=False)
        op.create_index(op.f('ix_companies_email'), 'companies', ['email'], unique=True)
        op.create_index(op.f('ix_companies_name'), 'companies', ['name'], unique=False)

    if not table_exists('roles'):
        op.create_table('roles',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name')
        )
        op.create_index(op.f('ix_roles_id'), 'roles', ['id'], unique=False)

    if not table_exists('user_roles'):
        op.create_table('user_roles',
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('role_id', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('user_id', 'role_id')
        )

    if not table_exists('company_roles'):
        op.create_table('company_roles',
            sa.Column('company_id', sa.Integer(), nullable=False),
            sa.Column('role_id', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('company_id', 'role_id')
        )

    if not table_exists('plans'):
        op.create_table('plans',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('type', plan_type, nullable=False),
            sa.Column('price', sa.Float(), nullable=False),
            sa.Column('duration', sa.Integer(), nullable=False),
            sa.Column('user_applications_limit', sa.Integer(), nullable=False),
            sa.Column('company_jobs_limit', sa.Integer(), nullable=False),
            sa.Column('company_internships_limit', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name')
        )
        op.create_index(op.f('ix_plans_id'), 'plans', ['id'], unique=False)

    if not table_exists('user_subscriptions'):
        op.create_table('user_subscriptions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('plan_id', sa.Integer(), nullable=False),
            sa.Column('status', subscription_status, nullable=False),
            sa.Column('applications_used', sa.Integer(), nullable=False, server_default='0'),
            *_timestamps('start_date'),
            sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['plan_id'], ['plans.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id')
        )
        op.create_index(op.f('ix_user_subscriptions_id'), 'user_subscriptions', ['id'], unique=False)

    if not table_exists('company_subscriptions'):
        op.create_table('company_subscriptions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=False),
            sa.Column('plan_id', sa.Integer(), nullable=False),
            sa.Column('status', subscription_status, nullable=False),
            sa.Column('jobs_posted', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('internships_posted', sa.Integer(), nullable=False, server_default='0'),
            *_timestamps('start_date'),
            sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['plan_id'], ['plans.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('company_id')
        )
        op.create_index(op.f('ix_company_subscriptions_id'), 'company_subscriptions', ['id'], unique=False)

    if not table_exists('payments'):
        op.create_table('payments',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('amount', sa.Float(), nullable=False),
            sa.Column('currency', sa.String(length=3), nullable=False),
            sa.Column('status', payment_status, nullable=False),
            sa.Column('provider', sa.String(), nullable=False),
            sa.Column('provider_order_id', sa.String(), nullable=False),
            sa.Column('provider_payment_id', sa.String(), nullable=True),
            sa.Column('plan_id', sa.Integer(), nullable=False),
            sa.Column('user_subscription_id', sa.Integer(), nullable=True),
            sa.Column('company_subscription_id', sa.Integer(), nullable=True),
            *_timestamps('created_at', 'updated_at'),
            sa.CheckConstraint(
                '(user_subscription_id IS NULL) <> (company_subscription_id IS NULL)',
                name='ck_payment_single_subscription',
            ),
            sa.ForeignKeyConstraint(['user_subscription_id'], ['user_subscriptions.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['company_subscription_id'], ['company_subscriptions.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['plan_id'], ['plans.id']),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_payments_id'), 'payments', ['id'], unique=False)
        op.create_index(op.f('ix_payments_provider_order_id'), 'payments', ['provider_order_id'], unique=True)
        op.create_index(op.f('ix_payments_user_subscription_id'), 'payments', ['user_subscription_id'], unique=False)
        op.create_index(op.f('ix_payments_company_subscription_id'), 'payments', ['company_subscription_id'], unique=False)
        op.create_index(op.f('ix_payments_created_at'), 'payments', ['created_at'], unique=False)
        op.create_index(op.f('ix_payments_plan_id'), 'payments', ['plan_id'], unique=False)

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('location', sa.String(), nullable=False),
            sa.Column('salary', sa.String(), nullable=True),
            sa.Column('type', job_type, nullable=False),
            sa.Column('is_removed', sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps('created_at', 'updated_at'),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)
        op.create_index(op.f('ix_jobs_company_id'), 'jobs', ['company_id'], unique=False)
        op.create_index(op.f('ix_jobs_title'), 'jobs', ['title'], unique=False)
        op.create_index(op.f('ix_jobs_type'), 'jobs', ['type'], unique=False)
        op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)
        op.create_index('idx_company_removed', 'jobs', ['company_id', 'is_removed'], unique=False)

    if not table_exists('job_applications'):
        op.create_table('job_applications',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('job_id', sa.Integer(), nullable=False),
            sa.Column('applicant_id', sa.Integer(), nullable=False),
            sa.Column('resume', sa.Text(), nullable=True),
            sa.Column('cover_letter', sa.Text(), nullable=True),
            sa.Column('status', application_status, nullable=False),
            *_timestamps('applied_at', 'updated_at'),
            sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['applicant_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('job_id', 'applicant_id', name='uq_application_job_applicant')
        )
        op.create_index(op.f('ix_job_applications_id'), 'job_applications', ['id'], unique=False)
        op.create_index(op.f('ix_job_applications_job_id'), 'job_applications', ['job_id'], unique=False)
        op.create_index(op.f('ix_job_applications_applicant_id'), 'job_applications', ['applicant_id'], unique=False)
        op.create_index(op.f('ix_job_applications_applied_at'), 'job_applications', ['applied_at'], unique=False)

    if not table_exists('bookmarks'):
        op.create_table('bookmarks',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('job_id', sa.Integer(), nullable=False),
            *_timestamps('created_at'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'job_id', name='uq_bookmark_user_job')
        )
        op.create_index(op.f('ix_bookmarks_id'), 'bookmarks', ['id'], unique=False)
        op.create_index(op.f('ix_bookmarks_user_id'), 'bookmarks', ['user_id'], unique=False)
        op.create_index(op.f('ix_bookmarks_created_at'), 'bookmarks', ['created_at'], unique=False)


def downgrade() -> None:
    """Drop tables in reverse dependency order."""
    for table in (
        'bookmarks', 'job_applications', 'jobs', 'payments',
        'company_subscriptions', 'user_subscriptions', 'plans',
        'company_roles', 'user_roles', 'roles', 'companies', 'users',
    ):
        op.drop_table(table)
    bind = op.get_bind()
    for enum_type in (application_status, job_type, payment_status, subscription_status, plan_type):
        enum_type.drop(bind, checkfirst=True)
