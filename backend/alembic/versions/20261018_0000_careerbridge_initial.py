"""careerbridge_initial_schema

Revision ID: careerbridge_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = 'careerbridge_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('uid', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('uid')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    op.create_table(
        'credentials',
        sa.Column('uid', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(length=100), nullable=False),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('last_login_ip', sa.String(length=45), nullable=True),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('account_locked_until', sa.DateTime(), nullable=True),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('uid')
    )
    op.create_index(op.f('ix_credentials_email'), 'credentials', ['email'], unique=True)

    op.create_table(
        'jobs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('company', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', sa.Text().with_variant(postgresql.JSONB(), 'postgresql'), nullable=False),
        sa.Column('salary', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('employerId', sa.String(length=36), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['employerId'], ['users.uid'], name='fk_jobs_employer_id'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_jobs_employerId'), 'jobs', ['employerId'], unique=False)
    op.create_index('ix_jobs_status_created', 'jobs', ['status', 'createdAt'], unique=False)

    op.create_table(
        'applications',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('jobId', sa.String(length=36), nullable=False),
        sa.Column('studentId', sa.String(length=36), nullable=False),
        sa.Column('employerId', sa.String(length=36), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('resume', sa.String(length=500), nullable=False),
        sa.Column('coverLetter', sa.String(length=500), nullable=True),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['jobId'], ['jobs.id'], name='fk_applications_job_id'),
        sa.ForeignKeyConstraint(['studentId'], ['users.uid'], name='fk_applications_student_id'),
        sa.ForeignKeyConstraint(['employerId'], ['users.uid'], name='fk_applications_employer_id'),
        sa.PrimaryKeyConstraint('id'),
        # Closes the check-then-insert race on duplicate applications
        sa.UniqueConstraint('studentId', 'jobId', name='uq_applications_student_job')
    )
    op.create_index(op.f('ix_applications_jobId'), 'applications', ['jobId'], unique=False)
    op.create_index(op.f('ix_applications_studentId'), 'applications', ['studentId'], unique=False)
    op.create_index(op.f('ix_applications_employerId'), 'applications', ['employerId'], unique=False)
    op.create_index('ix_applications_employer_created', 'applications', ['employerId', 'createdAt'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_applications_employer_created', table_name='applications')
    op.drop_index(op.f('ix_applications_employerId'), table_name='applications')
    op.drop_index(op.f('ix_applications_studentId'), table_name='applications')
    op.drop_index(op.f('ix_applications_jobId'), table_name='applications')
    op.drop_table('applications')

    op.drop_index('ix_jobs_status_created', table_name='jobs')
    op.drop_index(op.f('ix_jobs_employerId'), table_name='jobs')
    op.drop_table('jobs')

    op.drop_index(op.f('ix_credentials_email'), table_name='credentials')
    op.drop_table('credentials')

    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
